"""
Pytest configuration and fixtures for the API tests.

Every test gets a fresh in-memory SQLite database; the scheduler is disabled.
"""
import os
import tempfile

# Must be set before the application modules are imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENABLE_SCHEDULER"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="pharmacy-logs-"))

from datetime import timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from database import Base, SessionLocal, engine
from main import app
from models.users import UserRole
from schemas.batch import BatchCreate
from schemas.medicine import MedicineCreate
from schemas.suppliers import SupplierCreate
from schemas.users import UserCreate
from crud import batch as crud_batch
from crud import medicine as crud_medicine
from crud import suppliers as crud_suppliers
from crud import users as crud_users
from utils.dates import today_local

OWNER_PASSWORD = "owner-pass-123"
STAFF_PASSWORD = "staff-pass-123"


@pytest.fixture(scope='function')
def db():
    """Create the tables, hand out a session, drop everything afterwards"""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope='function')
def client(db):
    """FastAPI test client; startup seeds the default settings"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope='function')
def owner(db):
    return crud_users.create_user(
        db, UserCreate(username="owner", name="Store Owner", role=UserRole.OWNER, password=OWNER_PASSWORD)
    )


@pytest.fixture(scope='function')
def staff(db, owner):
    return crud_users.create_user(
        db, UserCreate(username="counter", name="Counter Staff", role=UserRole.STAFF, password=STAFF_PASSWORD),
        changed_by=owner,
    )


def login(client, username, password):
    """Helper function to get a bearer header for a user"""
    response = client.post('/auth/login', data={'username': username, 'password': password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture(scope='function')
def owner_headers(client, owner):
    return login(client, owner.username, OWNER_PASSWORD)


@pytest.fixture(scope='function')
def staff_headers(client, staff):
    return login(client, staff.username, STAFF_PASSWORD)


def make_medicine(db, name="Paracetamol 500", reorder_level=10, **kwargs):
    data = {"selling_price": Decimal("25.00"), "mrp": Decimal("30.00"), **kwargs}
    return crud_medicine.create_medicine(db, MedicineCreate(name=name, reorder_level=reorder_level, **data))


def make_batch(db, medicine, quantity=10, expires_in_days=180, batch_number=None, **kwargs):
    return crud_batch.create_batch(
        db,
        BatchCreate(
            medicine_id=medicine.id,
            batch_number=batch_number or f"B-{medicine.id}-{expires_in_days}",
            quantity=quantity,
            purchase_price=Decimal("15.00"),
            expiry_date=today_local() + timedelta(days=expires_in_days),
            **kwargs,
        ),
    )


def make_supplier(db, name="Sun Distributors"):
    return crud_suppliers.create_supplier(db, SupplierCreate(name=name, phone="9876543210"))
