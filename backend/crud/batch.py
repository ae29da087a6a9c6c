from datetime import timedelta
from sqlalchemy.orm import Session
from sqlalchemy import case
from models.batch import Batch
from models.medicine import Medicine
from schemas.batch import BatchCreate
from crud.audit_log import record_action
from utils import sqlalchemy_to_dict
from utils.dates import now_local, today_local
from utils.auth_utils import get_user_identifier

def get_batch(db: Session, batch_id: int):
    return db.query(Batch).filter(Batch.id == batch_id).first()

def get_batches_by_medicine(db: Session, medicine_id: int):
    return db.query(Batch).filter(Batch.medicine_id == medicine_id).order_by(Batch.expiry_date, Batch.id).all()

def get_available_batches(db: Session, medicine_id: int):
    """Sellable batches in FEFO order: in stock, not expired, earliest expiry first."""
    return (
        db.query(Batch)
        .filter(
            Batch.medicine_id == medicine_id,
            Batch.quantity >= 1,
            Batch.expiry_date >= today_local(),
        )
        .order_by(Batch.expiry_date.asc(), Batch.id.asc())
        .all()
    )

def allocate_fefo(db: Session, medicine_id: int, quantity: int, reserved: dict = None):
    """
    Split a requested quantity over the available batches, earliest expiry first.

    `reserved` maps batch id -> units already promised elsewhere in the same sale.
    Returns a list of (batch, units) pairs. Raises ValueError when stock is short.
    """
    reserved = reserved or {}
    allocations = []
    remaining = quantity
    for batch in get_available_batches(db, medicine_id):
        free = batch.quantity - reserved.get(batch.id, 0)
        if free <= 0:
            continue
        take = min(free, remaining)
        allocations.append((batch, take))
        remaining -= take
        if remaining == 0:
            break

    if remaining > 0:
        raise ValueError(
            f"Insufficient stock for medicine ID {medicine_id}. Available: {quantity - remaining}, Requested: {quantity}"
        )
    return allocations

def create_batch(db: Session, batch: BatchCreate, user=None, commit: bool = True):
    db_batch = Batch(**batch.model_dump(), created_by=get_user_identifier(user))
    db.add(db_batch)
    db.flush()
    record_action(db, user, 'CREATE', 'batches', db_batch.id, new_values=sqlalchemy_to_dict(db_batch), commit=False)
    if commit:
        db.commit()
        db.refresh(db_batch)
    return db_batch

def change_batch_quantity(db: Session, batch: Batch, delta: int) -> Batch:
    """
    Add `delta` to the batch quantity in a single UPDATE statement, flooring at zero.

    The arithmetic runs in the database so concurrent sales and adjustments cannot
    overwrite each other. Does not commit.
    """
    if delta >= 0:
        new_quantity = Batch.quantity + delta
    else:
        new_quantity = case((Batch.quantity + delta > 0, Batch.quantity + delta), else_=0)
    db.query(Batch).filter(Batch.id == batch.id).update(
        {Batch.quantity: new_quantity, Batch.updated_at: now_local()},
        synchronize_session=False,
    )
    db.refresh(batch)
    return batch

def update_batch_quantity(db: Session, batch_id: int, quantity: int, user=None):
    db_batch = get_batch(db, batch_id)
    if not db_batch:
        return None

    old_quantity = db_batch.quantity
    db_batch.quantity = max(0, quantity)
    db_batch.updated_by = get_user_identifier(user)
    record_action(
        db, user, 'UPDATE', 'batches', batch_id,
        old_values={"quantity": old_quantity}, new_values={"quantity": db_batch.quantity}, commit=False,
    )
    db.commit()
    db.refresh(db_batch)
    return db_batch

def get_expiring_batches(db: Session, days_ahead: int):
    """In-stock batches whose expiry falls between today and `days_ahead` days from now."""
    today = today_local()
    horizon = today + timedelta(days=days_ahead)
    rows = (
        db.query(Batch, Medicine.name, Medicine.brand)
        .join(Medicine, Batch.medicine_id == Medicine.id)
        .filter(
            Batch.expiry_date <= horizon,
            Batch.expiry_date >= today,
            Batch.quantity > 0,
        )
        .order_by(Batch.expiry_date.asc(), Batch.id.asc())
        .all()
    )
    return [{**sqlalchemy_to_dict(batch), "medicine_name": name, "brand": brand} for batch, name, brand in rows]
