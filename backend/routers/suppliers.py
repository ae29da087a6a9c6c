from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
import logging

from database import get_db
import crud.suppliers as crud_suppliers
from models.users import User as UserModel
from schemas.suppliers import Supplier, SupplierCreate, SupplierUpdate
from utils.auth_utils import get_current_user, require_owner

router = APIRouter(prefix="/suppliers", tags=["Suppliers"])
logger = logging.getLogger("suppliers")

@router.post("/", response_model=Supplier, status_code=status.HTTP_201_CREATED)
def create_supplier(
    supplier: SupplierCreate,
    db: Session = Depends(get_db),
    user: UserModel = Depends(require_owner),
):
    """Create a new supplier."""
    if crud_suppliers.get_supplier_by_name(db, supplier.name):
        raise HTTPException(status_code=400, detail="Supplier with this name already exists")
    db_supplier = crud_suppliers.create_supplier(db, supplier, user)
    logger.info(f"Supplier '{db_supplier.name}' created by {user.username}")
    return db_supplier

@router.get("/", response_model=List[Supplier])
def read_suppliers(
    active_only: bool = False,
    db: Session = Depends(get_db),
    user: UserModel = Depends(get_current_user),
):
    """Retrieve suppliers ordered by name."""
    return crud_suppliers.get_all_suppliers(db, active_only=active_only)

@router.get("/{supplier_id}", response_model=Supplier)
def read_supplier(supplier_id: int, db: Session = Depends(get_db), user: UserModel = Depends(get_current_user)):
    """Retrieve a single supplier by ID."""
    db_supplier = crud_suppliers.get_supplier(db, supplier_id)
    if db_supplier is None:
        raise HTTPException(status_code=404, detail="Supplier not found")
    return db_supplier

@router.patch("/{supplier_id}", response_model=Supplier)
def update_supplier(
    supplier_id: int,
    supplier: SupplierUpdate,
    db: Session = Depends(get_db),
    user: UserModel = Depends(require_owner),
):
    """Update an existing supplier."""
    if supplier.name is not None:
        existing = crud_suppliers.get_supplier_by_name(db, supplier.name)
        if existing and existing.id != supplier_id:
            raise HTTPException(status_code=400, detail="Supplier with this name already exists")

    db_supplier = crud_suppliers.update_supplier(db, supplier_id, supplier, user)
    if db_supplier is None:
        raise HTTPException(status_code=404, detail="Supplier not found")
    logger.info(f"Supplier '{db_supplier.name}' (ID: {supplier_id}) updated by {user.username}")
    return db_supplier
