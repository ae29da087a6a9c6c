from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List
import logging

from database import get_db
import crud.batch as crud_batch
import crud.medicine as crud_medicine
import crud.suppliers as crud_suppliers
from models.users import User as UserModel
from schemas.batch import Batch, BatchCreate, BatchQuantityUpdate, ExpiringBatch
from utils.auth_utils import get_current_user

router = APIRouter(prefix="/batches", tags=["Batches"])
logger = logging.getLogger("batch")

@router.get("/expiring", response_model=List[ExpiringBatch])
def get_expiring_batches(
    days: int = Query(30, ge=0, le=365),
    db: Session = Depends(get_db),
    user: UserModel = Depends(get_current_user),
):
    """In-stock batches expiring within the next `days` days."""
    return crud_batch.get_expiring_batches(db, days)

@router.get("/{batch_id}", response_model=Batch)
def get_batch(batch_id: int, db: Session = Depends(get_db), user: UserModel = Depends(get_current_user)):
    db_batch = crud_batch.get_batch(db, batch_id)
    if db_batch is None:
        raise HTTPException(status_code=404, detail="Batch not found")
    return db_batch

@router.post("/", response_model=Batch, status_code=status.HTTP_201_CREATED)
def create_batch(
    batch: BatchCreate,
    db: Session = Depends(get_db),
    user: UserModel = Depends(get_current_user),
):
    """Receive a new lot of a medicine into stock."""
    if not crud_medicine.get_medicine(db, batch.medicine_id):
        raise HTTPException(status_code=400, detail=f"Medicine with ID {batch.medicine_id} not found.")
    if batch.supplier_id is not None and not crud_suppliers.get_supplier(db, batch.supplier_id):
        raise HTTPException(status_code=400, detail=f"Supplier with ID {batch.supplier_id} not found.")

    db_batch = crud_batch.create_batch(db, batch, user)
    logger.info(f"Batch '{db_batch.batch_number}' ({db_batch.quantity} units) of medicine {db_batch.medicine_id} added by {user.username}")
    return db_batch

@router.patch("/{batch_id}/quantity", response_model=Batch)
def update_batch_quantity(
    batch_id: int,
    data: BatchQuantityUpdate,
    db: Session = Depends(get_db),
    user: UserModel = Depends(get_current_user),
):
    """Overwrite a batch quantity. Negative values are stored as zero."""
    db_batch = crud_batch.update_batch_quantity(db, batch_id, data.quantity, user)
    if db_batch is None:
        raise HTTPException(status_code=404, detail="Batch not found")
    return db_batch
