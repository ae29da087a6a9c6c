from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List
import logging

from database import get_db
import crud.medicine as crud_medicine
import crud.batch as crud_batch
import crud.categories as crud_categories
import crud.stock_adjustments as crud_stock_adjustments
from models.users import User as UserModel
from schemas.medicine import Medicine, MedicineCreate, MedicineUpdate, LowStockMedicine
from schemas.batch import Batch
from schemas.stock_adjustments import StockAdjustment
from utils.auth_utils import get_current_user

router = APIRouter(prefix="/medicines", tags=["Medicines"])
logger = logging.getLogger("medicine")

@router.get("/", response_model=List[Medicine])
def get_all_medicines(
    skip: int = 0,
    limit: int = 100,
    active_only: bool = False,
    db: Session = Depends(get_db),
    user: UserModel = Depends(get_current_user),
):
    """Get all medicines ordered by name, with pagination."""
    return crud_medicine.get_all_medicines(db, skip=skip, limit=limit, active_only=active_only)

@router.get("/search", response_model=List[Medicine])
def search_medicines(q: str = Query(..., min_length=1), db: Session = Depends(get_db), user: UserModel = Depends(get_current_user)):
    """Search by name, generic name, brand or exact barcode."""
    return crud_medicine.search_medicines(db, q)

@router.get("/low-stock", response_model=List[LowStockMedicine])
def get_low_stock_medicines(db: Session = Depends(get_db), user: UserModel = Depends(get_current_user)):
    """Active medicines whose total stock is at or below their reorder level."""
    return crud_medicine.get_low_stock_medicines(db)

@router.get("/barcode/{barcode}", response_model=Medicine)
def get_medicine_by_barcode(barcode: str, db: Session = Depends(get_db), user: UserModel = Depends(get_current_user)):
    db_medicine = crud_medicine.get_medicine_by_barcode(db, barcode)
    if db_medicine is None:
        raise HTTPException(status_code=404, detail="Medicine not found")
    return db_medicine

@router.get("/{medicine_id}", response_model=Medicine)
def get_medicine(medicine_id: int, db: Session = Depends(get_db), user: UserModel = Depends(get_current_user)):
    """Get a specific medicine by ID."""
    db_medicine = crud_medicine.get_medicine(db, medicine_id)
    if db_medicine is None:
        raise HTTPException(status_code=404, detail="Medicine not found")
    return db_medicine

@router.post("/", response_model=Medicine, status_code=status.HTTP_201_CREATED)
def create_medicine(
    medicine: MedicineCreate,
    db: Session = Depends(get_db),
    user: UserModel = Depends(get_current_user),
):
    """Create a new medicine."""
    if medicine.barcode and crud_medicine.get_medicine_by_barcode(db, medicine.barcode):
        raise HTTPException(status_code=400, detail="A medicine with this barcode already exists")
    if medicine.category_id is not None and not crud_categories.get_category(db, medicine.category_id):
        raise HTTPException(status_code=400, detail=f"Category with ID {medicine.category_id} not found.")
    db_medicine = crud_medicine.create_medicine(db, medicine, user)
    logger.info(f"Medicine '{db_medicine.name}' (ID: {db_medicine.id}) created by {user.username}")
    return db_medicine

@router.patch("/{medicine_id}", response_model=Medicine)
def update_medicine(
    medicine_id: int,
    medicine_data: MedicineUpdate,
    db: Session = Depends(get_db),
    user: UserModel = Depends(get_current_user),
):
    """Update an existing medicine."""
    if medicine_data.barcode:
        existing = crud_medicine.get_medicine_by_barcode(db, medicine_data.barcode)
        if existing and existing.id != medicine_id:
            raise HTTPException(status_code=400, detail="A medicine with this barcode already exists")

    db_medicine = crud_medicine.update_medicine(db, medicine_id, medicine_data, user)
    if db_medicine is None:
        raise HTTPException(status_code=404, detail="Medicine not found")
    return db_medicine

@router.get("/{medicine_id}/batches", response_model=List[Batch])
def get_medicine_batches(medicine_id: int, db: Session = Depends(get_db), user: UserModel = Depends(get_current_user)):
    """All batches of a medicine, earliest expiry first."""
    return crud_batch.get_batches_by_medicine(db, medicine_id)

@router.get("/{medicine_id}/batches/available", response_model=List[Batch])
def get_available_batches(medicine_id: int, db: Session = Depends(get_db), user: UserModel = Depends(get_current_user)):
    """Sellable batches in FEFO order."""
    return crud_batch.get_available_batches(db, medicine_id)

@router.get("/{medicine_id}/stock-adjustments", response_model=List[StockAdjustment])
def get_medicine_stock_adjustments(medicine_id: int, db: Session = Depends(get_db), user: UserModel = Depends(get_current_user)):
    return crud_stock_adjustments.get_stock_adjustments(db, medicine_id=medicine_id)
