from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from database import get_db
import crud.stock_adjustments as crud_stock_adjustments
from models.users import User as UserModel
from schemas.stock_adjustments import StockAdjustment, StockAdjustmentCreate
from utils.auth_utils import get_current_user

router = APIRouter(prefix="/stock-adjustments", tags=["Stock Adjustments"])
logger = logging.getLogger("stock_adjustments")

@router.post("/", response_model=StockAdjustment, status_code=status.HTTP_201_CREATED)
def create_stock_adjustment(
    adjustment: StockAdjustmentCreate,
    db: Session = Depends(get_db),
    user: UserModel = Depends(get_current_user),
):
    """Correct a batch quantity (add, remove, damage, expired, return)."""
    try:
        db_adjustment = crud_stock_adjustments.create_stock_adjustment(db, adjustment, user)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if db_adjustment is None:
        raise HTTPException(status_code=404, detail="Batch not found")

    logger.info(
        f"Stock adjustment '{db_adjustment.adjustment_type.value}' of {db_adjustment.quantity} on batch {db_adjustment.batch_id} "
        f"({db_adjustment.old_quantity} -> {db_adjustment.new_quantity}) by {user.username}"
    )
    return db_adjustment

@router.get("/", response_model=List[StockAdjustment])
def read_stock_adjustments(
    medicine_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: UserModel = Depends(get_current_user),
):
    """Adjustment history, newest first."""
    return crud_stock_adjustments.get_stock_adjustments(db, medicine_id=medicine_id)
