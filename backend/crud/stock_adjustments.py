from typing import Optional
from sqlalchemy.orm import Session
from models.stock_adjustments import StockAdjustment, INCREASING_ADJUSTMENTS
from schemas.stock_adjustments import StockAdjustmentCreate
from crud import batch as crud_batch
from crud.audit_log import record_action
from utils import sqlalchemy_to_dict
from utils.auth_utils import get_user_identifier

def create_stock_adjustment(db: Session, adjustment: StockAdjustmentCreate, user=None):
    """
    Record a manual stock correction and apply it to the batch.

    add/addition/return raise the batch quantity; remove/damage/expired lower it,
    never below zero. Returns None when the batch does not exist.
    """
    batch = crud_batch.get_batch(db, adjustment.batch_id)
    if not batch:
        return None
    if adjustment.medicine_id is not None and adjustment.medicine_id != batch.medicine_id:
        raise ValueError(f"Batch {batch.id} does not belong to medicine {adjustment.medicine_id}.")

    if adjustment.adjustment_type in INCREASING_ADJUSTMENTS:
        delta = adjustment.quantity
    else:
        delta = -adjustment.quantity

    try:
        old_quantity = batch.quantity
        crud_batch.change_batch_quantity(db, batch, delta)

        db_adjustment = StockAdjustment(
            batch_id=batch.id,
            medicine_id=batch.medicine_id,
            adjustment_type=adjustment.adjustment_type,
            quantity=adjustment.quantity,
            old_quantity=old_quantity,
            new_quantity=batch.quantity,
            reason=adjustment.reason,
            created_by_id=user.id if user is not None else None,
            created_by=get_user_identifier(user),
        )
        db.add(db_adjustment)
        db.flush()
        record_action(
            db, user, 'ADJUST', 'stock_adjustments', db_adjustment.id,
            old_values={"batch_id": batch.id, "quantity": old_quantity},
            new_values=sqlalchemy_to_dict(db_adjustment),
            commit=False,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(db_adjustment)
    return db_adjustment

def get_stock_adjustments(db: Session, medicine_id: Optional[int] = None):
    query = db.query(StockAdjustment)
    if medicine_id:
        query = query.filter(StockAdjustment.medicine_id == medicine_id)
    return query.order_by(StockAdjustment.created_at.desc(), StockAdjustment.id.desc()).all()
