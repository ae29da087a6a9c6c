from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from models.stock_adjustments import AdjustmentType

class StockAdjustmentCreate(BaseModel):
    batch_id: int
    # Taken from the batch when omitted
    medicine_id: Optional[int] = None
    adjustment_type: AdjustmentType
    quantity: int = Field(..., gt=0)
    reason: Optional[str] = None

class StockAdjustment(BaseModel):
    id: int
    batch_id: int
    medicine_id: int
    adjustment_type: AdjustmentType
    quantity: int
    old_quantity: Optional[int] = None
    new_quantity: Optional[int] = None
    reason: Optional[str] = None
    created_by_id: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True
