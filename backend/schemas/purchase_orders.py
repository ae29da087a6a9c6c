from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal
from models.purchase_orders import PurchaseOrderStatus # Import the enum
from utils.dates import today_local

class PurchaseOrderItemBase(BaseModel):
    medicine_id: int
    quantity: int = Field(..., gt=0)
    unit_price: Decimal = Field(..., ge=0)
    batch_number: Optional[str] = None
    expiry_date: Optional[date] = None

class PurchaseOrderItemCreateRequest(PurchaseOrderItemBase):
    @field_validator('expiry_date')
    @classmethod
    def validate_expiry_not_past(cls, v):
        if v is not None and v < today_local():
            raise ValueError('Expiry date cannot be in the past')
        return v

class PurchaseOrderItem(PurchaseOrderItemBase):
    id: int
    line_total: Decimal

    class Config:
        from_attributes = True

class PurchaseOrderCreate(BaseModel):
    supplier_id: int
    notes: Optional[str] = None
    items: List[PurchaseOrderItemCreateRequest] = Field(..., min_length=1)

class PurchaseOrderStatusUpdate(BaseModel):
    status: PurchaseOrderStatus

class PurchaseOrder(BaseModel):
    id: int
    order_number: str
    supplier_id: int
    status: PurchaseOrderStatus
    total_amount: Decimal
    notes: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime
    received_at: Optional[datetime] = None
    items: List[PurchaseOrderItem] = []

    class Config:
        from_attributes = True
