from typing import Optional
from pydantic import BaseModel, Field, field_validator, ValidationInfo
from decimal import Decimal
from datetime import date, datetime

class BatchBase(BaseModel):
    medicine_id: int
    supplier_id: Optional[int] = None
    batch_number: str
    quantity: int = Field(..., ge=0)
    purchase_price: Decimal = Field(Decimal("0"), ge=0)
    mrp: Optional[Decimal] = Field(None, ge=0)
    manufacture_date: Optional[date] = None
    expiry_date: date

    @field_validator('expiry_date')
    @classmethod
    def validate_expiry_after_manufacture(cls, v, info: ValidationInfo):
        manufactured = info.data.get('manufacture_date')
        if manufactured and v <= manufactured:
            raise ValueError('Expiry date must be after the manufacture date')
        return v

class BatchCreate(BatchBase):
    pass

class BatchQuantityUpdate(BaseModel):
    quantity: int

class Batch(BatchBase):
    id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ExpiringBatch(Batch):
    medicine_name: str
    brand: Optional[str] = None
