from pydantic import BaseModel, Field
from decimal import Decimal
from typing import Optional

class MedicineBase(BaseModel):
    name: str
    generic_name: Optional[str] = None
    brand: Optional[str] = None
    barcode: Optional[str] = None
    category_id: Optional[int] = None
    unit: str = "strip"
    mrp: Decimal = Field(Decimal("0"), ge=0)
    selling_price: Decimal = Field(Decimal("0"), ge=0)
    reorder_level: int = Field(10, ge=0)
    requires_prescription: bool = False
    is_active: bool = True

class MedicineCreate(MedicineBase):
    pass

class MedicineUpdate(BaseModel):
    name: Optional[str] = None
    generic_name: Optional[str] = None
    brand: Optional[str] = None
    barcode: Optional[str] = None
    category_id: Optional[int] = None
    unit: Optional[str] = None
    mrp: Optional[Decimal] = Field(None, ge=0)
    selling_price: Optional[Decimal] = Field(None, ge=0)
    reorder_level: Optional[int] = Field(None, ge=0)
    requires_prescription: Optional[bool] = None
    is_active: Optional[bool] = None

class Medicine(MedicineBase):
    id: int

    class Config:
        from_attributes = True

class LowStockMedicine(Medicine):
    total_stock: int
