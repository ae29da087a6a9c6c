from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal

class InvoiceItemCreateRequest(BaseModel):
    medicine_id: int
    # Without a batch the quantity is drawn from the earliest-expiring batches (FEFO)
    batch_id: Optional[int] = None
    quantity: int = Field(..., gt=0)
    price: Decimal = Field(..., ge=0)

class InvoiceCreate(BaseModel):
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    discount_amount: Decimal = Field(Decimal("0"), ge=0)
    tax_amount: Decimal = Field(Decimal("0"), ge=0)
    payment_method: str = "cash"
    items: List[InvoiceItemCreateRequest] = Field(..., min_length=1)

class InvoiceItem(BaseModel):
    id: int
    medicine_id: int
    batch_id: int
    quantity: int
    price: Decimal
    line_total: Decimal

    class Config:
        from_attributes = True

class InvoiceItemDetail(InvoiceItem):
    medicine_name: str
    brand: Optional[str] = None
    batch_number: str

class Invoice(BaseModel):
    id: int
    invoice_number: str
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    subtotal: Decimal
    discount_amount: Decimal
    tax_amount: Decimal
    total_amount: Decimal
    payment_method: Optional[str] = None
    created_by_id: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True

class InvoiceWithItems(Invoice):
    items: List[InvoiceItemDetail] = []

class DailySales(BaseModel):
    total_bills: int
    total_revenue: Decimal
    total_discount: Decimal
    avg_bill_value: Decimal

class NextInvoiceNumber(BaseModel):
    invoice_number: str
