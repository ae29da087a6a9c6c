from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
import logging

from database import get_db
import crud.invoices as crud_invoices
from models.users import User as UserModel
from schemas.invoices import Invoice, InvoiceCreate, InvoiceWithItems, DailySales, NextInvoiceNumber
from utils.auth_utils import get_current_user
from utils.receipt_utils import generate_invoice_receipt

router = APIRouter(prefix="/invoices", tags=["Invoices"])
logger = logging.getLogger("invoices")

@router.post("/", response_model=InvoiceWithItems, status_code=status.HTTP_201_CREATED)
def create_invoice(
    invoice: InvoiceCreate,
    db: Session = Depends(get_db),
    user: UserModel = Depends(get_current_user),
):
    """Bill a sale. Stock is deducted from the chosen batches, or FEFO when no batch is given."""
    try:
        db_invoice = crud_invoices.create_invoice(db, invoice, user)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"Error creating invoice: {e}")
        raise HTTPException(status_code=500, detail="Internal server error while creating invoice.")
    return crud_invoices.get_invoice_with_items(db, db_invoice.id)

@router.get("/", response_model=List[Invoice])
def read_invoices(skip: int = 0, limit: int = 100, db: Session = Depends(get_db), user: UserModel = Depends(get_current_user)):
    """Retrieve invoices, newest first."""
    return crud_invoices.get_all_invoices(db, skip=skip, limit=limit)

@router.get("/next-number", response_model=NextInvoiceNumber)
def read_next_invoice_number(db: Session = Depends(get_db), user: UserModel = Depends(get_current_user)):
    return {"invoice_number": crud_invoices.get_next_invoice_number(db)}

@router.get("/daily-sales", response_model=DailySales)
def read_daily_sales(day: Optional[date] = None, db: Session = Depends(get_db), user: UserModel = Depends(get_current_user)):
    """Bill count, revenue, discount and average bill value for one day (today by default)."""
    return crud_invoices.get_daily_sales(db, day)

@router.get("/{invoice_id}", response_model=InvoiceWithItems)
def read_invoice(invoice_id: int, db: Session = Depends(get_db), user: UserModel = Depends(get_current_user)):
    invoice = crud_invoices.get_invoice_with_items(db, invoice_id)
    if invoice is None:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return invoice

@router.get("/{invoice_id}/receipt")
def download_invoice_receipt(invoice_id: int, db: Session = Depends(get_db), user: UserModel = Depends(get_current_user)):
    """Printable PDF bill."""
    try:
        pdf_bytes = generate_invoice_receipt(db, invoice_id)
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f"inline; filename=invoice_{invoice_id}.pdf"},
    )
