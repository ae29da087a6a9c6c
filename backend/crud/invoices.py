import logging
from decimal import Decimal
from datetime import date
from sqlalchemy.orm import Session
from sqlalchemy import func
from models.invoices import Invoice
from models.invoice_items import InvoiceItem
from models.medicine import Medicine
from models.batch import Batch
from schemas.invoices import InvoiceCreate
from crud import batch as crud_batch
from crud.audit_log import record_action
from utils import sqlalchemy_to_dict
from utils.dates import today_local, day_bounds
from utils.numbering import next_daily_number
from utils.auth_utils import get_user_identifier

logger = logging.getLogger("invoices")

TWO_PLACES = Decimal("0.01")


def _money(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(TWO_PLACES)


def get_all_invoices(db: Session, skip: int = 0, limit: int = 100):
    return db.query(Invoice).order_by(Invoice.created_at.desc(), Invoice.id.desc()).offset(skip).limit(limit).all()


def get_invoice(db: Session, invoice_id: int):
    return db.query(Invoice).filter(Invoice.id == invoice_id).first()


def get_invoice_with_items(db: Session, invoice_id: int):
    """Invoice header plus its lines, each with medicine name, brand and batch number."""
    invoice = get_invoice(db, invoice_id)
    if not invoice:
        return None

    rows = (
        db.query(InvoiceItem, Medicine.name, Medicine.brand, Batch.batch_number)
        .join(Medicine, InvoiceItem.medicine_id == Medicine.id)
        .join(Batch, InvoiceItem.batch_id == Batch.id)
        .filter(InvoiceItem.invoice_id == invoice_id)
        .order_by(InvoiceItem.id)
        .all()
    )
    items = [
        {**sqlalchemy_to_dict(item), "medicine_name": name, "brand": brand, "batch_number": batch_number}
        for item, name, brand, batch_number in rows
    ]
    return {**sqlalchemy_to_dict(invoice), "items": items}


def get_next_invoice_number(db: Session, on_date: date = None) -> str:
    return next_daily_number(db, Invoice.invoice_number, "INV", on_date or today_local())


def get_daily_sales(db: Session, day: date = None) -> dict:
    start, end = day_bounds(day or today_local())
    total_bills, total_revenue, total_discount, avg_bill_value = (
        db.query(
            func.count(Invoice.id),
            func.coalesce(func.sum(Invoice.total_amount), 0),
            func.coalesce(func.sum(Invoice.discount_amount), 0),
            func.coalesce(func.avg(Invoice.total_amount), 0),
        )
        .filter(Invoice.created_at >= start, Invoice.created_at <= end)
        .one()
    )
    return {
        "total_bills": int(total_bills or 0),
        "total_revenue": _money(total_revenue),
        "total_discount": _money(total_discount),
        "avg_bill_value": _money(avg_bill_value),
    }


def get_sales_total_since(db: Session, since) -> Decimal:
    total = db.query(func.coalesce(func.sum(Invoice.total_amount), 0)).filter(Invoice.created_at >= since).scalar()
    return _money(total)


def _resolve_lines(db: Session, items):
    """
    Validate the requested items and pin every unit to a batch.

    Returns (batch, medicine_id, quantity, price) tuples. Items without a batch are
    spread over the medicine's batches in FEFO order. Nothing is written here.
    """
    today = today_local()
    reserved = {}
    lines = []
    for item in items:
        medicine = db.query(Medicine).filter(Medicine.id == item.medicine_id).first()
        if not medicine or not medicine.is_active:
            raise ValueError(f"Medicine with ID {item.medicine_id} not found.")

        if item.batch_id is None:
            allocations = crud_batch.allocate_fefo(db, medicine.id, item.quantity, reserved=reserved)
        else:
            batch = crud_batch.get_batch(db, item.batch_id)
            if not batch or batch.medicine_id != medicine.id:
                raise ValueError(f"Batch with ID {item.batch_id} not found for medicine '{medicine.name}'.")
            if batch.expiry_date < today:
                raise ValueError(f"Batch '{batch.batch_number}' of '{medicine.name}' expired on {batch.expiry_date}.")
            available = batch.quantity - reserved.get(batch.id, 0)
            if available < item.quantity:
                raise ValueError(
                    f"Insufficient stock for '{medicine.name}' in batch '{batch.batch_number}'. Available: {available}, Requested: {item.quantity}"
                )
            allocations = [(batch, item.quantity)]

        for batch, quantity in allocations:
            reserved[batch.id] = reserved.get(batch.id, 0) + quantity
            lines.append((batch, medicine.id, quantity, item.price))
    return lines


def create_invoice(db: Session, invoice: InvoiceCreate, user=None) -> Invoice:
    """
    Create an invoice, its line items and the matching batch deductions as one unit.

    Either every row is written and every batch decremented, or nothing is:
    any failure rolls the whole transaction back.
    """
    try:
        lines = _resolve_lines(db, invoice.items)

        subtotal = sum((Decimal(quantity) * price for _, _, quantity, price in lines), Decimal(0))
        total_amount = subtotal - invoice.discount_amount + invoice.tax_amount
        if total_amount < 0:
            raise ValueError("Discount cannot exceed the invoice amount.")

        db_invoice = Invoice(
            invoice_number=get_next_invoice_number(db),
            customer_name=invoice.customer_name,
            customer_phone=invoice.customer_phone,
            subtotal=_money(subtotal),
            discount_amount=_money(invoice.discount_amount),
            tax_amount=_money(invoice.tax_amount),
            total_amount=_money(total_amount),
            payment_method=invoice.payment_method,
            created_by_id=user.id if user is not None else None,
            created_by=get_user_identifier(user),
        )
        db.add(db_invoice)
        db.flush() # Flush to get db_invoice.id before adding items

        for batch, medicine_id, quantity, price in lines:
            db.add(
                InvoiceItem(
                    invoice_id=db_invoice.id,
                    medicine_id=medicine_id,
                    batch_id=batch.id,
                    quantity=quantity,
                    price=price,
                    line_total=_money(Decimal(quantity) * price),
                )
            )
        db.flush()

        for batch, _, quantity, _ in lines:
            crud_batch.change_batch_quantity(db, batch, -quantity)

        record_action(
            db, user, 'SALE', 'invoices', db_invoice.id,
            new_values={
                "invoice_number": db_invoice.invoice_number,
                "total_amount": float(db_invoice.total_amount),
                "lines": [{"batch_id": b.id, "quantity": q} for b, _, q, _ in lines],
            },
            commit=False,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(db_invoice)
    logger.info(f"Invoice {db_invoice.invoice_number} (ID: {db_invoice.id}) created by {get_user_identifier(user)} for {db_invoice.total_amount}")
    return db_invoice
