import logging
import unicodedata
from fpdf import FPDF
from sqlalchemy.orm import Session
from crud import invoices as crud_invoices
from crud import app_config as crud_app_config
from utils.formatting import format_indian_currency, amount_to_words

logger = logging.getLogger(__name__)

# Core PDF fonts are latin-1 only, so the rupee sign is spelled out
CURRENCY = "Rs."

_PUNCTUATION = str.maketrans({
    "–": "-", "—": "-", "‘": "'", "’": "'",
    "“": '"', "”": '"', "…": "...", "₹": CURRENCY,
})


def pdf_text(value) -> str:
    """Fold free text (store, customer and medicine names) into latin-1 for the core fonts.

    Accented letters lose their accent, common typographic punctuation becomes ASCII,
    anything else (e.g. Devanagari) is printed as '?'.
    """
    chars = []
    for ch in str(value or "").translate(_PUNCTUATION):
        if ord(ch) < 256:
            chars.append(ch)
            continue
        base = unicodedata.normalize("NFKD", ch).encode("latin-1", "ignore").decode("latin-1")
        chars.append(base or "?")
    return "".join(chars)


class PDF(FPDF):
    def footer(self):
        self.set_y(-15)
        self.set_font('Helvetica', 'I', 8)
        self.cell(0, 10, f'Page {self.page_no()}', 0, 0, 'C')


def generate_invoice_receipt(db: Session, invoice_id: int) -> bytes:
    """
    Render a printable bill for an invoice.

    Args:
        db: The database session.
        invoice_id: The ID of the invoice.

    Returns:
        The PDF document as bytes.
    """
    invoice = crud_invoices.get_invoice_with_items(db, invoice_id)
    if not invoice:
        raise FileNotFoundError("Invoice not found")

    store_name = crud_app_config.get_config_value(db, "store_name", "Pharmacy")
    store_address = crud_app_config.get_config_value(db, "store_address", "")
    store_phone = crud_app_config.get_config_value(db, "store_phone", "")

    pdf = PDF()
    pdf.add_page()

    # Store header
    pdf.set_font('Helvetica', 'B', 16)
    pdf.cell(0, 10, pdf_text(store_name), 0, 1, 'C')
    pdf.set_font('Helvetica', '', 10)
    if store_address:
        pdf.cell(0, 6, pdf_text(store_address), 0, 1, 'C')
    if store_phone:
        pdf.cell(0, 6, f'Phone: {pdf_text(store_phone)}', 0, 1, 'C')
    pdf.ln(6)

    # Invoice info
    pdf.set_font('Helvetica', '', 11)
    pdf.cell(0, 7, f'Invoice #: {pdf_text(invoice["invoice_number"])}', 0, 1, 'L')
    pdf.cell(0, 7, f'Date: {str(invoice["created_at"])[:16].replace("T", " ")}', 0, 1, 'L')
    if invoice.get("customer_name"):
        pdf.cell(0, 7, f'Customer: {pdf_text(invoice["customer_name"])}', 0, 1, 'L')
    if invoice.get("customer_phone"):
        pdf.cell(0, 7, f'Phone: {pdf_text(invoice["customer_phone"])}', 0, 1, 'L')
    pdf.ln(4)

    # Items table
    pdf.set_font('Helvetica', 'B', 10)
    pdf.cell(80, 8, 'Medicine', 1, 0, 'C')
    pdf.cell(30, 8, 'Batch', 1, 0, 'C')
    pdf.cell(20, 8, 'Qty', 1, 0, 'C')
    pdf.cell(30, 8, 'Price', 1, 0, 'C')
    pdf.cell(30, 8, 'Amount', 1, 1, 'C')

    pdf.set_font('Helvetica', '', 10)
    for item in invoice["items"]:
        pdf.cell(80, 8, pdf_text(item["medicine_name"])[:40], 1, 0, 'L')
        pdf.cell(30, 8, pdf_text(item["batch_number"]), 1, 0, 'L')
        pdf.cell(20, 8, str(item["quantity"]), 1, 0, 'R')
        pdf.cell(30, 8, f'{item["price"]:.2f}', 1, 0, 'R')
        pdf.cell(30, 8, f'{item["line_total"]:.2f}', 1, 1, 'R')
    pdf.ln(4)

    # Totals
    pdf.set_font('Helvetica', 'B', 10)
    for label, key in (('Subtotal', 'subtotal'), ('Discount', 'discount_amount'), ('Tax', 'tax_amount'), ('Total', 'total_amount')):
        pdf.cell(130, 8, '', 0, 0)
        pdf.cell(30, 8, f'{label}:', 1, 0, 'R')
        pdf.cell(30, 8, format_indian_currency(invoice[key], symbol=CURRENCY), 1, 1, 'R')

    pdf.ln(4)
    pdf.set_font('Helvetica', 'I', 10)
    pdf.multi_cell(0, 6, amount_to_words(invoice["total_amount"]))

    logger.debug(f"Receipt rendered for invoice {invoice['invoice_number']}")
    return bytes(pdf.output())
