from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment
from openpyxl.utils import get_column_letter
from io import BytesIO
from datetime import date
import logging

from database import get_db
from crud.medicine import get_low_stock_medicines
from crud.batch import get_expiring_batches
from crud.app_config import get_int_config
from models.users import User as UserModel
from utils.auth_utils import get_current_user
from utils.dates import today_local

router = APIRouter(prefix="/reports", tags=["Reports"])
logger = logging.getLogger("reports")

HEADER_FONT = Font(bold=True, color="FFFFFF")
HEADER_FILL = PatternFill(start_color="4F81BD", end_color="4F81BD", fill_type="solid")

LOW_STOCK_HEADERS = ["Medicine", "Generic Name", "Brand", "Barcode", "Total Stock", "Reorder Level"]
EXPIRING_HEADERS = ["Medicine", "Brand", "Batch Number", "Quantity", "Expiry Date", "Days Left"]


def _write_header(ws, headers):
    ws.append(headers)
    for cell in ws[1]:
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = Alignment(horizontal="center")
    for col_idx, header in enumerate(headers, start=1):
        ws.column_dimensions[get_column_letter(col_idx)].width = max(14, len(header) + 4)


def build_inventory_alerts_workbook(db: Session) -> Workbook:
    today = today_local()
    days_ahead = get_int_config(db, "expiry_alert_days", 30)

    wb = Workbook()
    ws = wb.active
    ws.title = "Low Stock"
    _write_header(ws, LOW_STOCK_HEADERS)
    for item in get_low_stock_medicines(db):
        ws.append([
            item["name"],
            item.get("generic_name"),
            item.get("brand"),
            item.get("barcode"),
            item["total_stock"],
            item["reorder_level"],
        ])

    ws = wb.create_sheet("Expiring")
    _write_header(ws, EXPIRING_HEADERS)
    for batch in get_expiring_batches(db, days_ahead):
        expiry = batch["expiry_date"]
        # sqlalchemy_to_dict renders dates as ISO strings
        expiry_date = date.fromisoformat(expiry) if isinstance(expiry, str) else expiry
        ws.append([
            batch["medicine_name"],
            batch.get("brand"),
            batch["batch_number"],
            batch["quantity"],
            expiry_date,
            (expiry_date - today).days,
        ])
    return wb


@router.get("/inventory-alerts.xlsx")
def download_inventory_alerts(db: Session = Depends(get_db), user: UserModel = Depends(get_current_user)):
    """Excel workbook with a "Low Stock" and an "Expiring" sheet."""
    wb = build_inventory_alerts_workbook(db)
    output = BytesIO()
    wb.save(output)
    output.seek(0)
    filename = f"inventory_alerts_{today_local().strftime('%Y%m%d')}.xlsx"
    logger.info(f"Inventory alerts workbook generated by {user.username}")
    return StreamingResponse(
        output,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
