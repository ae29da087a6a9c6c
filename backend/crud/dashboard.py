from sqlalchemy.orm import Session

from crud import medicine as crud_medicine
from crud import batch as crud_batch
from crud import invoices as crud_invoices
from crud import suppliers as crud_suppliers
from utils.dates import days_ago

EXPIRY_WINDOW_DAYS = 30
PREVIEW_SIZE = 5


def get_dashboard_stats(db: Session) -> dict:
    """
    Summary numbers for the home screen. Read-only.

    lowStockCount and expiringCount are the lengths of the full lists; only the
    first few entries of each list are returned for display.
    """
    low_stock = crud_medicine.get_low_stock_medicines(db)
    expiring = crud_batch.get_expiring_batches(db, EXPIRY_WINDOW_DAYS)

    return {
        "todaySales": crud_invoices.get_daily_sales(db),
        "weeklySales": crud_invoices.get_sales_total_since(db, days_ago(7)),
        "monthlySales": crud_invoices.get_sales_total_since(db, days_ago(30)),
        "lowStockCount": len(low_stock),
        "lowStockItems": low_stock[:PREVIEW_SIZE],
        "expiringCount": len(expiring),
        "expiringItems": expiring[:PREVIEW_SIZE],
        "totalMedicines": crud_medicine.count_active_medicines(db),
        "totalSuppliers": crud_suppliers.count_active_suppliers(db),
    }
