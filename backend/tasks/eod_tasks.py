import logging
from sqlalchemy.orm import Session

from database import SessionLocal
from crud.medicine import get_low_stock_medicines
from crud.batch import get_expiring_batches
from crud.app_config import get_int_config
from crud.audit_log import record_action
from utils.dates import today_local

logger = logging.getLogger(__name__)

def run_stock_alerts():
    """
    End-of-day stock check.

    Collects medicines at or below their reorder level and in-stock batches expiring within
    the configured alert window, logs a summary and records it in the audit log.
    """
    logger.info("Running end-of-day stock alerts.")
    db: Session = SessionLocal()
    try:
        days_ahead = get_int_config(db, "expiry_alert_days", 30)
        low_stock = get_low_stock_medicines(db)
        expiring = get_expiring_batches(db, days_ahead)

        for item in low_stock:
            logger.debug(f"Low stock: {item['name']} ({item['total_stock']} left, reorder at {item['reorder_level']})")
        for batch in expiring:
            logger.debug(f"Expiring: {batch['medicine_name']} batch {batch['batch_number']} on {batch['expiry_date']}")

        summary = {
            "date": today_local().isoformat(),
            "expiry_alert_days": days_ahead,
            "low_stock_count": len(low_stock),
            "low_stock_medicine_ids": [item["id"] for item in low_stock],
            "expiring_count": len(expiring),
            "expiring_batch_ids": [batch["id"] for batch in expiring],
        }
        record_action(db, None, "STOCK_ALERT", "batches", new_values=summary)
        logger.info(
            f"Stock alerts: {summary['low_stock_count']} low-stock medicines, "
            f"{summary['expiring_count']} batches expiring within {days_ahead} days."
        )
        return summary
    except Exception as e:
        logger.error(f"Error during end-of-day stock alerts: {e}", exc_info=True)
        db.rollback()
        return None
    finally:
        db.close()
