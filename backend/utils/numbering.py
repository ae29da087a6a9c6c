from datetime import date
from sqlalchemy import func
from sqlalchemy.orm import Session


def next_daily_number(db: Session, column, code: str, day: date) -> str:
    """
    Next document number of the form <code><YYYYMMDD><seq>.

    seq is the count of numbers already issued with the same day prefix plus one,
    zero-padded to four digits, e.g. INV202610190001.
    """
    prefix = f"{code}{day.strftime('%Y%m%d')}"
    count = db.query(func.count()).filter(column.like(f"{prefix}%")).scalar() or 0
    return f"{prefix}{count + 1:04d}"
