from datetime import date, datetime, time, timedelta
import os

import pytz
from dotenv import load_dotenv

load_dotenv()

# All business dates (invoice numbers, daily sales, expiry checks) use the store's local calendar.
APP_TIMEZONE = pytz.timezone(os.getenv("APP_TIMEZONE", "Asia/Kolkata"))


def now_local() -> datetime:
    return datetime.now(APP_TIMEZONE)


def today_local() -> date:
    return now_local().date()


def day_bounds(day: date):
    """Return the first and last instant of a local calendar day."""
    start = APP_TIMEZONE.localize(datetime.combine(day, time.min))
    end = APP_TIMEZONE.localize(datetime.combine(day, time.max))
    return start, end


def days_ago(days: int) -> datetime:
    return now_local() - timedelta(days=days)
