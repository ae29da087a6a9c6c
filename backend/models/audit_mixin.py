from sqlalchemy import Column, DateTime, String
from utils.dates import now_local


class TimestampMixin:
    """Mixin that provides created/updated timestamps and user info.

    Timestamps are timezone-aware and generated in the store timezone (APP_TIMEZONE),
    so "today" in reports matches the calendar day at the counter.
    """
    created_at = Column(DateTime(timezone=True), default=now_local)
    updated_at = Column(DateTime(timezone=True), onupdate=now_local)
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)
