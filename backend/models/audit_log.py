from sqlalchemy import Column, Integer, String, DateTime, JSON, ForeignKey
from database import Base
from utils.dates import now_local

class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    table_name = Column(String, nullable=False)
    record_id = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_local, index=True)
    changed_by = Column(String, nullable=False)
    action = Column(String, nullable=False)  # e.g., 'CREATE', 'UPDATE', 'SALE', 'ADJUST', 'STOCK_ALERT'
    old_values = Column(JSON)
    new_values = Column(JSON)
