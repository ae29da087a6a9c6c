from sqlalchemy import Column, Integer, Numeric, String, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin

class Medicine(Base, TimestampMixin):
    __tablename__ = "medicines"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    generic_name = Column(String, nullable=True)
    brand = Column(String, nullable=True)
    barcode = Column(String, unique=True, nullable=True, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    unit = Column(String, default="strip")  # e.g., "strip", "bottle", "tube"
    mrp = Column(Numeric(10, 2), default=0)
    selling_price = Column(Numeric(10, 2), default=0)
    # Total stock at or below this level puts the medicine on the low-stock list
    reorder_level = Column(Integer, default=10, nullable=False)
    requires_prescription = Column(Boolean, default=False)
    is_active = Column(Boolean, default=True, nullable=False)

    category = relationship("Category", back_populates="medicines")
    batches = relationship("Batch", back_populates="medicine", order_by="Batch.expiry_date")
