from sqlalchemy import Column, Integer, Numeric, String, Date, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.ext.hybrid import hybrid_property
from database import Base
from models.audit_mixin import TimestampMixin
from utils.dates import today_local

class Batch(Base, TimestampMixin):
    __tablename__ = "batches"
    __table_args__ = (CheckConstraint('quantity >= 0', name='ck_batches_quantity_non_negative'),)

    id = Column(Integer, primary_key=True, index=True)
    medicine_id = Column(Integer, ForeignKey("medicines.id"), nullable=False, index=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=True)
    batch_number = Column(String, nullable=False)
    quantity = Column(Integer, default=0, nullable=False)
    purchase_price = Column(Numeric(10, 2), default=0)
    mrp = Column(Numeric(10, 2), nullable=True)
    manufacture_date = Column(Date, nullable=True)
    expiry_date = Column(Date, nullable=False, index=True)

    medicine = relationship("Medicine", back_populates="batches")
    supplier = relationship("Supplier", back_populates="batches")

    @hybrid_property
    def is_expired(self):
        return self.expiry_date < today_local()

    @is_expired.expression
    def is_expired(cls):
        return cls.expiry_date < today_local()
