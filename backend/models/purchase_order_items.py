from sqlalchemy import Column, Integer, Numeric, ForeignKey, String, Date
from sqlalchemy.orm import relationship
from database import Base

class PurchaseOrderItem(Base):
    __tablename__ = "purchase_order_items"

    id = Column(Integer, primary_key=True, index=True)
    purchase_order_id = Column(Integer, ForeignKey("purchase_orders.id"), nullable=False)
    medicine_id = Column(Integer, ForeignKey("medicines.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    line_total = Column(Numeric(12, 2), nullable=False)  # quantity * unit_price, stored for convenience
    # Lot details, when known, turn into a Batch once the order is received
    batch_number = Column(String, nullable=True)
    expiry_date = Column(Date, nullable=True)

    # Relationships
    purchase_order = relationship("PurchaseOrder", back_populates="items")
    medicine = relationship("Medicine")
