from sqlalchemy import Column, Integer, String, ForeignKey, Enum
from sqlalchemy.orm import relationship
from database import Base
import enum
from models.audit_mixin import TimestampMixin

class AdjustmentType(enum.Enum):
    ADD = "add"
    ADDITION = "addition"
    REMOVE = "remove"
    DAMAGE = "damage"
    EXPIRED = "expired"
    RETURN = "return"

# Every other type takes stock away from the batch
INCREASING_ADJUSTMENTS = {AdjustmentType.ADD, AdjustmentType.ADDITION, AdjustmentType.RETURN}

class StockAdjustment(Base, TimestampMixin):
    __tablename__ = "stock_adjustments"

    id = Column(Integer, primary_key=True, index=True)
    batch_id = Column(Integer, ForeignKey("batches.id"), nullable=False)
    medicine_id = Column(Integer, ForeignKey("medicines.id"), nullable=False, index=True)
    adjustment_type = Column(Enum(AdjustmentType), nullable=False)
    quantity = Column(Integer, nullable=False)
    old_quantity = Column(Integer, nullable=True)
    new_quantity = Column(Integer, nullable=True)
    reason = Column(String, nullable=True)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    batch = relationship("Batch")
    medicine = relationship("Medicine")
