from sqlalchemy.orm import Session
from sqlalchemy import func, or_
from models.medicine import Medicine
from models.batch import Batch
from schemas.medicine import MedicineCreate, MedicineUpdate
from crud.audit_log import record_action
from utils import sqlalchemy_to_dict
from utils.auth_utils import get_user_identifier

SEARCH_LIMIT = 50

def get_medicine(db: Session, medicine_id: int):
    return db.query(Medicine).filter(Medicine.id == medicine_id).first()

def get_all_medicines(db: Session, skip: int = 0, limit: int = 100, active_only: bool = False):
    query = db.query(Medicine)
    if active_only:
        query = query.filter(Medicine.is_active.is_(True))
    return query.order_by(Medicine.name).offset(skip).limit(limit).all()

def get_medicine_by_barcode(db: Session, barcode: str):
    return db.query(Medicine).filter(Medicine.barcode == barcode).first()

def search_medicines(db: Session, query: str):
    """Case-insensitive match on name, generic name or brand, or an exact barcode."""
    pattern = f"%{query}%"
    return (
        db.query(Medicine)
        .filter(
            or_(
                Medicine.name.ilike(pattern),
                Medicine.generic_name.ilike(pattern),
                Medicine.brand.ilike(pattern),
                Medicine.barcode == query,
            )
        )
        .order_by(Medicine.name)
        .limit(SEARCH_LIMIT)
        .all()
    )

def count_active_medicines(db: Session) -> int:
    return db.query(func.count(Medicine.id)).filter(Medicine.is_active.is_(True)).scalar() or 0

def create_medicine(db: Session, medicine: MedicineCreate, user=None):
    db_medicine = Medicine(**medicine.model_dump(), created_by=get_user_identifier(user))
    db.add(db_medicine)
    db.commit()
    db.refresh(db_medicine)
    record_action(db, user, 'CREATE', 'medicines', db_medicine.id, new_values=sqlalchemy_to_dict(db_medicine))
    return db_medicine

def update_medicine(db: Session, medicine_id: int, medicine_data: MedicineUpdate, user=None):
    db_medicine = get_medicine(db, medicine_id)
    if not db_medicine:
        return None

    old_values = sqlalchemy_to_dict(db_medicine)
    # Update the provided fields
    for key, value in medicine_data.model_dump(exclude_unset=True).items():
        setattr(db_medicine, key, value)
    db_medicine.updated_by = get_user_identifier(user)

    db.commit()
    db.refresh(db_medicine)
    record_action(db, user, 'UPDATE', 'medicines', medicine_id, old_values=old_values, new_values=sqlalchemy_to_dict(db_medicine))
    return db_medicine

def get_low_stock_medicines(db: Session):
    """
    Active medicines whose total quantity across all batches is at or below the reorder level.

    Medicines without any batch count as zero stock, so they are always listed.
    Lowest stock first.
    """
    total_stock = func.coalesce(func.sum(Batch.quantity), 0)
    rows = (
        db.query(Medicine, total_stock.label("total_stock"))
        .outerjoin(Batch, Batch.medicine_id == Medicine.id)
        .filter(Medicine.is_active.is_(True))
        .group_by(Medicine.id)
        .having(total_stock <= Medicine.reorder_level)
        .order_by(total_stock.asc(), Medicine.name)
        .all()
    )
    return [{**sqlalchemy_to_dict(medicine), "total_stock": int(stock)} for medicine, stock in rows]
