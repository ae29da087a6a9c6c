from sqlalchemy.orm import Session
from sqlalchemy import func
from models.suppliers import Supplier
from schemas.suppliers import SupplierCreate, SupplierUpdate
from crud.audit_log import record_action
from utils import sqlalchemy_to_dict
from utils.auth_utils import get_user_identifier

def get_all_suppliers(db: Session, active_only: bool = False):
    query = db.query(Supplier)
    if active_only:
        query = query.filter(Supplier.is_active.is_(True))
    return query.order_by(Supplier.name).all()

def get_supplier(db: Session, supplier_id: int):
    return db.query(Supplier).filter(Supplier.id == supplier_id).first()

def get_supplier_by_name(db: Session, name: str):
    return db.query(Supplier).filter(func.lower(Supplier.name) == name.lower()).first()

def count_active_suppliers(db: Session) -> int:
    return db.query(func.count(Supplier.id)).filter(Supplier.is_active.is_(True)).scalar() or 0

def create_supplier(db: Session, supplier: SupplierCreate, user=None):
    db_supplier = Supplier(**supplier.model_dump(), created_by=get_user_identifier(user))
    db.add(db_supplier)
    db.commit()
    db.refresh(db_supplier)
    record_action(db, user, 'CREATE', 'suppliers', db_supplier.id, new_values=sqlalchemy_to_dict(db_supplier))
    return db_supplier

def update_supplier(db: Session, supplier_id: int, supplier: SupplierUpdate, user=None):
    db_supplier = get_supplier(db, supplier_id)
    if not db_supplier:
        return None

    old_values = sqlalchemy_to_dict(db_supplier)
    for key, value in supplier.model_dump(exclude_unset=True).items():
        setattr(db_supplier, key, value)
    db_supplier.updated_by = get_user_identifier(user)
    db.commit()
    db.refresh(db_supplier)
    record_action(db, user, 'UPDATE', 'suppliers', supplier_id, old_values=old_values, new_values=sqlalchemy_to_dict(db_supplier))
    return db_supplier
