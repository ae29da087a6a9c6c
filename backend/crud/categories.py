from sqlalchemy.orm import Session
from models.categories import Category
from schemas.categories import CategoryCreate
from crud.audit_log import record_action
from utils import sqlalchemy_to_dict
from utils.auth_utils import get_user_identifier

def get_all_categories(db: Session):
    return db.query(Category).order_by(Category.name).all()

def get_category(db: Session, category_id: int):
    return db.query(Category).filter(Category.id == category_id).first()

def get_category_by_name(db: Session, name: str):
    return db.query(Category).filter(Category.name == name).first()

def create_category(db: Session, category: CategoryCreate, user=None):
    db_category = Category(**category.model_dump(), created_by=get_user_identifier(user))
    db.add(db_category)
    db.commit()
    db.refresh(db_category)
    record_action(db, user, 'CREATE', 'categories', db_category.id, new_values=sqlalchemy_to_dict(db_category))
    return db_category
