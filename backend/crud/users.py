from sqlalchemy.orm import Session
from sqlalchemy import func
from models.users import User, UserRole
from schemas.users import UserCreate, UserUpdate
from crud.audit_log import record_action
from utils import sqlalchemy_to_dict
from utils.auth_utils import hash_password, get_user_identifier

REQUIRED_FIELDS = ("name", "role", "is_active")

def get_user(db: Session, user_id: int):
    return db.query(User).filter(User.id == user_id).first()

def get_user_by_username(db: Session, username: str):
    return db.query(User).filter(User.username == username).first()

def get_all_users(db: Session):
    return db.query(User).order_by(User.name).all()

def count_users(db: Session) -> int:
    return db.query(func.count(User.id)).scalar() or 0

def create_user(db: Session, user: UserCreate, changed_by: User = None):
    user_data = user.model_dump(exclude={"password"})
    db_user = User(
        **user_data,
        hashed_password=hash_password(user.password),
        created_by=get_user_identifier(changed_by),
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    record_action(db, changed_by or db_user, 'CREATE', 'users', db_user.id, new_values=sqlalchemy_to_dict(db_user))
    return db_user

def count_active_owners(db: Session, exclude_user_id: int = None) -> int:
    query = db.query(func.count(User.id)).filter(User.role == UserRole.OWNER, User.is_active.is_(True))
    if exclude_user_id is not None:
        query = query.filter(User.id != exclude_user_id)
    return query.scalar() or 0

def update_user(db: Session, user_id: int, user: UserUpdate, changed_by: User = None):
    """
    Update an account. Returns None if the user does not exist.

    Raises ValueError when the change would leave the store without an active owner.
    """
    db_user = get_user(db, user_id)
    if not db_user:
        return None

    old_values = sqlalchemy_to_dict(db_user)
    update_data = user.model_dump(exclude_unset=True)
    # Only re-hash when a new password was actually supplied
    password = update_data.pop("password", None)
    # These columns are NOT NULL; an explicit null leaves them unchanged
    for key in REQUIRED_FIELDS:
        if key in update_data and update_data[key] is None:
            update_data.pop(key)

    new_role = update_data.get("role", db_user.role)
    new_is_active = update_data.get("is_active", db_user.is_active)
    if db_user.role == UserRole.OWNER and db_user.is_active and (new_role != UserRole.OWNER or not new_is_active):
        if count_active_owners(db, exclude_user_id=db_user.id) == 0:
            raise ValueError("The store must keep at least one active owner.")

    if password:
        db_user.hashed_password = hash_password(password)
    for key, value in update_data.items():
        setattr(db_user, key, value)
    db_user.updated_by = get_user_identifier(changed_by)
    db.commit()
    db.refresh(db_user)

    new_values = sqlalchemy_to_dict(db_user)
    if password:
        new_values["password_changed"] = True
    record_action(db, changed_by, 'UPDATE', 'users', user_id, old_values=old_values, new_values=new_values)
    return db_user
