from sqlalchemy.orm import Session
from models.audit_log import AuditLog
from models.users import User
from schemas.audit_log import AuditLogCreate
from utils import sqlalchemy_to_dict
from utils.auth_utils import get_user_identifier

def create_audit_log(db: Session, log_entry: AuditLogCreate, commit: bool = True):
    db_log_entry = AuditLog(**log_entry.model_dump())
    db.add(db_log_entry)
    if commit:
        db.commit()
        db.refresh(db_log_entry)
    return db_log_entry

def record_action(db: Session, user, action: str, table_name: str, record_id=None,
                  old_values=None, new_values=None, commit: bool = True):
    """Shorthand for the audit entry written after every mutation."""
    log_entry = AuditLogCreate(
        table_name=table_name,
        record_id=record_id,
        changed_by=get_user_identifier(user),
        user_id=user.id if user is not None else None,
        action=action,
        old_values=old_values,
        new_values=new_values,
    )
    return create_audit_log(db, log_entry, commit=commit)

def get_audit_logs(db: Session, limit: int = 100):
    rows = (
        db.query(AuditLog, User.name)
        .outerjoin(User, AuditLog.user_id == User.id)
        .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
        .limit(limit)
        .all()
    )
    return [{**sqlalchemy_to_dict(log), "user_name": user_name} for log, user_name in rows]
