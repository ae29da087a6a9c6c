from sqlalchemy.orm import Session
from models.app_config import AppConfig
from crud.audit_log import record_action
from utils import sqlalchemy_to_dict
from utils.auth_utils import get_user_identifier

DEFAULT_CONFIGS = [
    {"name": "store_name", "value": "My Pharmacy"},
    {"name": "store_address", "value": ""},
    {"name": "store_phone", "value": ""},
    {"name": "expiry_alert_days", "value": "30"},
]


# Get config by name (or all configs)
def get_config(db: Session, name: str = None):
    if name:
        return db.query(AppConfig).filter(AppConfig.name == name).first()
    return db.query(AppConfig).order_by(AppConfig.name).all()


def get_config_value(db: Session, name: str, default: str = None) -> str:
    config = get_config(db, name=name)
    return config.value if config else default


def get_int_config(db: Session, name: str, default: int) -> int:
    try:
        return int(get_config_value(db, name, str(default)))
    except ValueError:
        return default


def upsert_config(db: Session, name: str, value: str, user=None):
    db_config = get_config(db, name=name)
    if db_config:
        old_values = sqlalchemy_to_dict(db_config)
        db_config.value = value
        db_config.updated_by = get_user_identifier(user)
        action = 'UPDATE'
    else:
        db_config = AppConfig(name=name, value=value, created_by=get_user_identifier(user))
        db.add(db_config)
        old_values = {}
        action = 'CREATE'

    db.commit()
    db.refresh(db_config)
    record_action(db, user, action, 'app_config', db_config.id, old_values=old_values, new_values=sqlalchemy_to_dict(db_config))
    return db_config


def ensure_default_configs(db: Session):
    """Insert any missing default settings. Existing values are left alone."""
    existing = {name for (name,) in db.query(AppConfig.name)}
    created = []
    for config_data in DEFAULT_CONFIGS:
        if config_data["name"] not in existing:
            db.add(AppConfig(**config_data, created_by="system"))
            created.append(config_data["name"])
    if created:
        db.commit()
    return created
