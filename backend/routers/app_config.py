from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
import logging

from database import get_db
from schemas.app_config import AppConfigUpdate, AppConfigOut
from crud import app_config as crud_app_config
from models.users import User as UserModel
from utils.auth_utils import get_current_user, require_owner

router = APIRouter(prefix="/settings", tags=["Settings"])
logger = logging.getLogger(__name__)

@router.get("/", response_model=List[AppConfigOut])
def get_configs(db: Session = Depends(get_db), user: UserModel = Depends(get_current_user)):
    return crud_app_config.get_config(db)

@router.put("/{name}", response_model=AppConfigOut)
def upsert_config(name: str, config: AppConfigUpdate, db: Session = Depends(get_db), owner: UserModel = Depends(require_owner)):
    """Create or overwrite a setting (owner only)."""
    db_config = crud_app_config.upsert_config(db, name, config.value, owner)
    logger.info(f"Setting '{name}' set to '{config.value}' by {owner.username}")
    return db_config
