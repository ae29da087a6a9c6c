from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List

from database import get_db
import crud.audit_log as crud_audit_log
from models.users import User as UserModel
from schemas.audit_log import AuditLog
from utils.auth_utils import require_owner

router = APIRouter(prefix="/audit-logs", tags=["Audit Logs"])

@router.get("/", response_model=List[AuditLog])
def read_audit_logs(
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
    owner: UserModel = Depends(require_owner),
):
    """Most recent actions first, with the acting user's name."""
    return crud_audit_log.get_audit_logs(db, limit=limit)
