from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
import logging

from database import get_db
import crud.users as crud_users
from models.users import User as UserModel
from schemas.users import User, UserCreate, UserUpdate
from utils.auth_utils import require_owner

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger("users")

@router.get("/", response_model=List[User])
def read_users(db: Session = Depends(get_db), owner: UserModel = Depends(require_owner)):
    """List all staff accounts (owner only)."""
    return crud_users.get_all_users(db)

@router.post("/", response_model=User, status_code=status.HTTP_201_CREATED)
def create_user(user: UserCreate, db: Session = Depends(get_db), owner: UserModel = Depends(require_owner)):
    """Create a new account (owner only)."""
    if crud_users.get_user_by_username(db, user.username):
        raise HTTPException(status_code=400, detail="Username already exists")
    db_user = crud_users.create_user(db, user, changed_by=owner)
    logger.info(f"User '{db_user.username}' ({db_user.role.value}) created by {owner.username}")
    return db_user

@router.get("/{user_id}", response_model=User)
def read_user(user_id: int, db: Session = Depends(get_db), owner: UserModel = Depends(require_owner)):
    db_user = crud_users.get_user(db, user_id)
    if db_user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return db_user

@router.patch("/{user_id}", response_model=User)
def update_user(user_id: int, user: UserUpdate, db: Session = Depends(get_db), owner: UserModel = Depends(require_owner)):
    """Update an account. The password is re-hashed only when a new one is sent."""
    try:
        db_user = crud_users.update_user(db, user_id, user, changed_by=owner)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if db_user is None:
        raise HTTPException(status_code=404, detail="User not found")
    logger.info(f"User '{db_user.username}' (ID: {user_id}) updated by {owner.username}")
    return db_user
