from typing import Annotated, Optional
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session
from starlette import status
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from jose import JWTError, jwt
import logging

from database import get_db
from models.users import User, UserRole
from schemas.users import UserCreate, User as UserSchema
import crud.users as crud_users
from utils.auth_utils import (
    SECRET_KEY,
    ALGORITHM,
    create_access_token,
    get_current_user,
    verify_password,
)

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger("auth")

# Registration is open only while the store has no accounts
optional_oauth2_bearer = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)

class Token(BaseModel):
    access_token: str
    token_type: str

db_dependency = Annotated[Session, Depends(get_db)]


def _owner_from_token(db: Session, token: Optional[str]) -> Optional[User]:
    if not token:
        return None
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    user = crud_users.get_user_by_username(db, payload.get("sub"))
    if user is None or not user.is_active or user.role != UserRole.OWNER:
        return None
    return user


@router.post("/register", response_model=UserSchema, status_code=status.HTTP_201_CREATED)
def register_user(
    user: UserCreate,
    db: db_dependency,
    token: Optional[str] = Depends(optional_oauth2_bearer),
):
    """
    The first account becomes the store owner. After that only an owner may register users.
    """
    if crud_users.count_users(db) == 0:
        user = user.model_copy(update={"role": UserRole.OWNER})
        created_by = None
    else:
        created_by = _owner_from_token(db, token)
        if created_by is None:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only the owner can register new users")

    if crud_users.get_user_by_username(db, user.username):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already exists")

    new_user = crud_users.create_user(db, user, changed_by=created_by)
    logger.info(f"User '{new_user.username}' registered with role '{new_user.role.value}'")
    return new_user


@router.post("/login", response_model=Token)
def login_for_access_token(form_data: Annotated[OAuth2PasswordRequestForm, Depends()], db: db_dependency):
    user = authenticate_user(form_data.username, form_data.password, db)
    if not user:
        logger.warning(f"Failed login attempt for '{form_data.username}'")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    access_token = create_access_token(data={"sub": user.username, "role": user.role.value})
    return Token(access_token=access_token, token_type="bearer")


@router.get("/me", response_model=UserSchema)
def read_current_user(user: User = Depends(get_current_user)):
    return user


def authenticate_user(username: str, password: str, db: Session):
    user = crud_users.get_user_by_username(db, username)
    if not user or not user.is_active:
        return False
    if not verify_password(password, user.hashed_password):
        return False
    return user
