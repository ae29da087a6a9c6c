from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from models.users import UserRole

class UserBase(BaseModel):
    username: str = Field(..., min_length=3)
    name: str
    role: UserRole = UserRole.STAFF
    phone: Optional[str] = None

class UserCreate(UserBase):
    password: str = Field(..., min_length=6)

class UserUpdate(BaseModel):
    name: Optional[str] = None
    role: Optional[UserRole] = None
    phone: Optional[str] = None
    is_active: Optional[bool] = None
    # Left out (or null) to keep the current password
    password: Optional[str] = Field(None, min_length=6)

class User(UserBase):
    id: int
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
