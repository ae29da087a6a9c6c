from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from database import get_db
import crud.categories as crud_categories
from models.users import User as UserModel
from schemas.categories import Category, CategoryCreate
from utils.auth_utils import get_current_user

router = APIRouter(prefix="/categories", tags=["Categories"])

@router.get("/", response_model=List[Category])
def read_categories(db: Session = Depends(get_db), user: UserModel = Depends(get_current_user)):
    return crud_categories.get_all_categories(db)

@router.get("/{category_id}", response_model=Category)
def read_category(category_id: int, db: Session = Depends(get_db), user: UserModel = Depends(get_current_user)):
    db_category = crud_categories.get_category(db, category_id)
    if db_category is None:
        raise HTTPException(status_code=404, detail="Category not found")
    return db_category

@router.post("/", response_model=Category, status_code=status.HTTP_201_CREATED)
def create_category(category: CategoryCreate, db: Session = Depends(get_db), user: UserModel = Depends(get_current_user)):
    if crud_categories.get_category_by_name(db, category.name):
        raise HTTPException(status_code=400, detail="Category with this name already exists")
    return crud_categories.create_category(db, category, user)
