# backend/routers/purchase_orders.py

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from database import get_db
import crud.purchase_orders as crud_purchase_orders
from models.users import User as UserModel
from models.purchase_orders import PurchaseOrderStatus
from schemas.purchase_orders import PurchaseOrder, PurchaseOrderCreate, PurchaseOrderStatusUpdate
from utils.auth_utils import get_current_user, require_owner

router = APIRouter(prefix="/purchase-orders", tags=["Purchase Orders"])
logger = logging.getLogger("purchase_orders")

@router.post("/", response_model=PurchaseOrder, status_code=status.HTTP_201_CREATED)
def create_purchase_order(
    po: PurchaseOrderCreate,
    db: Session = Depends(get_db),
    user: UserModel = Depends(get_current_user),
):
    """Create a new purchase order with associated items. New orders start as pending."""
    try:
        return crud_purchase_orders.create_purchase_order(db, po, user)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.get("/", response_model=List[PurchaseOrder])
def read_purchase_orders(
    skip: int = 0,
    limit: int = 100,
    supplier_id: Optional[int] = None,
    status: Optional[PurchaseOrderStatus] = None,
    db: Session = Depends(get_db),
    user: UserModel = Depends(get_current_user),
):
    """Retrieve purchase orders, newest first, optionally filtered by supplier or status."""
    return crud_purchase_orders.get_all_purchase_orders(db, skip=skip, limit=limit, supplier_id=supplier_id, status=status)

@router.get("/{po_id}", response_model=PurchaseOrder)
def read_purchase_order(po_id: int, db: Session = Depends(get_db), user: UserModel = Depends(get_current_user)):
    """Retrieve a single purchase order by ID."""
    db_po = crud_purchase_orders.get_purchase_order(db, po_id)
    if db_po is None:
        raise HTTPException(status_code=404, detail="Purchase Order not found")
    return db_po

@router.patch("/{po_id}/status", response_model=PurchaseOrder)
def update_purchase_order_status(
    po_id: int,
    status_update: PurchaseOrderStatusUpdate,
    db: Session = Depends(get_db),
    user: UserModel = Depends(require_owner),
):
    """Move a purchase order along pending -> ordered -> received (or cancelled)."""
    try:
        db_po = crud_purchase_orders.update_purchase_order_status(db, po_id, status_update.status, user)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if db_po is None:
        raise HTTPException(status_code=404, detail="Purchase Order not found")
    return db_po
