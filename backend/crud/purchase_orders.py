import logging
from decimal import Decimal
from typing import Optional
from sqlalchemy.orm import Session, selectinload
from models.purchase_orders import PurchaseOrder, PurchaseOrderStatus
from models.purchase_order_items import PurchaseOrderItem
from models.medicine import Medicine
from models.batch import Batch
from schemas.purchase_orders import PurchaseOrderCreate
from crud import suppliers as crud_suppliers
from crud.audit_log import record_action
from utils import sqlalchemy_to_dict
from utils.dates import now_local, today_local
from utils.numbering import next_daily_number
from utils.auth_utils import get_user_identifier

logger = logging.getLogger("purchase_orders")

# received and cancelled are terminal
ALLOWED_TRANSITIONS = {
    PurchaseOrderStatus.PENDING: {PurchaseOrderStatus.ORDERED, PurchaseOrderStatus.RECEIVED, PurchaseOrderStatus.CANCELLED},
    PurchaseOrderStatus.ORDERED: {PurchaseOrderStatus.RECEIVED, PurchaseOrderStatus.CANCELLED},
    PurchaseOrderStatus.RECEIVED: set(),
    PurchaseOrderStatus.CANCELLED: set(),
}


def get_all_purchase_orders(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    supplier_id: Optional[int] = None,
    status: Optional[PurchaseOrderStatus] = None,
):
    query = db.query(PurchaseOrder)
    if supplier_id:
        query = query.filter(PurchaseOrder.supplier_id == supplier_id)
    if status:
        query = query.filter(PurchaseOrder.status == status)
    return (
        query.order_by(PurchaseOrder.created_at.desc(), PurchaseOrder.id.desc())
        .options(selectinload(PurchaseOrder.items))
        .offset(skip)
        .limit(limit)
        .all()
    )


def get_purchase_order(db: Session, po_id: int):
    return (
        db.query(PurchaseOrder)
        .options(selectinload(PurchaseOrder.items))
        .filter(PurchaseOrder.id == po_id)
        .first()
    )


def create_purchase_order(db: Session, po: PurchaseOrderCreate, user=None) -> PurchaseOrder:
    """Create a new purchase order with associated items."""
    supplier = crud_suppliers.get_supplier(db, po.supplier_id)
    if not supplier or not supplier.is_active:
        raise ValueError("Supplier not found or inactive.")

    total_amount = Decimal(0)
    db_po_items = []
    for item_data in po.items:
        medicine = db.query(Medicine).filter(Medicine.id == item_data.medicine_id).first()
        if not medicine:
            raise ValueError(f"Medicine with ID {item_data.medicine_id} not found.")

        line_total = item_data.quantity * item_data.unit_price
        total_amount += line_total
        db_po_items.append(PurchaseOrderItem(**item_data.model_dump(), line_total=line_total))

    try:
        db_po = PurchaseOrder(
            order_number=next_daily_number(db, PurchaseOrder.order_number, "PO", today_local()),
            supplier_id=po.supplier_id,
            status=PurchaseOrderStatus.PENDING,
            notes=po.notes,
            total_amount=total_amount,
            created_by=get_user_identifier(user),
        )
        db_po.items = db_po_items
        db.add(db_po)
        db.flush()
        record_action(
            db, user, 'CREATE', 'purchase_orders', db_po.id,
            new_values={"order_number": db_po.order_number, "supplier_id": db_po.supplier_id, "total_amount": float(total_amount)},
            commit=False,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Purchase Order {db_po.order_number} (ID: {db_po.id}) created for Supplier ID {db_po.supplier_id} by user {get_user_identifier(user)}")
    return get_purchase_order(db, db_po.id)


def update_purchase_order_status(db: Session, po_id: int, status: PurchaseOrderStatus, user=None):
    """
    Move a purchase order to a new status.

    Receiving an order stamps received_at and books every item that carries a batch
    number and an unexpired expiry date into stock as a new batch. Returns None if the order does
    not exist; raises ValueError for a transition that is not allowed.
    """
    db_po = get_purchase_order(db, po_id)
    if db_po is None:
        return None

    if status not in ALLOWED_TRANSITIONS[db_po.status]:
        raise ValueError(f"Cannot change purchase order status from '{db_po.status.value}' to '{status.value}'.")

    old_values = sqlalchemy_to_dict(db_po)
    try:
        db_po.status = status
        db_po.updated_by = get_user_identifier(user)
        if status == PurchaseOrderStatus.RECEIVED:
            db_po.received_at = now_local()
            today = today_local()
            for item in db_po.items:
                if not item.batch_number or not item.expiry_date:
                    logger.warning(f"PO {db_po.order_number} item {item.id} received without lot details; no batch created.")
                    continue
                if item.expiry_date < today:
                    logger.warning(f"PO {db_po.order_number} item {item.id} lot '{item.batch_number}' expired on {item.expiry_date}; no batch created.")
                    continue
                db.add(
                    Batch(
                        medicine_id=item.medicine_id,
                        supplier_id=db_po.supplier_id,
                        batch_number=item.batch_number,
                        quantity=item.quantity,
                        purchase_price=item.unit_price,
                        expiry_date=item.expiry_date,
                        created_by=get_user_identifier(user),
                    )
                )
        db.flush()
        record_action(
            db, user, 'UPDATE', 'purchase_orders', po_id,
            old_values=old_values, new_values=sqlalchemy_to_dict(db_po), commit=False,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"PO {db_po.order_number} (ID: {po_id}) moved to '{status.value}' by {get_user_identifier(user)}")
    return get_purchase_order(db, po_id)
