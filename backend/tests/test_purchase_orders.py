"""
Tests for purchase orders: numbering, status transitions and receiving stock
"""
from datetime import timedelta
from decimal import Decimal

import pytest
from pydantic import ValidationError

from crud import purchase_orders as crud_purchase_orders
from models.batch import Batch
from models.purchase_orders import PurchaseOrderStatus
from schemas.purchase_orders import PurchaseOrderCreate, PurchaseOrderItemCreateRequest
from utils.dates import today_local
from conftest import make_medicine, make_supplier


def _order(db, supplier, medicine, with_lot=True):
    expiry = today_local() + timedelta(days=365)
    return crud_purchase_orders.create_purchase_order(db, PurchaseOrderCreate(
        supplier_id=supplier.id,
        items=[
            PurchaseOrderItemCreateRequest(
                medicine_id=medicine.id,
                quantity=100,
                unit_price=Decimal("12.00"),
                batch_number="PO-LOT-1" if with_lot else None,
                expiry_date=expiry if with_lot else None,
            ),
            PurchaseOrderItemCreateRequest(medicine_id=medicine.id, quantity=20, unit_price=Decimal("11.50")),
        ],
    ))


def test_create_purchase_order(db):
    supplier = make_supplier(db)
    medicine = make_medicine(db)

    po = _order(db, supplier, medicine)

    assert po.status == PurchaseOrderStatus.PENDING
    assert po.order_number == f"PO{today_local().strftime('%Y%m%d')}0001"
    assert po.total_amount == Decimal("1430.00")
    assert len(po.items) == 2


def test_purchase_order_rejects_unknown_supplier_or_medicine(db):
    supplier = make_supplier(db)
    medicine = make_medicine(db)

    with pytest.raises(ValueError):
        crud_purchase_orders.create_purchase_order(db, PurchaseOrderCreate(
            supplier_id=999,
            items=[PurchaseOrderItemCreateRequest(medicine_id=medicine.id, quantity=1, unit_price=Decimal("1"))],
        ))
    with pytest.raises(ValueError):
        crud_purchase_orders.create_purchase_order(db, PurchaseOrderCreate(
            supplier_id=supplier.id,
            items=[PurchaseOrderItemCreateRequest(medicine_id=999, quantity=1, unit_price=Decimal("1"))],
        ))


def test_receiving_creates_batches_for_items_with_lot_details(db, owner):
    supplier = make_supplier(db)
    medicine = make_medicine(db)
    po = _order(db, supplier, medicine)

    crud_purchase_orders.update_purchase_order_status(db, po.id, PurchaseOrderStatus.ORDERED, owner)
    received = crud_purchase_orders.update_purchase_order_status(db, po.id, PurchaseOrderStatus.RECEIVED, owner)

    assert received.status == PurchaseOrderStatus.RECEIVED
    assert received.received_at is not None
    batches = db.query(Batch).filter(Batch.medicine_id == medicine.id).all()
    assert [(b.batch_number, b.quantity, b.supplier_id) for b in batches] == [("PO-LOT-1", 100, supplier.id)]


@pytest.mark.parametrize("final_status", [PurchaseOrderStatus.RECEIVED, PurchaseOrderStatus.CANCELLED])
def test_terminal_statuses_cannot_change(db, owner, final_status):
    po = _order(db, make_supplier(db), make_medicine(db), with_lot=False)
    crud_purchase_orders.update_purchase_order_status(db, po.id, final_status, owner)

    with pytest.raises(ValueError, match="Cannot change"):
        crud_purchase_orders.update_purchase_order_status(db, po.id, PurchaseOrderStatus.ORDERED, owner)


def test_ordered_cannot_go_back_to_pending(db, owner):
    po = _order(db, make_supplier(db), make_medicine(db))
    crud_purchase_orders.update_purchase_order_status(db, po.id, PurchaseOrderStatus.ORDERED, owner)

    with pytest.raises(ValueError):
        crud_purchase_orders.update_purchase_order_status(db, po.id, PurchaseOrderStatus.PENDING, owner)


def test_missing_purchase_order_returns_none(db):
    assert crud_purchase_orders.update_purchase_order_status(db, 404, PurchaseOrderStatus.ORDERED) is None


def test_purchase_order_endpoints(client, db, owner_headers, staff_headers):
    supplier = make_supplier(db)
    medicine = make_medicine(db)

    created = client.post("/purchase-orders/", headers=staff_headers, json={
        "supplier_id": supplier.id,
        "items": [{"medicine_id": medicine.id, "quantity": 10, "unit_price": "5.00",
                   "batch_number": "LOT-9", "expiry_date": "2099-12-31"}],
    })
    assert created.status_code == 201, created.text
    po_id = created.json()["id"]

    forbidden = client.patch(f"/purchase-orders/{po_id}/status", headers=staff_headers, json={"status": "received"})
    assert forbidden.status_code == 403

    received = client.patch(f"/purchase-orders/{po_id}/status", headers=owner_headers, json={"status": "received"})
    assert received.status_code == 200
    assert received.json()["status"] == "received"

    again = client.patch(f"/purchase-orders/{po_id}/status", headers=owner_headers, json={"status": "cancelled"})
    assert again.status_code == 400

    batches = client.get(f"/medicines/{medicine.id}/batches", headers=staff_headers).json()
    assert [(b["batch_number"], b["quantity"]) for b in batches] == [("LOT-9", 10)]

    pending = client.get("/purchase-orders/?status=pending", headers=staff_headers)
    assert pending.json() == []
    assert client.get("/purchase-orders/999", headers=staff_headers).status_code == 404


def test_purchase_order_item_rejects_past_expiry():
    with pytest.raises(ValidationError):
        PurchaseOrderItemCreateRequest(
            medicine_id=1, quantity=5, unit_price=Decimal("1"),
            batch_number="OLD", expiry_date=today_local() - timedelta(days=10),
        )


def test_receiving_skips_lots_that_expired_after_ordering(db, owner):
    supplier = make_supplier(db)
    medicine = make_medicine(db)
    po = _order(db, supplier, medicine)
    # The lot passes its expiry date while the order is still open
    po.items[0].expiry_date = today_local() - timedelta(days=10)
    db.commit()

    crud_purchase_orders.update_purchase_order_status(db, po.id, PurchaseOrderStatus.RECEIVED, owner)

    assert db.query(Batch).filter(Batch.medicine_id == medicine.id).count() == 0


def test_purchase_order_endpoint_rejects_past_expiry(client, db, staff_headers):
    supplier = make_supplier(db)
    medicine = make_medicine(db)

    response = client.post("/purchase-orders/", headers=staff_headers, json={
        "supplier_id": supplier.id,
        "items": [{"medicine_id": medicine.id, "quantity": 5, "unit_price": "2.00",
                   "batch_number": "OLD", "expiry_date": "2020-01-01"}],
    })

    assert response.status_code == 422
