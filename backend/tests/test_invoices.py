"""
Tests for invoice creation, numbering, stock deduction and receipts
"""
from datetime import date
from decimal import Decimal

import pytest

import crud.invoices as crud_invoices
from models.audit_log import AuditLog
from models.invoices import Invoice
from schemas.invoices import InvoiceCreate, InvoiceItemCreateRequest
from conftest import make_batch, make_medicine


def _sale(medicine, quantity, batch=None, price="25.00", **kwargs):
    return InvoiceCreate(
        items=[InvoiceItemCreateRequest(
            medicine_id=medicine.id,
            batch_id=batch.id if batch is not None else None,
            quantity=quantity,
            price=Decimal(price),
        )],
        **kwargs,
    )


def test_invoice_deducts_sold_quantity_from_batch(db, owner):
    medicine = make_medicine(db)
    batch = make_batch(db, medicine, quantity=10)

    invoice = crud_invoices.create_invoice(db, _sale(medicine, 3, batch), owner)

    db.refresh(batch)
    assert batch.quantity == 7
    assert invoice.subtotal == Decimal("75.00")
    assert invoice.total_amount == Decimal("75.00")
    assert invoice.created_by_id == owner.id


def test_invoice_totals_apply_discount_and_tax(db, owner):
    medicine = make_medicine(db)
    batch = make_batch(db, medicine, quantity=10)

    invoice = crud_invoices.create_invoice(
        db, _sale(medicine, 4, batch, price="12.50", discount_amount=Decimal("5"), tax_amount=Decimal("2.25")), owner
    )

    assert invoice.subtotal == Decimal("50.00")
    assert invoice.total_amount == Decimal("47.25")


def test_invoice_without_batch_uses_fefo(db, owner):
    medicine = make_medicine(db)
    sooner = make_batch(db, medicine, quantity=2, expires_in_days=20, batch_number="SOON")
    later = make_batch(db, medicine, quantity=10, expires_in_days=200, batch_number="LATE")

    invoice = crud_invoices.create_invoice(db, _sale(medicine, 5), owner)

    db.refresh(sooner)
    db.refresh(later)
    assert sooner.quantity == 0
    assert later.quantity == 7
    detail = crud_invoices.get_invoice_with_items(db, invoice.id)
    assert [(item["batch_number"], item["quantity"]) for item in detail["items"]] == [("SOON", 2), ("LATE", 3)]


def test_invoice_numbers_are_sequential_per_day(db, owner, monkeypatch):
    medicine = make_medicine(db)
    batch = make_batch(db, medicine, quantity=50)

    monkeypatch.setattr(crud_invoices, "today_local", lambda: date(2024, 3, 5))
    first = crud_invoices.create_invoice(db, _sale(medicine, 1, batch), owner)
    second = crud_invoices.create_invoice(db, _sale(medicine, 1, batch), owner)
    assert crud_invoices.get_next_invoice_number(db) == "INV202403050003"

    monkeypatch.setattr(crud_invoices, "today_local", lambda: date(2024, 3, 6))
    next_day = crud_invoices.create_invoice(db, _sale(medicine, 1, batch), owner)

    assert first.invoice_number == "INV202403050001"
    assert second.invoice_number == "INV202403050002"
    assert next_day.invoice_number == "INV202403060001"


def test_failed_invoice_leaves_no_trace(db, owner):
    medicine = make_medicine(db, name="Cetirizine")
    other = make_medicine(db, name="Ibuprofen")
    batch = make_batch(db, medicine, quantity=10)
    short_batch = make_batch(db, other, quantity=1)

    invoice = InvoiceCreate(items=[
        InvoiceItemCreateRequest(medicine_id=medicine.id, batch_id=batch.id, quantity=3, price=Decimal("10")),
        InvoiceItemCreateRequest(medicine_id=other.id, batch_id=short_batch.id, quantity=5, price=Decimal("10")),
    ])
    with pytest.raises(ValueError, match="Insufficient stock"):
        crud_invoices.create_invoice(db, invoice, owner)

    db.refresh(batch)
    db.refresh(short_batch)
    assert batch.quantity == 10
    assert short_batch.quantity == 1
    assert db.query(Invoice).count() == 0
    assert db.query(AuditLog).filter(AuditLog.action == "SALE").count() == 0


def test_invoice_rejects_expired_batch(db, owner):
    medicine = make_medicine(db)
    expired = make_batch(db, medicine, quantity=10, expires_in_days=-1)

    with pytest.raises(ValueError, match="expired"):
        crud_invoices.create_invoice(db, _sale(medicine, 1, expired), owner)


def test_invoice_rejects_batch_of_another_medicine(db, owner):
    medicine = make_medicine(db, name="Cetirizine")
    other = make_medicine(db, name="Ibuprofen")
    other_batch = make_batch(db, other, quantity=10)

    with pytest.raises(ValueError, match="not found"):
        crud_invoices.create_invoice(db, _sale(medicine, 1, other_batch), owner)


def test_invoice_writes_sale_audit_entry(db, owner):
    medicine = make_medicine(db)
    batch = make_batch(db, medicine, quantity=10)

    invoice = crud_invoices.create_invoice(db, _sale(medicine, 2, batch), owner)

    entry = db.query(AuditLog).filter(AuditLog.action == "SALE").one()
    assert entry.record_id == invoice.id
    assert entry.user_id == owner.id
    assert entry.new_values["invoice_number"] == invoice.invoice_number


def test_daily_sales_summary(db, owner):
    medicine = make_medicine(db)
    batch = make_batch(db, medicine, quantity=10)
    crud_invoices.create_invoice(db, _sale(medicine, 2, batch, price="10"), owner)
    crud_invoices.create_invoice(db, _sale(medicine, 4, batch, price="10", discount_amount=Decimal("5")), owner)

    summary = crud_invoices.get_daily_sales(db)

    assert summary["total_bills"] == 2
    assert summary["total_revenue"] == Decimal("55.00")
    assert summary["total_discount"] == Decimal("5.00")
    assert summary["avg_bill_value"] == Decimal("27.50")


def test_create_invoice_endpoint(client, db, staff_headers):
    medicine = make_medicine(db)
    batch = make_batch(db, medicine, quantity=10, batch_number="LOT-7")

    response = client.post("/invoices/", headers=staff_headers, json={
        "customer_name": "Walk-in",
        "items": [{"medicine_id": medicine.id, "batch_id": batch.id, "quantity": 3, "price": "25.00"}],
    })

    assert response.status_code == 201, response.text
    body = response.json()
    assert body["invoice_number"].startswith("INV")
    assert body["items"][0]["batch_number"] == "LOT-7"
    assert body["items"][0]["medicine_name"] == medicine.name
    db.refresh(batch)
    assert batch.quantity == 7


def test_create_invoice_endpoint_insufficient_stock(client, db, staff_headers):
    medicine = make_medicine(db)
    batch = make_batch(db, medicine, quantity=2)

    response = client.post("/invoices/", headers=staff_headers, json={
        "items": [{"medicine_id": medicine.id, "batch_id": batch.id, "quantity": 3, "price": "25.00"}],
    })

    assert response.status_code == 400
    assert "Insufficient stock" in response.json()["detail"]


def test_create_invoice_requires_items(client, staff_headers):
    response = client.post("/invoices/", headers=staff_headers, json={"items": []})

    assert response.status_code == 422


def test_next_invoice_number_endpoint(client, staff_headers, monkeypatch):
    monkeypatch.setattr(crud_invoices, "today_local", lambda: date(2025, 1, 31))

    response = client.get("/invoices/next-number", headers=staff_headers)

    assert response.json() == {"invoice_number": "INV202501310001"}


def test_invoice_receipt_pdf(client, db, owner, staff_headers):
    medicine = make_medicine(db)
    batch = make_batch(db, medicine, quantity=10)
    invoice = crud_invoices.create_invoice(db, _sale(medicine, 2, batch), owner)

    response = client.get(f"/invoices/{invoice.id}/receipt", headers=staff_headers)

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")


def test_missing_invoice_returns_404(client, staff_headers):
    assert client.get("/invoices/999", headers=staff_headers).status_code == 404
    assert client.get("/invoices/999/receipt", headers=staff_headers).status_code == 404


def test_receipt_with_non_latin1_text(client, db, owner, owner_headers):
    client.put("/settings/store_name", headers=owner_headers, json={"value": "Shree Medicals – Pune"})
    client.put("/settings/store_address", headers=owner_headers, json={"value": "शिवाजी नगर, Pune"})
    medicine = make_medicine(db, name="Crème Ointment – 20g")
    batch = make_batch(db, medicine, quantity=10)
    invoice = crud_invoices.create_invoice(db, _sale(medicine, 1, batch, customer_name="राम"), owner)

    response = client.get(f"/invoices/{invoice.id}/receipt", headers=owner_headers)

    assert response.status_code == 200
    assert response.content.startswith(b"%PDF")
