"""
Tests for the dashboard summary
"""
from decimal import Decimal

from crud import batch as crud_batch
from crud import invoices as crud_invoices
from crud import medicine as crud_medicine
from crud.dashboard import get_dashboard_stats
from schemas.invoices import InvoiceCreate, InvoiceItemCreateRequest
from conftest import make_batch, make_medicine, make_supplier


def test_dashboard_counts_match_full_lists(db, owner):
    for i in range(7):
        medicine = make_medicine(db, name=f"Low {i}", reorder_level=5)
        make_batch(db, medicine, quantity=2, expires_in_days=10 + i, batch_number=f"EXP-{i}")
    healthy = make_medicine(db, name="Healthy", reorder_level=5)
    make_batch(db, healthy, quantity=50, expires_in_days=365)
    make_supplier(db)

    stats = get_dashboard_stats(db)

    assert stats["lowStockCount"] == len(crud_medicine.get_low_stock_medicines(db)) == 7
    assert stats["expiringCount"] == len(crud_batch.get_expiring_batches(db, 30)) == 7
    assert len(stats["lowStockItems"]) == 5
    assert len(stats["expiringItems"]) == 5
    assert [b["batch_number"] for b in stats["expiringItems"]] == ["EXP-0", "EXP-1", "EXP-2", "EXP-3", "EXP-4"]
    assert stats["totalMedicines"] == 8
    assert stats["totalSuppliers"] == 1


def test_dashboard_endpoint_reports_sales(client, db, owner, staff_headers):
    medicine = make_medicine(db)
    batch = make_batch(db, medicine, quantity=10)
    crud_invoices.create_invoice(db, InvoiceCreate(items=[
        InvoiceItemCreateRequest(medicine_id=medicine.id, batch_id=batch.id, quantity=2, price=Decimal("40")),
    ]), owner)

    response = client.get("/dashboard/stats", headers=staff_headers)

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["todaySales"]["total_bills"] == 1
    assert Decimal(str(body["todaySales"]["total_revenue"])) == Decimal("80")
    assert Decimal(str(body["weeklySales"])) == Decimal("80")
    assert Decimal(str(body["monthlySales"])) == Decimal("80")
    assert body["totalMedicines"] == 1
