"""
Tests for settings, audit log listing, the Excel export and the end-of-day stock alert job
"""
from io import BytesIO

from openpyxl import load_workbook

from crud import app_config as crud_app_config
from models.audit_log import AuditLog
from tasks.eod_tasks import run_stock_alerts
from conftest import make_batch, make_medicine


def test_default_settings_seeded_on_startup(client, staff_headers):
    settings = {s["name"]: s["value"] for s in client.get("/settings/", headers=staff_headers).json()}

    assert settings["expiry_alert_days"] == "30"
    assert "store_name" in settings
    assert "store_address" in settings


def test_owner_updates_setting(client, db, owner_headers):
    response = client.put("/settings/store_name", headers=owner_headers, json={"value": "City Care Pharmacy"})

    assert response.status_code == 200
    assert crud_app_config.get_config_value(db, "store_name") == "City Care Pharmacy"


def test_audit_log_lists_newest_first_with_user_name(client, db, owner, owner_headers):
    client.put("/settings/store_phone", headers=owner_headers, json={"value": "080-1234"})

    entries = client.get("/audit-logs/?limit=5", headers=owner_headers).json()

    assert entries[0]["table_name"] == "app_config"
    assert entries[0]["user_name"] == owner.name


def test_inventory_alerts_workbook(client, db, staff_headers):
    short = make_medicine(db, name="Azithromycin", reorder_level=5)
    make_batch(db, short, quantity=2, expires_in_days=12, batch_number="AZ-12")

    response = client.get("/reports/inventory-alerts.xlsx", headers=staff_headers)

    assert response.status_code == 200
    wb = load_workbook(BytesIO(response.content))
    assert wb.sheetnames == ["Low Stock", "Expiring"]
    low_stock_rows = list(wb["Low Stock"].iter_rows(min_row=2, values_only=True))
    assert low_stock_rows[0][0] == "Azithromycin"
    assert low_stock_rows[0][4] == 2
    expiring_rows = list(wb["Expiring"].iter_rows(min_row=2, values_only=True))
    assert expiring_rows[0][2] == "AZ-12"
    assert expiring_rows[0][5] == 12


def test_stock_alert_job_records_summary(db):
    short = make_medicine(db, name="Azithromycin", reorder_level=5)
    make_batch(db, short, quantity=2, expires_in_days=12)

    summary = run_stock_alerts()

    assert summary["low_stock_count"] == 1
    assert summary["expiring_count"] == 1
    db.expire_all()
    entry = db.query(AuditLog).filter(AuditLog.action == "STOCK_ALERT").one()
    assert entry.changed_by == "system"
    assert entry.new_values["low_stock_medicine_ids"] == [short.id]
