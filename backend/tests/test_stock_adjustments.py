"""
Tests for manual stock corrections
"""
import pytest

from crud import stock_adjustments as crud_stock_adjustments
from models.audit_log import AuditLog
from models.stock_adjustments import AdjustmentType
from schemas.stock_adjustments import StockAdjustmentCreate
from conftest import make_batch, make_medicine


def _adjust(db, batch, adjustment_type, quantity, user=None, **kwargs):
    return crud_stock_adjustments.create_stock_adjustment(
        db,
        StockAdjustmentCreate(batch_id=batch.id, adjustment_type=adjustment_type, quantity=quantity, **kwargs),
        user,
    )


def test_add_increases_batch(db, owner):
    medicine = make_medicine(db)
    batch = make_batch(db, medicine, quantity=10)

    adjustment = _adjust(db, batch, AdjustmentType.ADD, 5, owner)

    db.refresh(batch)
    assert batch.quantity == 15
    assert (adjustment.old_quantity, adjustment.new_quantity) == (10, 15)
    assert adjustment.medicine_id == medicine.id


@pytest.mark.parametrize("adjustment_type", [AdjustmentType.ADDITION, AdjustmentType.RETURN])
def test_other_increasing_types(db, adjustment_type):
    medicine = make_medicine(db)
    batch = make_batch(db, medicine, quantity=10)

    _adjust(db, batch, adjustment_type, 2)

    db.refresh(batch)
    assert batch.quantity == 12


def test_remove_is_clamped_at_zero(db, owner):
    medicine = make_medicine(db)
    batch = make_batch(db, medicine, quantity=10)

    adjustment = _adjust(db, batch, AdjustmentType.REMOVE, 15, owner)

    db.refresh(batch)
    assert batch.quantity == 0
    assert adjustment.new_quantity == 0


@pytest.mark.parametrize("adjustment_type", [AdjustmentType.DAMAGE, AdjustmentType.EXPIRED])
def test_write_offs_decrease_batch(db, adjustment_type):
    medicine = make_medicine(db)
    batch = make_batch(db, medicine, quantity=10)

    _adjust(db, batch, adjustment_type, 4, reason="Broken strip")

    db.refresh(batch)
    assert batch.quantity == 6


def test_adjustment_is_audited(db, owner):
    medicine = make_medicine(db)
    batch = make_batch(db, medicine, quantity=10)

    adjustment = _adjust(db, batch, AdjustmentType.DAMAGE, 1, owner)

    entry = db.query(AuditLog).filter(AuditLog.action == "ADJUST").one()
    assert entry.record_id == adjustment.id
    assert entry.changed_by == owner.username


def test_missing_batch_returns_none(db):
    missing = StockAdjustmentCreate(batch_id=404, adjustment_type=AdjustmentType.ADD, quantity=1)

    assert crud_stock_adjustments.create_stock_adjustment(db, missing) is None


def test_medicine_mismatch_is_rejected(db):
    medicine = make_medicine(db, name="Cetirizine")
    other = make_medicine(db, name="Ibuprofen")
    batch = make_batch(db, medicine, quantity=10)

    with pytest.raises(ValueError):
        _adjust(db, batch, AdjustmentType.ADD, 1, medicine_id=other.id)


def test_adjustment_endpoints(client, db, staff_headers):
    medicine = make_medicine(db)
    batch = make_batch(db, medicine, quantity=10)

    response = client.post("/stock-adjustments/", headers=staff_headers, json={
        "batch_id": batch.id, "adjustment_type": "remove", "quantity": 3, "reason": "Counted short",
    })
    assert response.status_code == 201, response.text
    assert response.json()["new_quantity"] == 7

    missing = client.post("/stock-adjustments/", headers=staff_headers, json={
        "batch_id": 999, "adjustment_type": "add", "quantity": 1,
    })
    assert missing.status_code == 404

    history = client.get(f"/medicines/{medicine.id}/stock-adjustments", headers=staff_headers)
    assert [a["adjustment_type"] for a in history.json()] == ["remove"]
