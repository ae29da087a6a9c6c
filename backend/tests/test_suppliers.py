"""
Tests for suppliers and categories
"""


def test_supplier_lifecycle(client, owner_headers, staff_headers):
    created = client.post("/suppliers/", headers=owner_headers, json={"name": "Apex Pharma", "phone": "044-2222"})
    assert created.status_code == 201, created.text
    supplier_id = created.json()["id"]

    duplicate = client.post("/suppliers/", headers=owner_headers, json={"name": "apex pharma"})
    assert duplicate.status_code == 400

    updated = client.patch(f"/suppliers/{supplier_id}", headers=owner_headers, json={"is_active": False})
    assert updated.json()["is_active"] is False

    assert client.get("/suppliers/?active_only=true", headers=staff_headers).json() == []
    assert len(client.get("/suppliers/", headers=staff_headers).json()) == 1
    assert client.get("/suppliers/999", headers=staff_headers).status_code == 404


def test_inactive_supplier_cannot_take_orders(client, db, owner_headers):
    supplier_id = client.post("/suppliers/", headers=owner_headers, json={"name": "Dormant Traders", "is_active": False}).json()["id"]
    medicine_id = client.post("/medicines/", headers=owner_headers, json={"name": "ORS"}).json()["id"]

    response = client.post("/purchase-orders/", headers=owner_headers, json={
        "supplier_id": supplier_id,
        "items": [{"medicine_id": medicine_id, "quantity": 5, "unit_price": "3.00"}],
    })

    assert response.status_code == 400


def test_categories(client, staff_headers):
    created = client.post("/categories/", headers=staff_headers, json={"name": "Antibiotics"})
    assert created.status_code == 201, created.text

    assert client.post("/categories/", headers=staff_headers, json={"name": "Antibiotics"}).status_code == 400
    assert [c["name"] for c in client.get("/categories/", headers=staff_headers).json()] == ["Antibiotics"]

    medicine = client.post("/medicines/", headers=staff_headers, json={"name": "Amoxicillin", "category_id": created.json()["id"]})
    assert medicine.status_code == 201
    bad_category = client.post("/medicines/", headers=staff_headers, json={"name": "Mystery", "category_id": 999})
    assert bad_category.status_code == 400
