import pytest


@pytest.fixture
def product(make_product):
    return make_product(sku="MJ-0A1", name="Mango Jam", price=100.0, stock=10)


def place(client, items, actor="staff-1", **fields):
    payload = {
        "customer": {"name": "Ravi Kumar", "phone": "555-0199", "email": "ravi@example.com"},
        "items": items,
        "extras": {"shipping": 10, "tax": 5, "discount": 0},
        "payment": {"mode": "UPI", "status": "Paid", "txn_id": "TXN-1"},
        "notes": "Leave at the gate",
    }
    payload.update(fields)
    return client.post("/orders", json=payload, headers={"X-Actor-Id": actor})


def test_create_order(client, product):
    response = place(client, [{"sku": "MJ-0A1", "qty": 2}], channel="Instagram")

    assert response.status_code == 201
    order = response.json()
    assert order["totals"]["grand_total"] == 215
    assert order["status"] == "Received"
    assert order["channel"] == "Instagram"
    assert order["history"][0]["actor"] == "staff-1"
    assert order["items"][0]["line_total"] == 200
    assert client.get(f"/products/{product.id}").json()["stock"] == 8


def test_create_order_errors(client, product):
    assert place(client, []).status_code == 422
    assert place(client, [{"sku": "MJ-0A1", "qty": 11}]).status_code == 409
    assert place(client, [{"product_id": 999, "qty": 1}]).status_code == 404
    assert place(client, [{"sku": "MJ-0A1", "qty": 0}]).status_code == 422
    assert place(client, [{"qty": 1}]).status_code == 422
    assert client.get(f"/products/{product.id}").json()["stock"] == 10
    assert client.get("/orders").json()["total"] == 0


def test_status_flow(client, product):
    order_id = place(client, [{"product_id": product.id, "qty": 1}]).json()["id"]

    packed = client.patch(f"/orders/{order_id}/status", json={"status": "Packed"}, headers={"X-Actor-Id": "staff-2"})
    assert packed.status_code == 200
    assert packed.json()["history"][-1]["actor"] == "staff-2"
    assert "Packed" not in packed.json()["allowed_transitions"]

    back = client.patch(f"/orders/{order_id}/status", json={"status": "Received"})
    assert back.status_code == 422

    unknown = client.patch(f"/orders/{order_id}/status", json={"status": "Lost"})
    assert unknown.status_code == 422

    assert client.patch("/orders/999/status", json={"status": "Packed"}).status_code == 404


def test_cancel_and_repeat(client, product):
    order_id = place(client, [{"product_id": product.id, "qty": 4}]).json()["id"]

    assert client.post(f"/orders/{order_id}/cancel", json={}).status_code == 422

    first = client.post(f"/orders/{order_id}/cancel", json={"note": "Customer called"})
    second = client.post(f"/orders/{order_id}/cancel", json={"note": "Customer called again"})

    assert first.status_code == second.status_code == 200
    assert second.json()["status"] == "Cancelled"
    assert len(second.json()["history"]) == 2
    assert client.get(f"/products/{product.id}").json()["stock"] == 10

    ledger = client.get("/inventory/ledger", params={"reference_id": str(order_id)}).json()
    assert sorted(e["change"] for e in ledger["entries"]) == [-4, 4]


def test_return_after_delivery_is_refused(client, product):
    order_id = place(client, [{"product_id": product.id, "qty": 1}]).json()["id"]
    client.patch(f"/orders/{order_id}/status", json={"status": "Delivered"})

    response = client.post(f"/orders/{order_id}/return", json={"note": "Changed mind"})

    assert response.status_code == 422
    assert client.get(f"/products/{product.id}").json()["stock"] == 9


def test_return_in_transit(client, product):
    order_id = place(client, [{"product_id": product.id, "qty": 3}]).json()["id"]
    client.patch(f"/orders/{order_id}/status", json={"status": "In Transit"})

    response = client.post(f"/orders/{order_id}/return", json={"note": "Refused at door"})

    assert response.json()["status"] == "Returned"
    entries = client.get("/inventory/ledger", params={"product_id": product.id}).json()["entries"]
    assert entries[0]["reason"] == "returned"
    assert entries[0]["change"] == 3


def test_public_view_hides_internal_fields(client, product):
    order = place(client, [{"product_id": product.id, "qty": 1}]).json()
    client.patch(f"/orders/{order['id']}/status", json={"status": "Packed", "note": "internal note"})

    response = client.get(f"/public/orders/{order['public_id']}")

    assert response.status_code == 200
    public = response.json()
    assert public["status"] == "Packed"
    assert [h["status"] for h in public["history"]] == ["Received", "Packed"]
    for hidden in ("id", "customer_id", "customer_snapshot", "payment", "notes", "allowed_transitions"):
        assert hidden not in public
    assert "actor" not in public["history"][0]
    assert "note" not in public["history"][1]
    assert "product_id" not in public["items"][0]


def test_public_lookup_by_internal_id_fails(client, product):
    order = place(client, [{"product_id": product.id, "qty": 1}]).json()

    assert client.get(f"/public/orders/{order['id']}").status_code == 404


def test_polling_updated_since(client, product):
    order_id = place(client, [{"product_id": product.id, "qty": 1}]).json()["id"]

    assert client.get("/orders", params={"updated_since": "2000-01-01T00:00:00Z"}).json()["total"] == 1
    assert client.get("/orders", params={"updated_since": "2999-01-01T00:00:00"}).json()["total"] == 0
    assert client.get("/orders", params={"status": "Received"}).json()["orders"][0]["id"] == order_id


def test_detail_endpoints(client, product):
    order_id = place(client, [{"product_id": product.id, "qty": 1}]).json()["id"]

    courier = client.put(f"/orders/{order_id}/courier", json={"courier": "DTDC", "awb": "D123"})
    payment = client.put(f"/orders/{order_id}/payment", json={"mode": "Cash", "status": "Pending"})
    eta = client.put(f"/orders/{order_id}/estimated-delivery", json={"estimated_delivery": "2030-01-15"})

    assert courier.json()["courier"]["awb"] == "D123"
    assert payment.json()["payment"]["mode"] == "Cash"
    assert eta.json()["estimated_delivery"] == "2030-01-15"
    assert client.put("/orders/999/courier", json={}).status_code == 404


def test_dashboard_and_reconciliation(client, product, make_product):
    other = make_product(sku="LOW-1", price=50.0, stock=3)
    kept = place(client, [{"product_id": product.id, "qty": 1}]).json()
    cancelled = place(client, [{"product_id": other.id, "qty": 1}]).json()
    client.post(f"/orders/{cancelled['id']}/cancel", json={"note": "Duplicate"})
    client.post(f"/products/{product.id}/stock", json={"change": -2, "reason": "damaged"})

    dashboard = client.get("/reports/dashboard").json()

    assert dashboard["total_orders"] == 2
    assert dashboard["revenue"] == kept["totals"]["grand_total"]
    assert dashboard["pending"] == 1
    assert dashboard["by_status"]["Cancelled"] == 1
    assert dashboard["low_stock"] == 1

    report = client.get("/inventory/reconciliation").json()
    assert len(report) == 2
    assert all(r["consistent"] for r in report)
    single = client.get(f"/inventory/reconciliation/{product.id}").json()
    assert single["ledger_total"] == -3
    assert single["current_stock"] == 7
    assert client.get("/inventory/reconciliation/999").status_code == 404


def test_health(client):
    assert client.get("/health").json()["database"] == "healthy"
    assert client.get("/").json()["service"] == "orderdesk"
