from conftest import order_data
from orderdesk.repositories.order_repository import OrderRepository


def test_customer_crud(client):
    created = client.post("/customers", json={"name": "Nisha Iyer", "email": "nisha@example.com", "phone": "98450"})
    assert created.status_code == 201
    customer_id = created.json()["id"]

    updated = client.put(f"/customers/{customer_id}", json={"address": "12 MG Road"})
    assert updated.json()["address"] == "12 MG Road"
    assert updated.json()["name"] == "Nisha Iyer"

    assert client.get("/customers", params={"q": "nisha"}).json()["total"] == 1
    assert client.delete(f"/customers/{customer_id}").status_code == 204
    assert client.get(f"/customers/{customer_id}").status_code == 404


def test_invalid_email_is_rejected(client):
    assert client.post("/customers", json={"name": "X", "email": "not-an-email"}).status_code == 422


def test_customer_with_orders_cannot_be_deleted(client, db, make_product, make_customer):
    customer = make_customer()
    product = make_product()
    OrderRepository(db).create_order(
        order_data([{"product_id": product.id, "qty": 1}], customer_id=customer.id), actor="staff-1"
    )

    response = client.delete(f"/customers/{customer.id}")

    assert response.status_code == 409
    assert client.get(f"/customers/{customer.id}").status_code == 200


def test_customer_orders(client, db, make_product, make_customer):
    customer = make_customer(name="Farah")
    product = make_product()
    OrderRepository(db).create_order(
        order_data([{"product_id": product.id, "qty": 1}], customer_id=customer.id), actor="staff-1"
    )
    OrderRepository(db).create_order(order_data([{"product_id": product.id, "qty": 1}]), actor="staff-1")

    orders = client.get(f"/customers/{customer.id}/orders").json()

    assert len(orders) == 1
    assert orders[0]["customer_name"] == "Farah"
    assert client.get("/customers/999/orders").status_code == 404


def test_inline_customer_is_kept_on_the_order(client, db, make_product):
    product = make_product()
    order = OrderRepository(db).create_order(
        order_data([{"product_id": product.id, "qty": 1}], customer={"name": "Old Name"}), actor="staff-1"
    )

    fetched = client.get(f"/orders/{order.id}").json()

    assert fetched["customer_snapshot"]["name"] == "Old Name"
    assert fetched["customer_id"] is None
