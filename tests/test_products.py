import pytest

from orderdesk.exceptions import InsufficientStockError, NotFoundError
from orderdesk.repositories.product_repository import ProductRepository


def create(client, **fields):
    payload = {"sku": "TEE-BLK-M", "name": "Black Tee M", "price": 499.0, "stock": 10}
    payload.update(fields)
    return client.post("/products", json=payload)


def test_create_and_fetch_product(client):
    response = create(client, low_stock_threshold=3)
    assert response.status_code == 201
    product = response.json()
    assert product["initial_stock"] == 10
    assert product["is_low_stock"] is False

    assert client.get(f"/products/{product['id']}").json()["sku"] == "TEE-BLK-M"
    assert client.get("/products/sku/TEE-BLK-M").json()["id"] == product["id"]
    assert client.get("/products/sku/NOPE").status_code == 404


def test_duplicate_sku_is_a_conflict(client):
    create(client)

    response = create(client, name="Another tee")

    assert response.status_code == 409


def test_negative_price_is_rejected(client):
    assert create(client, price=-1).status_code == 422


def test_update_does_not_touch_stock(client):
    product_id = create(client).json()["id"]

    response = client.put(f"/products/{product_id}", json={"price": 549.0, "stock": 0})

    assert response.status_code == 200
    assert response.json()["price"] == 549.0
    assert response.json()["stock"] == 10


def test_search_and_pagination(client):
    create(client, sku="TEE-BLK-M", name="Black Tee M")
    create(client, sku="TEE-WHT-M", name="White Tee M")
    create(client, sku="MUG-01", name="Coffee Mug", category="Kitchen")

    assert client.get("/products", params={"q": "tee"}).json()["total"] == 2
    assert client.get("/products", params={"category": "Kitchen"}).json()["products"][0]["sku"] == "MUG-01"
    page = client.get("/products", params={"limit": 1}).json()
    assert page["total"] == 3
    assert len(page["products"]) == 1


def test_adjust_stock_by_change(client):
    product_id = create(client).json()["id"]

    response = client.post(
        f"/products/{product_id}/stock",
        json={"change": -3, "reason": "damaged"},
        headers={"X-Actor-Id": "staff-7"},
    )

    assert response.status_code == 200
    assert response.json()["stock"] == 7
    entries = client.get("/inventory/ledger", params={"product_id": product_id}).json()["entries"]
    assert [(e["change"], e["reason"], e["actor"]) for e in entries] == [(-3, "damaged", "staff-7")]


def test_adjust_stock_to_level(client):
    product_id = create(client).json()["id"]

    response = client.post(f"/products/{product_id}/stock", json={"set_to": 25, "reason": "restock"})

    assert response.json()["stock"] == 25
    entry = client.get("/inventory/ledger", params={"product_id": product_id}).json()["entries"][0]
    assert entry["change"] == 15
    assert entry["actor"] == "system"


def test_adjust_stock_below_zero_is_a_conflict(client):
    product_id = create(client, stock=2).json()["id"]

    response = client.post(f"/products/{product_id}/stock", json={"change": -5})

    assert response.status_code == 409
    assert client.get(f"/products/{product_id}").json()["stock"] == 2


def test_adjustment_needs_exactly_one_target(client):
    product_id = create(client).json()["id"]

    assert client.post(f"/products/{product_id}/stock", json={}).status_code == 422
    assert client.post(f"/products/{product_id}/stock", json={"change": 1, "set_to": 4}).status_code == 422


def test_adjust_unknown_product(client):
    assert client.post("/products/999/stock", json={"change": 1}).status_code == 404


def test_zero_adjustment_writes_nothing(db, make_product):
    product = make_product(stock=4)
    repo = ProductRepository(db)

    repo.adjust_stock(product.id, "staff-1", set_to=4)

    assert repo.ledger.count(product_id=product.id) == 0


def test_adjust_stock_errors(db, make_product):
    product = make_product(stock=1)
    repo = ProductRepository(db)

    with pytest.raises(InsufficientStockError):
        repo.adjust_stock(product.id, "staff-1", change=-2)
    with pytest.raises(NotFoundError):
        repo.adjust_stock(12345, "staff-1", change=1)


def test_low_and_out_of_stock_lists(client):
    create(client, sku="A", name="A", stock=0)
    create(client, sku="B", name="B", stock=2, low_stock_threshold=5)
    create(client, sku="C", name="C", stock=50)

    assert [p["sku"] for p in client.get("/products/low-stock").json()] == ["B"]
    assert [p["sku"] for p in client.get("/products/out-of-stock").json()] == ["A"]


def test_check_stock(client):
    product_id = create(client, stock=3).json()["id"]

    assert client.get(f"/products/{product_id}/check", params={"quantity": 3}).json()["available"] is True
    short = client.get(f"/products/{product_id}/check", params={"quantity": 4}).json()
    assert short["available"] is False
    assert "Available: 3" in short["message"]


def test_delete_product(client):
    product_id = create(client).json()["id"]

    assert client.delete(f"/products/{product_id}").status_code == 204
    assert client.get(f"/products/{product_id}").status_code == 404
    assert client.delete(f"/products/{product_id}").status_code == 404
