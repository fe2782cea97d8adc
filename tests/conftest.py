import os

# Settings are read at import time; point them at an in-memory database first.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["EVENTS_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient

from orderdesk import models  # noqa: F401
from orderdesk.database import Base, SessionLocal, engine, get_db
from orderdesk.main import app
from orderdesk.repositories.customer_repository import CustomerRepository
from orderdesk.repositories.product_repository import ProductRepository
from orderdesk.schemas.customer import CustomerCreate, CustomerSnapshot
from orderdesk.schemas.order import OrderCreate, OrderExtras, OrderItemRequest
from orderdesk.schemas.product import ProductCreate


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_product(db):
    repo = ProductRepository(db)
    counter = {"n": 0}

    def _make(sku=None, name=None, price=100.0, stock=10, **kwargs):
        counter["n"] += 1
        sku = sku or f"SKU-{counter['n']:03d}"
        return repo.create(ProductCreate(sku=sku, name=name or f"Product {sku}", price=price, stock=stock, **kwargs))

    return _make


@pytest.fixture
def make_customer(db):
    repo = CustomerRepository(db)

    def _make(name="Asha Rao", email="asha@example.com", **kwargs):
        return repo.create(CustomerCreate(name=name, email=email, **kwargs))

    return _make


def order_data(items, customer=None, customer_id=None, extras=None, **kwargs) -> OrderCreate:
    """OrderCreate with an inline customer unless a customer id is given"""
    if customer is None and customer_id is None:
        customer = CustomerSnapshot(name="Walk-in Customer", phone="555-0100")
    return OrderCreate(
        customer=customer,
        customer_id=customer_id,
        items=[OrderItemRequest(**item) for item in items],
        extras=OrderExtras(**(extras or {})),
        **kwargs,
    )
