from datetime import date

import pytest
from sqlalchemy.exc import SQLAlchemyError

from conftest import order_data
from orderdesk.exceptions import InvalidStatusTransitionError, NotFoundError, ValidationError
from orderdesk.schemas.order import CourierInfo, PaymentInfo
from orderdesk.services.order_service import OrderService


class RecordingPublisher:
    """Collects published events instead of sending them"""

    def __init__(self):
        self.events = []

    def publish_order_created(self, data):
        self.events.append(("OrderCreated", data))
        return True

    def publish_order_status_changed(self, data):
        self.events.append(("OrderStatusChanged", data))
        return True


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def service(db, publisher):
    return OrderService(db, event_publisher=publisher)


@pytest.fixture
def order(service, make_product):
    product = make_product(stock=10)
    return service.create_order(order_data([{"product_id": product.id, "qty": 2}]), actor="staff-1")


def test_create_publishes_event(service, publisher, order):
    assert publisher.events[0][0] == "OrderCreated"
    assert publisher.events[0][1]["public_id"] == order.public_id
    assert order.allowed_transitions[:2] == ["Packed", "Waiting for Pickup"]
    assert order.customer_name == "Walk-in Customer"


def test_forward_move(service, publisher, order):
    updated = service.update_order_status(order.id, "Waiting for Pickup", actor="staff-2")

    assert updated.status == "Waiting for Pickup"
    assert publisher.events[-1][1]["old_status"] == "Received"
    assert publisher.events[-1][1]["new_status"] == "Waiting for Pickup"


def test_backward_move_is_rejected(service, order):
    service.update_order_status(order.id, "In Transit", actor="staff-1")

    with pytest.raises(InvalidStatusTransitionError):
        service.update_order_status(order.id, "Packed", actor="staff-1")


def test_status_change_of_unknown_order(service):
    with pytest.raises(NotFoundError):
        service.update_order_status(404, "Packed", actor="staff-1")


def test_cancel_via_status_change_needs_reason(service, order):
    with pytest.raises(ValidationError):
        service.update_order_status(order.id, "Cancelled", actor="staff-1")

    cancelled = service.update_order_status(order.id, "Cancelled", actor="staff-1", note="Out of area")
    assert cancelled.status == "Cancelled"
    assert cancelled.allowed_transitions == []


def test_blank_reason_is_rejected(service, order):
    with pytest.raises(ValidationError):
        service.cancel_order(order.id, "Returned", actor="staff-1", note="   ")


def test_delivered_order_cannot_be_cancelled(service, order):
    service.update_order_status(order.id, "Delivered", actor="staff-1")

    with pytest.raises(InvalidStatusTransitionError):
        service.cancel_order(order.id, "Cancelled", actor="staff-1", note="Too late")


def test_repeated_cancel_publishes_once(service, publisher, order):
    service.cancel_order(order.id, "Cancelled", actor="staff-1", note="First")
    again = service.cancel_order(order.id, "Cancelled", actor="staff-1", note="Second")

    assert again.status == "Cancelled"
    assert [name for name, _ in publisher.events] == ["OrderCreated", "OrderStatusChanged"]


def test_customer_name_from_record(service, make_product, make_customer):
    product = make_product()
    customer = make_customer(name="Kiran")
    service.create_order(order_data([{"product_id": product.id, "qty": 1}], customer_id=customer.id), actor="s")

    listed = service.get_all_orders()

    assert listed.total == 1
    assert listed.orders[0].customer_name == "Kiran"
    assert service.get_orders_by_customer(customer.id)[0].customer_id == customer.id


def test_customer_name_falls_back_to_id(service, make_product, make_customer, monkeypatch):
    product = make_product()
    customer = make_customer()
    service.create_order(order_data([{"product_id": product.id, "qty": 1}], customer_id=customer.id), actor="s")

    def failing_lookup(ids):
        raise SQLAlchemyError("customers unavailable")

    monkeypatch.setattr(service.repository.customers, "get_many", failing_lookup)

    listed = service.get_all_orders()
    assert listed.orders[0].customer_name == str(customer.id)


def test_filter_by_status(service, make_product):
    product = make_product(stock=10)
    first = service.create_order(order_data([{"product_id": product.id, "qty": 1}]), actor="s")
    service.create_order(order_data([{"product_id": product.id, "qty": 1}]), actor="s")
    service.update_order_status(first.id, "Packed", actor="s")

    packed = service.get_all_orders(status="Packed")

    assert packed.total == 1
    assert packed.orders[0].id == first.id


def test_detail_updates(service, order):
    service.update_courier(order.id, CourierInfo(courier="BlueDart", awb="AWB123"))
    service.update_payment(order.id, PaymentInfo(mode="UPI", status="Paid"))
    updated = service.update_estimated_delivery(order.id, date(2030, 5, 1))

    assert updated.courier.awb == "AWB123"
    assert updated.payment.status == "Paid"
    assert updated.estimated_delivery == date(2030, 5, 1)
    assert service.update_courier(999, CourierInfo()) is None


def test_public_order_lookup(service, order):
    public = service.get_public_order(order.public_id)

    assert public.status == "Received"
    assert public.totals.grand_total == order.totals.grand_total
    assert service.get_public_order("not-a-real-id") is None
