import pytest

from orderdesk.order_status import (
    OrderStatus,
    allowed_transitions,
    can_transition,
    forward_statuses_after,
    is_final,
    is_terminal,
)


def test_forward_flow_is_linear():
    assert forward_statuses_after("Received") == [
        OrderStatus.PACKED,
        OrderStatus.WAITING_FOR_PICKUP,
        OrderStatus.IN_TRANSIT,
        OrderStatus.OUT_FOR_DELIVERY,
        OrderStatus.DELIVERED,
    ]
    assert forward_statuses_after(OrderStatus.OUT_FOR_DELIVERY) == [OrderStatus.DELIVERED]


def test_only_later_statuses_are_offered():
    offered = allowed_transitions("In Transit")

    assert OrderStatus.PACKED not in offered
    assert OrderStatus.IN_TRANSIT not in offered
    assert OrderStatus.OUT_FOR_DELIVERY in offered
    assert OrderStatus.DELIVERED in offered


@pytest.mark.parametrize("status", ["Received", "Packed", "Waiting for Pickup", "In Transit", "Out for Delivery"])
def test_cancel_and_return_from_open_statuses(status):
    assert can_transition(status, "Cancelled")
    assert can_transition(status, "Returned")


@pytest.mark.parametrize("status", ["Delivered", "Cancelled", "Returned"])
def test_no_transition_out_of_final_statuses(status):
    assert allowed_transitions(status) == []
    assert is_final(status)


def test_terminal_statuses():
    assert is_terminal("Cancelled")
    assert is_terminal(OrderStatus.RETURNED)
    assert not is_terminal("Delivered")


def test_skipping_forward_is_allowed_but_not_backward():
    assert can_transition("Received", "In Transit")
    assert not can_transition("In Transit", "Received")
    assert not can_transition("Packed", "Packed")


def test_unknown_status_is_rejected():
    with pytest.raises(ValueError):
        can_transition("Received", "Lost")
