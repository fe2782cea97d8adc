"""
Order status flow

Forward statuses follow a fixed linear order. An order may advance to any
status strictly later than its current one. Cancelled and Returned can be
reached from every status that is not final. Nothing leaves Delivered,
Cancelled or Returned.
"""
from enum import Enum
from typing import List


class OrderStatus(str, Enum):
    RECEIVED = "Received"
    PACKED = "Packed"
    WAITING_FOR_PICKUP = "Waiting for Pickup"
    IN_TRANSIT = "In Transit"
    OUT_FOR_DELIVERY = "Out for Delivery"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"
    RETURNED = "Returned"


FORWARD_FLOW: List[OrderStatus] = [
    OrderStatus.RECEIVED,
    OrderStatus.PACKED,
    OrderStatus.WAITING_FOR_PICKUP,
    OrderStatus.IN_TRANSIT,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.DELIVERED,
]

TERMINAL_STATUSES = frozenset({OrderStatus.CANCELLED, OrderStatus.RETURNED})

# no transition away from these
FINAL_STATUSES = TERMINAL_STATUSES | {OrderStatus.DELIVERED}

ALL_STATUSES: List[str] = [s.value for s in OrderStatus]


def coerce(status) -> OrderStatus:
    """Accept an OrderStatus or its string value"""
    return status if isinstance(status, OrderStatus) else OrderStatus(status)


def is_terminal(status) -> bool:
    return coerce(status) in TERMINAL_STATUSES


def is_final(status) -> bool:
    return coerce(status) in FINAL_STATUSES


def forward_statuses_after(status) -> List[OrderStatus]:
    current = coerce(status)
    if current not in FORWARD_FLOW:
        return []
    return FORWARD_FLOW[FORWARD_FLOW.index(current) + 1:]


def allowed_transitions(status) -> List[OrderStatus]:
    """Statuses an order in `status` may move to"""
    current = coerce(status)
    if current in FINAL_STATUSES:
        return []
    return forward_statuses_after(current) + [OrderStatus.CANCELLED, OrderStatus.RETURNED]


def can_transition(current, target) -> bool:
    return coerce(target) in allowed_transitions(current)
