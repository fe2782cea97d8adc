"""
Domain exceptions
"""
from typing import Optional


class OrderDeskError(Exception):
    """Base exception for OrderDesk errors"""
    pass


class NotFoundError(OrderDeskError):
    """Order, product or customer id does not resolve"""
    pass


class InsufficientStockError(OrderDeskError):
    """Requested quantity exceeds available stock"""

    def __init__(self, product_id: int, available: int, requested: int, sku: Optional[str] = None):
        self.product_id = product_id
        self.available = available
        self.requested = requested
        self.sku = sku
        label = sku or f"id={product_id}"
        super().__init__(
            f"Insufficient stock for product {label}. "
            f"Available: {available}, requested: {requested}"
        )


class ValidationError(OrderDeskError):
    """Request is well-formed but violates a business rule"""
    pass


class InvalidStatusTransitionError(ValidationError):
    """Order status move not permitted by the status flow"""
    pass


class TransactionConflictError(OrderDeskError):
    """A concurrent write won the race; the caller may retry"""
    pass
