"""
Models package
"""
from orderdesk.models.product import Product
from orderdesk.models.customer import Customer
from orderdesk.models.order import Order, OrderItem, OrderHistory
from orderdesk.models.inventory import InventoryLedgerEntry

__all__ = [
    "Product",
    "Customer",
    "Order",
    "OrderItem",
    "OrderHistory",
    "InventoryLedgerEntry",
]
