"""
Repositories package
"""
from orderdesk.repositories.product_repository import ProductRepository
from orderdesk.repositories.customer_repository import CustomerRepository
from orderdesk.repositories.inventory_repository import InventoryLedgerRepository
from orderdesk.repositories.order_repository import OrderRepository

__all__ = [
    "ProductRepository",
    "CustomerRepository",
    "InventoryLedgerRepository",
    "OrderRepository",
]
