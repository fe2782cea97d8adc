"""
Services package
"""
from orderdesk.services.order_service import OrderService
from orderdesk.services.product_service import ProductService
from orderdesk.services.customer_service import CustomerService
from orderdesk.services.inventory_service import InventoryService
from orderdesk.services.report_service import ReportService

__all__ = ["OrderService", "ProductService", "CustomerService", "InventoryService", "ReportService"]
