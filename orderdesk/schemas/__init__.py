"""
Schemas package
"""
from orderdesk.schemas.product import (
    ProductBase,
    ProductCreate,
    ProductUpdate,
    StockAdjustment,
    ProductResponse,
    ProductListResponse,
    StockCheckResponse
)
from orderdesk.schemas.customer import (
    CustomerCreate,
    CustomerUpdate,
    CustomerSnapshot,
    CustomerResponse,
    CustomerListResponse
)
from orderdesk.schemas.order import (
    OrderItemRequest,
    OrderExtras,
    CourierInfo,
    PaymentInfo,
    OrderCreate,
    OrderStatusUpdate,
    OrderCancelRequest,
    EstimatedDeliveryUpdate,
    OrderResponse,
    OrderListResponse,
    PublicOrderResponse,
    OrderEvent
)
from orderdesk.schemas.inventory import LedgerEntryResponse, LedgerListResponse, ReconciliationResponse
from orderdesk.schemas.report import DashboardSummary

__all__ = [
    "ProductBase",
    "ProductCreate",
    "ProductUpdate",
    "StockAdjustment",
    "ProductResponse",
    "ProductListResponse",
    "StockCheckResponse",
    "CustomerCreate",
    "CustomerUpdate",
    "CustomerSnapshot",
    "CustomerResponse",
    "CustomerListResponse",
    "OrderItemRequest",
    "OrderExtras",
    "CourierInfo",
    "PaymentInfo",
    "OrderCreate",
    "OrderStatusUpdate",
    "OrderCancelRequest",
    "EstimatedDeliveryUpdate",
    "OrderResponse",
    "OrderListResponse",
    "PublicOrderResponse",
    "OrderEvent",
    "LedgerEntryResponse",
    "LedgerListResponse",
    "ReconciliationResponse",
    "DashboardSummary",
]
