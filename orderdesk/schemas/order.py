"""
Pydantic schemas for order request/response validation
"""
from pydantic import BaseModel, Field, ConfigDict, model_validator
from typing import Optional, List
from datetime import date, datetime

from orderdesk.order_status import OrderStatus
from orderdesk.schemas.customer import CustomerSnapshot


class OrderItemRequest(BaseModel):
    """One requested line: a product (by id or SKU) and a quantity"""
    product_id: Optional[int] = Field(None, gt=0, description="Product ID")
    sku: Optional[str] = Field(None, min_length=1, description="Product SKU, used when product_id is absent")
    qty: int = Field(1, ge=1, description="Quantity to order")

    @model_validator(mode="after")
    def product_reference_required(self):
        if self.product_id is None and not self.sku:
            raise ValueError("Either 'product_id' or 'sku' is required")
        return self


class OrderExtras(BaseModel):
    """Order-level monetary adjustments"""
    shipping: float = Field(0.0, ge=0)
    tax: float = Field(0.0, ge=0)
    discount: float = Field(0.0, ge=0)


class CourierInfo(BaseModel):
    """Courier / shipping details"""
    courier: Optional[str] = Field(None, max_length=100)
    awb: Optional[str] = Field(None, max_length=100, description="Air waybill / tracking number")
    pickup_at: Optional[datetime] = None
    tracking_url: Optional[str] = Field(None, max_length=500)
    notes: Optional[str] = None


class PaymentInfo(BaseModel):
    """Payment bookkeeping; no payment processing happens here"""
    mode: Optional[str] = Field(None, max_length=50)
    status: str = Field("Pending", max_length=50)
    txn_id: Optional[str] = Field(None, max_length=100)


class OrderCreate(BaseModel):
    """
    Schema for creating a new order

    Exactly one of customer_id / customer must be given. An empty item list
    is rejected by the repository, not here, so it reports a domain error.
    """
    customer_id: Optional[int] = Field(None, gt=0, description="Existing customer ID")
    customer: Optional[CustomerSnapshot] = Field(None, description="Inline customer details")
    items: List[OrderItemRequest] = Field(default_factory=list)
    channel: Optional[str] = Field(None, max_length=50, description="Order source, e.g. Instagram")
    extras: OrderExtras = Field(default_factory=OrderExtras)
    courier: Optional[CourierInfo] = None
    payment: Optional[PaymentInfo] = None
    notes: str = ""


class OrderStatusUpdate(BaseModel):
    """Schema for moving an order to another status"""
    status: OrderStatus = Field(..., description="Target status")
    note: Optional[str] = Field(None, description="Free-text note; required for Cancelled/Returned")


class OrderCancelRequest(BaseModel):
    """Reason for cancelling or returning an order"""
    note: str = Field("", description="Reason (required)")


class EstimatedDeliveryUpdate(BaseModel):
    estimated_delivery: Optional[date] = None


class OrderItemResponse(BaseModel):
    product_id: Optional[int]
    sku: str
    name: str
    price: float
    qty: int
    line_total: float

    model_config = ConfigDict(from_attributes=True)


class OrderTotals(BaseModel):
    sub_total: float
    shipping: float
    tax: float
    discount: float
    grand_total: float


class HistoryEntryResponse(BaseModel):
    status: str
    at: datetime
    actor: str
    note: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class OrderResponse(BaseModel):
    """Schema for order response"""
    id: int
    public_id: str
    status: str
    channel: str
    customer_id: Optional[int]
    customer_snapshot: Optional[CustomerSnapshot]
    customer_name: Optional[str] = None
    items: List[OrderItemResponse]
    totals: OrderTotals
    courier: Optional[CourierInfo] = None
    payment: Optional[PaymentInfo] = None
    notes: str
    estimated_delivery: Optional[date] = None
    history: List[HistoryEntryResponse]
    allowed_transitions: List[str]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderListResponse(BaseModel):
    """Schema for list of orders response"""
    orders: list[OrderResponse]
    total: int


class PublicHistoryEntry(BaseModel):
    status: str
    at: datetime

    model_config = ConfigDict(from_attributes=True)


class PublicOrderItem(BaseModel):
    sku: str
    name: str
    price: float
    qty: int
    line_total: float

    model_config = ConfigDict(from_attributes=True)


class PublicOrderResponse(BaseModel):
    """Customer-safe order view served without authentication"""
    public_id: str
    status: str
    customer_name: Optional[str] = None
    items: List[PublicOrderItem]
    totals: OrderTotals
    courier: Optional[CourierInfo] = None
    estimated_delivery: Optional[date] = None
    history: List[PublicHistoryEntry]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderEvent(BaseModel):
    """Schema for order event payloads published to the broker"""
    event_type: str
    event_id: str
    event_version: str = "1.0"
    timestamp: str
    source: str = "orderdesk"
    data: dict
