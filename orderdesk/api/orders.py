"""
Order API endpoints
"""
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from datetime import datetime, timezone
from typing import Optional

from orderdesk.api.deps import get_actor
from orderdesk.api.errors import http_error, not_found
from orderdesk.database import get_db
from orderdesk.exceptions import OrderDeskError
from orderdesk.order_status import OrderStatus
from orderdesk.services.order_service import OrderService
from orderdesk.schemas.order import (
    CourierInfo,
    EstimatedDeliveryUpdate,
    OrderCancelRequest,
    OrderCreate,
    OrderStatusUpdate,
    OrderResponse,
    OrderListResponse,
    PaymentInfo
)

router = APIRouter(prefix="/orders", tags=["orders"])


def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    """Dependency to get OrderService instance"""
    return OrderService(db)


@router.get("", response_model=OrderListResponse, summary="Get all orders")
def get_orders(
    skip: int = Query(0, ge=0, description="Number of orders to skip"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum number of orders to return"),
    status_filter: Optional[OrderStatus] = Query(None, alias="status", description="Only orders in this status"),
    updated_since: Optional[datetime] = Query(None, description="Only orders changed after this UTC time"),
    service: OrderService = Depends(get_order_service)
):
    """
    Retrieve orders, newest first

    - **skip**: Number of orders to skip (default: 0)
    - **limit**: Maximum number of orders to return (default: 100, max: 1000)
    - **status**: Status filter
    - **updated_since**: Poll for changes since the previous fetch
    """
    if updated_since is not None and updated_since.tzinfo is not None:
        # stored timestamps are naive UTC
        updated_since = updated_since.astimezone(timezone.utc).replace(tzinfo=None)
    return service.get_all_orders(
        skip=skip,
        limit=limit,
        status=status_filter.value if status_filter else None,
        updated_since=updated_since
    )


@router.get("/{order_id}", response_model=OrderResponse, summary="Get order by ID")
def get_order(
    order_id: int,
    service: OrderService = Depends(get_order_service)
):
    """
    Retrieve a specific order by ID

    - **order_id**: Order ID
    """
    order = service.get_order_by_id(order_id)
    if not order:
        raise not_found("Order", f"id={order_id}")
    return order


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED, summary="Create order")
def create_order(
    order_data: OrderCreate,
    actor: str = Depends(get_actor),
    service: OrderService = Depends(get_order_service)
):
    """
    Create a new order

    Process:
    1. Resolve products and check stock availability
    2. Snapshot prices and calculate totals
    3. Save order, decrement stock and write ledger entries in one transaction
    4. Publish OrderCreated event

    - **customer_id** or **customer**: existing customer or inline details (exactly one)
    - **items**: list of {product_id | sku, qty} (at least one)
    - **extras**: shipping, tax, discount
    - **channel**, **courier**, **payment**, **notes**: optional
    """
    try:
        return service.create_order(order_data, actor)
    except OrderDeskError as e:
        raise http_error(e)


@router.patch("/{order_id}/status", response_model=OrderResponse, summary="Update order status")
def update_order_status(
    order_id: int,
    status_data: OrderStatusUpdate,
    actor: str = Depends(get_actor),
    service: OrderService = Depends(get_order_service)
):
    """
    Move an order to a later status, or cancel/return it

    - **order_id**: Order ID
    - **status**: Received, Packed, Waiting for Pickup, In Transit, Out for Delivery,
      Delivered, Cancelled, Returned
    - **note**: optional; required for Cancelled and Returned
    """
    try:
        return service.update_order_status(order_id, status_data.status, actor, status_data.note)
    except OrderDeskError as e:
        raise http_error(e)


@router.post("/{order_id}/cancel", response_model=OrderResponse, summary="Cancel order")
def cancel_order(
    order_id: int,
    body: OrderCancelRequest,
    actor: str = Depends(get_actor),
    service: OrderService = Depends(get_order_service)
):
    """Cancel an order and restore its stock. Repeating the call changes nothing."""
    try:
        return service.cancel_order(order_id, OrderStatus.CANCELLED, actor, body.note)
    except OrderDeskError as e:
        raise http_error(e)


@router.post("/{order_id}/return", response_model=OrderResponse, summary="Return order")
def return_order(
    order_id: int,
    body: OrderCancelRequest,
    actor: str = Depends(get_actor),
    service: OrderService = Depends(get_order_service)
):
    """Mark an order returned and restore its stock. Repeating the call changes nothing."""
    try:
        return service.cancel_order(order_id, OrderStatus.RETURNED, actor, body.note)
    except OrderDeskError as e:
        raise http_error(e)


@router.put("/{order_id}/courier", response_model=OrderResponse, summary="Update courier info")
def update_courier(
    order_id: int,
    courier: CourierInfo,
    service: OrderService = Depends(get_order_service)
):
    order = service.update_courier(order_id, courier)
    if not order:
        raise not_found("Order", f"id={order_id}")
    return order


@router.put("/{order_id}/payment", response_model=OrderResponse, summary="Update payment info")
def update_payment(
    order_id: int,
    payment: PaymentInfo,
    service: OrderService = Depends(get_order_service)
):
    order = service.update_payment(order_id, payment)
    if not order:
        raise not_found("Order", f"id={order_id}")
    return order


@router.put("/{order_id}/estimated-delivery", response_model=OrderResponse, summary="Set estimated delivery")
def update_estimated_delivery(
    order_id: int,
    body: EstimatedDeliveryUpdate,
    service: OrderService = Depends(get_order_service)
):
    order = service.update_estimated_delivery(order_id, body.estimated_delivery)
    if not order:
        raise not_found("Order", f"id={order_id}")
    return order
