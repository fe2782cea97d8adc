"""
Order Service - Business Logic Layer
"""
import logging
from datetime import date, datetime
from typing import List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from orderdesk.exceptions import InvalidStatusTransitionError, NotFoundError, ValidationError
from orderdesk.models.order import Order
from orderdesk.order_status import OrderStatus, can_transition, coerce, is_final, is_terminal
from orderdesk.publishers.event_publisher import EventPublisher
from orderdesk.repositories.order_repository import OrderRepository
from orderdesk.schemas.order import (
    CourierInfo,
    OrderCreate,
    OrderListResponse,
    OrderResponse,
    PaymentInfo,
    PublicOrderResponse,
)

logger = logging.getLogger(__name__)


class OrderService:
    """Service layer for order business logic"""

    def __init__(self, db: Session, event_publisher: Optional[EventPublisher] = None):
        self.repository = OrderRepository(db)
        self.event_publisher = event_publisher or EventPublisher()

    def _resolve_customer_names(self, orders: List[Order]) -> List[OrderResponse]:
        """
        Build responses with a display name per order.

        Uses the embedded snapshot when present, otherwise the referenced
        customer. If the lookup fails the raw customer id is shown instead of
        failing the whole list.
        """
        names = {}
        ids = {o.customer_id for o in orders if o.customer_id is not None and not o.customer_snapshot}
        if ids:
            try:
                names = {c.id: c.name for c in self.repository.customers.get_many(ids)}
            except SQLAlchemyError as e:
                logger.warning("Could not resolve customer names: %s", e)

        responses = []
        for order in orders:
            response = OrderResponse.model_validate(order)
            if order.customer_snapshot:
                response.customer_name = order.customer_snapshot.get("name")
            elif order.customer_id is not None:
                response.customer_name = names.get(order.customer_id) or str(order.customer_id)
            responses.append(response)
        return responses

    def get_all_orders(
        self,
        skip: int = 0,
        limit: int = 100,
        status: Optional[str] = None,
        updated_since: Optional[datetime] = None,
    ) -> OrderListResponse:
        """Get orders with pagination; `updated_since` serves polling clients"""
        orders = self.repository.get_all(skip=skip, limit=limit, status=status, updated_since=updated_since)
        total = self.repository.count(status=status, updated_since=updated_since)

        return OrderListResponse(orders=self._resolve_customer_names(orders), total=total)

    def get_orders_by_customer(self, customer_id: int) -> List[OrderResponse]:
        """Get orders referencing a customer record"""
        orders = self.repository.get_all(customer_id=customer_id, limit=1000)
        return self._resolve_customer_names(orders)

    def get_order_by_id(self, order_id: int) -> Optional[OrderResponse]:
        """Get order by ID"""
        order = self.repository.get_by_id(order_id)
        if not order:
            return None
        return OrderResponse.model_validate(order)

    def get_public_order(self, public_id: str) -> Optional[PublicOrderResponse]:
        """Customer-safe view of an order, looked up by its public id"""
        order = self.repository.get_by_public_id(public_id)
        if not order:
            return None
        return PublicOrderResponse.model_validate(order)

    def create_order(self, order_data: OrderCreate, actor: str) -> OrderResponse:
        """
        Create new order

        Steps:
        1. Validate input and resolve products
        2. Check stock availability
        3. Snapshot prices and calculate totals
        4. Save order, decrement stock and write ledger entries atomically
        5. Publish OrderCreated event

        Raises:
            ValidationError, NotFoundError, InsufficientStockError,
            TransactionConflictError
        """
        order = self.repository.create_order(order_data, actor)

        self.event_publisher.publish_order_created({
            'order_id': order.id,
            'public_id': order.public_id,
            'status': order.status,
            'channel': order.channel,
            'items': [{'product_id': i.product_id, 'sku': i.sku, 'qty': i.qty} for i in order.items],
            'grand_total': order.grand_total,
            'actor': actor,
        })

        return OrderResponse.model_validate(order)

    def _publish_status_changed(self, order: Order, old_status: str, actor: str, note: Optional[str]):
        self.event_publisher.publish_order_status_changed({
            'order_id': order.id,
            'public_id': order.public_id,
            'old_status': old_status,
            'new_status': order.status,
            'note': note,
            'actor': actor,
            'updated_at': order.updated_at.isoformat(),
        })

    def update_order_status(
        self, order_id: int, new_status, actor: str, note: Optional[str] = None
    ) -> OrderResponse:
        """
        Move an order along the status flow

        Forward moves may skip steps but never go back. Cancelled/Returned
        are handed to cancel_order so stock is restored.

        Raises:
            NotFoundError: If order not found
            InvalidStatusTransitionError: If the move is not allowed
        """
        target = coerce(new_status)
        if target in (OrderStatus.CANCELLED, OrderStatus.RETURNED):
            return self.cancel_order(order_id, target, actor, note)

        order = self.repository.get_by_id(order_id)
        if not order:
            raise NotFoundError(f"Order with id={order_id} not found")
        if not can_transition(order.status, target):
            raise InvalidStatusTransitionError(
                f"Cannot move order {order_id} from '{order.status}' to '{target.value}'"
            )

        old_status = order.status
        order = self.repository.append_status(order_id, target, actor, note)
        self._publish_status_changed(order, old_status, actor, note)
        return OrderResponse.model_validate(order)

    def cancel_order(self, order_id: int, terminal, actor: str, note: Optional[str]) -> OrderResponse:
        """
        Cancel or return an order, restoring stock

        A reason note is required. Calling this on an order that is already
        Cancelled or Returned changes nothing.

        Raises:
            NotFoundError: If order not found
            ValidationError: If the reason is missing
            InvalidStatusTransitionError: If the order was delivered
        """
        terminal = coerce(terminal)
        note = (note or "").strip()
        if not note:
            raise ValidationError(f"A reason is required to mark an order {terminal.value}")

        order = self.repository.get_by_id(order_id)
        if not order:
            raise NotFoundError(f"Order with id={order_id} not found")
        if is_final(order.status) and not is_terminal(order.status):
            raise InvalidStatusTransitionError(
                f"Cannot move order {order_id} from '{order.status}' to '{terminal.value}'"
            )

        old_status = order.status
        order, changed = self.repository.cancel_or_return(order_id, terminal, actor, note)
        if changed:
            self._publish_status_changed(order, old_status, actor, note)
        return OrderResponse.model_validate(order)

    def update_courier(self, order_id: int, courier: CourierInfo) -> Optional[OrderResponse]:
        order = self.repository.update_courier(order_id, courier)
        return OrderResponse.model_validate(order) if order else None

    def update_payment(self, order_id: int, payment: PaymentInfo) -> Optional[OrderResponse]:
        order = self.repository.update_payment(order_id, payment)
        return OrderResponse.model_validate(order) if order else None

    def update_estimated_delivery(self, order_id: int, estimated: Optional[date]) -> Optional[OrderResponse]:
        order = self.repository.update_estimated_delivery(order_id, estimated)
        return OrderResponse.model_validate(order) if order else None
