"""
Order Repository - Data Access Layer

Owns order documents (items, totals and history live with the order) and runs
the multi-record transactions that keep product stock and the inventory
ledger consistent with the order lifecycle.
"""
import logging
import secrets
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple
from sqlalchemy import desc, func
from sqlalchemy.orm import Session

from orderdesk.config import settings
from orderdesk.database import transaction, utcnow
from orderdesk.exceptions import (
    InsufficientStockError,
    NotFoundError,
    TransactionConflictError,
    ValidationError,
)
from orderdesk.models.inventory import REASON_ORDER
from orderdesk.models.order import Order, OrderHistory, OrderItem
from orderdesk.models.product import Product
from orderdesk.order_status import OrderStatus, TERMINAL_STATUSES, coerce, is_terminal
from orderdesk.repositories.customer_repository import CustomerRepository
from orderdesk.repositories.inventory_repository import InventoryLedgerRepository
from orderdesk.repositories.product_repository import ProductRepository
from orderdesk.schemas.order import CourierInfo, OrderCreate, OrderItemRequest, PaymentInfo
from orderdesk.totals import compute_totals, line_total

logger = logging.getLogger(__name__)


def new_public_id() -> str:
    """
    Opaque, URL-safe, unguessable order id for customer-facing links.

    Not checked for uniqueness; at the expected scale a collision is
    negligible and the unique index turns one into a failed insert.
    """
    return secrets.token_urlsafe(settings.PUBLIC_ID_BYTES)


class OrderRepository:
    """Repository for Order data and lifecycle transactions"""

    def __init__(self, db: Session):
        self.db = db
        self.products = ProductRepository(db)
        self.customers = CustomerRepository(db)
        self.ledger = InventoryLedgerRepository(db)

    # Reads

    def _filtered(
        self,
        status: Optional[str] = None,
        updated_since: Optional[datetime] = None,
        customer_id: Optional[int] = None,
    ):
        query = self.db.query(Order)
        if status:
            query = query.filter(Order.status == status)
        if updated_since is not None:
            query = query.filter(Order.updated_at > updated_since)
        if customer_id is not None:
            query = query.filter(Order.customer_id == customer_id)
        return query

    def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        status: Optional[str] = None,
        updated_since: Optional[datetime] = None,
        customer_id: Optional[int] = None,
    ) -> List[Order]:
        """Get orders, newest first"""
        return self._filtered(status, updated_since, customer_id).order_by(
            desc(Order.created_at), desc(Order.id)
        ).offset(skip).limit(limit).all()

    def count(
        self,
        status: Optional[str] = None,
        updated_since: Optional[datetime] = None,
        customer_id: Optional[int] = None,
    ) -> int:
        """Get total count of orders"""
        return self._filtered(status, updated_since, customer_id).count()

    def get_by_id(self, order_id: int) -> Optional[Order]:
        """Get order by ID"""
        return self.db.query(Order).filter(Order.id == order_id).first()

    def get_by_public_id(self, public_id: str) -> Optional[Order]:
        """Get order by its public id"""
        return self.db.query(Order).filter(Order.public_id == public_id).first()

    def count_by_status(self) -> Dict[str, int]:
        rows = self.db.query(Order.status, func.count(Order.id)).group_by(Order.status).all()
        return {status: count for status, count in rows}

    def revenue(self) -> float:
        """Sum of grand totals of orders that were not cancelled or returned"""
        total = self.db.query(func.coalesce(func.sum(Order.grand_total), 0.0)).filter(
            Order.status.notin_([s.value for s in TERMINAL_STATUSES])
        ).scalar()
        return round(float(total or 0.0), 2)

    # Order creation

    def _resolve_product(self, item: OrderItemRequest) -> Product:
        if item.product_id is not None:
            product = self.products.get_by_id(item.product_id)
            label = f"id={item.product_id}"
        else:
            product = self.products.get_by_sku(item.sku)
            label = f"sku={item.sku}"
        if product is None:
            raise NotFoundError(f"Product with {label} not found")
        return product

    def _resolve_lines(self, items: List[OrderItemRequest]) -> List[Tuple[Product, int]]:
        """Resolve products, merging repeated products into one line"""
        merged: Dict[int, list] = {}
        for item in items:
            product = self._resolve_product(item)
            if product.id in merged:
                merged[product.id][1] += item.qty
            else:
                merged[product.id] = [product, item.qty]
        return [(product, qty) for product, qty in merged.values()]

    def create_order(self, order_data: OrderCreate, actor: str) -> Order:
        """
        Create an order, reserving stock for every line.

        Validation, product resolution and the stock pre-check happen before
        any write. The order, its first history entry, the stock decrements
        and one ledger entry per line are then committed as one transaction.

        Raises:
            ValidationError: Empty item list or customer missing/ambiguous
            NotFoundError: Customer or product does not resolve
            InsufficientStockError: A line asks for more than current stock
            TransactionConflictError: Stock was taken concurrently
        """
        if not order_data.items:
            raise ValidationError("Order must contain at least one item")
        if (order_data.customer_id is None) == (order_data.customer is None):
            raise ValidationError("Provide exactly one of customer_id or an inline customer")
        if order_data.customer_id is not None and not self.customers.get_by_id(order_data.customer_id):
            raise NotFoundError(f"Customer with id={order_data.customer_id} not found")

        lines = self._resolve_lines(order_data.items)
        for product, qty in lines:
            if qty > product.stock:
                raise InsufficientStockError(product.id, product.stock, qty, sku=product.sku)

        # price/name/SKU are captured now and never re-read from the product
        items = [
            OrderItem(
                position=position,
                product_id=product.id,
                sku=product.sku,
                name=product.name,
                price=product.price,
                qty=qty,
                line_total=line_total(product.price, qty),
            )
            for position, (product, qty) in enumerate(lines)
        ]
        totals = compute_totals(items, order_data.extras)
        now = utcnow()

        order = Order(
            public_id=new_public_id(),
            status=OrderStatus.RECEIVED.value,
            channel=order_data.channel or settings.DEFAULT_CHANNEL,
            customer_id=order_data.customer_id,
            customer_snapshot=order_data.customer.model_dump(mode="json") if order_data.customer else None,
            courier=order_data.courier.model_dump(mode="json") if order_data.courier else None,
            payment=order_data.payment.model_dump(mode="json") if order_data.payment else None,
            notes=order_data.notes or "",
            created_at=now,
            updated_at=now,
            items=items,
            history=[
                OrderHistory(seq=0, status=OrderStatus.RECEIVED.value, at=now, actor=actor, note="Order created")
            ],
            **totals,
        )

        with transaction(self.db):
            self.db.add(order)
            self.db.flush()  # assigns order.id for the ledger reference
            for item in order.items:
                if not self.products.decrement_stock_guarded(item.product_id, item.qty):
                    raise TransactionConflictError(
                        f"Stock for product {item.sku} changed concurrently, please retry"
                    )
                self.ledger.append(
                    item.product_id,
                    -item.qty,
                    REASON_ORDER,
                    actor,
                    reference_id=str(order.id),
                    order_public_id=order.public_id,
                    sku=item.sku,
                )

        self.db.refresh(order)
        logger.info(
            "Order %s (%s) created by %s: %d line(s), grand total %.2f",
            order.id, order.public_id, actor, len(order.items), order.grand_total,
        )
        return order

    # Status changes

    def _record_status(self, order: Order, status, actor: str, note: Optional[str]) -> None:
        """Append a history entry and set the current status (no commit)"""
        status = coerce(status).value
        at = utcnow()
        if order.history and order.history[-1].at > at:
            # keep history ordered even if the clock stepped back
            at = order.history[-1].at
        order.history.append(
            OrderHistory(seq=len(order.history), status=status, at=at, actor=actor, note=note)
        )
        order.status = status

    def append_status(self, order_id: int, status, actor: str, note: Optional[str] = None) -> Order:
        """
        Record a status change without stock side effects.

        Raises:
            NotFoundError: If order not found
        """
        order = self.get_by_id(order_id)
        if not order:
            raise NotFoundError(f"Order with id={order_id} not found")

        old_status = order.status
        with transaction(self.db):
            self._record_status(order, status, actor, note)

        self.db.refresh(order)
        logger.info("Order %s status %s -> %s by %s", order.id, old_status, order.status, actor)
        return order

    def cancel_or_return(
        self, order_id: int, terminal, actor: str, note: Optional[str] = None
    ) -> Tuple[Order, bool]:
        """
        Move an order to Cancelled or Returned and restore its stock.

        Restores exactly the quantities recorded on the order's line items.
        Idempotent: an order that is already Cancelled or Returned is returned
        unchanged. The second element of the result tells whether anything
        was written.

        Raises:
            NotFoundError: If order not found
            ValidationError: If `terminal` is not Cancelled or Returned
            TransactionConflictError: If the order was changed concurrently
        """
        terminal = coerce(terminal)
        if terminal not in TERMINAL_STATUSES:
            raise ValidationError(f"'{terminal.value}' is not a cancellation or return status")

        order = self.get_by_id(order_id)
        if not order:
            raise NotFoundError(f"Order with id={order_id} not found")
        if is_terminal(order.status):
            logger.info("Order %s already %s; nothing to do", order.id, order.status)
            return order, False

        reason = terminal.value.lower()
        with transaction(self.db):
            self._record_status(order, terminal, actor, note)
            for item in order.items:
                if item.product_id is None or not self.products.increment_stock(item.product_id, item.qty):
                    logger.warning(
                        "Product %s (%s) no longer exists; stock not restored for order %s",
                        item.product_id, item.sku, order.id,
                    )
                    continue
                self.ledger.append(
                    item.product_id,
                    item.qty,
                    reason,
                    actor,
                    reference_id=str(order.id),
                    order_public_id=order.public_id,
                    sku=item.sku,
                )

        self.db.refresh(order)
        logger.info("Order %s %s by %s; stock restored", order.id, reason, actor)
        return order, True

    # Detail updates

    def _update(self, order_id: int, values: dict) -> Optional[Order]:
        order = self.get_by_id(order_id)
        if not order:
            return None

        with transaction(self.db):
            for field, value in values.items():
                setattr(order, field, value)

        self.db.refresh(order)
        return order

    def update_courier(self, order_id: int, courier: Optional[CourierInfo]) -> Optional[Order]:
        return self._update(order_id, {"courier": courier.model_dump(mode="json") if courier else None})

    def update_payment(self, order_id: int, payment: Optional[PaymentInfo]) -> Optional[Order]:
        return self._update(order_id, {"payment": payment.model_dump(mode="json") if payment else None})

    def update_estimated_delivery(self, order_id: int, estimated: Optional[date]) -> Optional[Order]:
        return self._update(order_id, {"estimated_delivery": estimated})
