"""
SQLAlchemy Order models
"""
from sqlalchemy import (
    Column, Integer, String, Float, DateTime, Date, Text, JSON, ForeignKey, CheckConstraint, event
)
from sqlalchemy.orm import relationship

from orderdesk.database import Base, utcnow
from orderdesk.order_status import ALL_STATUSES, OrderStatus, allowed_transitions

_STATUS_LIST = ", ".join(f"'{s}'" for s in ALL_STATUSES)


class Order(Base):
    """Order database model"""

    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    public_id = Column(String(32), nullable=False, unique=True, index=True)
    status = Column(String(50), nullable=False, default=OrderStatus.RECEIVED.value, index=True)
    channel = Column(String(50), nullable=False, default="Manual")

    # exactly one of customer_id / customer_snapshot is set
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=True, index=True)
    customer_snapshot = Column(JSON, nullable=True)  # copied at creation, never re-synced

    # Totals snapshot, computed once at creation
    sub_total = Column(Float, nullable=False, default=0.0)
    shipping = Column(Float, nullable=False, default=0.0)
    tax = Column(Float, nullable=False, default=0.0)
    discount = Column(Float, nullable=False, default=0.0)
    grand_total = Column(Float, nullable=False, default=0.0)

    courier = Column(JSON, nullable=True)
    payment = Column(JSON, nullable=True)
    notes = Column(Text, nullable=False, default="")
    estimated_delivery = Column(Date, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False, index=True)
    version = Column(Integer, nullable=False)

    items = relationship(
        "OrderItem", order_by="OrderItem.position", cascade="all, delete-orphan", lazy="selectin"
    )
    history = relationship(
        "OrderHistory", order_by="OrderHistory.seq", cascade="all, delete-orphan", lazy="selectin"
    )
    customer = relationship("Customer", lazy="joined")

    __mapper_args__ = {"version_id_col": version}

    # Constraints
    __table_args__ = (
        CheckConstraint(f"status IN ({_STATUS_LIST})", name='check_order_status_valid'),
    )

    @property
    def totals(self) -> dict:
        return {
            "sub_total": self.sub_total,
            "shipping": self.shipping,
            "tax": self.tax,
            "discount": self.discount,
            "grand_total": self.grand_total,
        }

    @property
    def allowed_transitions(self) -> list:
        return [s.value for s in allowed_transitions(self.status)]

    @property
    def customer_name(self):
        """Display name: the embedded snapshot first, then the referenced customer"""
        if self.customer_snapshot:
            return self.customer_snapshot.get("name")
        if self.customer is not None:
            return self.customer.name
        return None

    def __repr__(self):
        return f"<Order(id={self.id}, public_id='{self.public_id}', status='{self.status}')>"


class OrderItem(Base):
    """Line item with name/SKU/price captured at order time"""

    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    product_id = Column(Integer, nullable=True, index=True)
    sku = Column(String(64), nullable=False)
    name = Column(String(255), nullable=False)
    price = Column(Float, nullable=False)
    qty = Column(Integer, nullable=False)
    line_total = Column(Float, nullable=False)

    __table_args__ = (
        CheckConstraint('qty >= 1', name='check_item_qty_positive'),
    )

    def __repr__(self):
        return f"<OrderItem(order_id={self.order_id}, sku='{self.sku}', qty={self.qty})>"


class OrderHistory(Base):
    """Append-only status history entry"""

    __tablename__ = "order_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    seq = Column(Integer, nullable=False)
    status = Column(String(50), nullable=False)
    at = Column(DateTime, nullable=False, default=utcnow)
    actor = Column(String(100), nullable=False)
    note = Column(Text, nullable=True)

    def __repr__(self):
        return f"<OrderHistory(order_id={self.order_id}, seq={self.seq}, status='{self.status}')>"


@event.listens_for(OrderHistory, "before_update")
def _refuse_history_update(mapper, connection, target):
    raise RuntimeError("Order history entries are append-only")
