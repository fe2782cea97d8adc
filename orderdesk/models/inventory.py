"""
SQLAlchemy inventory ledger model
"""
from sqlalchemy import Column, Integer, String, DateTime, event

from orderdesk.database import Base, utcnow

REASON_ORDER = "order"
REASON_CANCELLED = "cancelled"
REASON_RETURNED = "returned"
REASON_ADJUSTMENT = "adjustment"


class InventoryLedgerEntry(Base):
    """One stock change of one product, with its cause"""

    __tablename__ = "inventory_ledger"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    product_id = Column(Integer, nullable=False, index=True)
    sku = Column(String(64), nullable=True)  # snapshot for display
    change = Column(Integer, nullable=False)
    reason = Column(String(100), nullable=False)
    reference_id = Column(String(64), nullable=True, index=True)
    order_public_id = Column(String(32), nullable=True)
    actor = Column(String(100), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

    def __repr__(self):
        return (
            f"<InventoryLedgerEntry(product_id={self.product_id}, change={self.change}, "
            f"reason='{self.reason}')>"
        )


@event.listens_for(InventoryLedgerEntry, "before_update")
def _refuse_ledger_update(mapper, connection, target):
    raise RuntimeError("Inventory ledger entries are append-only")


@event.listens_for(InventoryLedgerEntry, "before_delete")
def _refuse_ledger_delete(mapper, connection, target):
    raise RuntimeError("Inventory ledger entries are append-only")
