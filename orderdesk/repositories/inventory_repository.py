"""
Inventory Ledger Repository - Data Access Layer
"""
from typing import List, Optional
from sqlalchemy import desc, func
from sqlalchemy.orm import Session

from orderdesk.models.inventory import InventoryLedgerEntry


class InventoryLedgerRepository:
    """
    Append-only access to the inventory ledger.

    `append` only adds the entry to the session; the caller's transaction
    commits it together with the stock change it describes.
    """

    def __init__(self, db: Session):
        self.db = db

    def append(
        self,
        product_id: int,
        change: int,
        reason: str,
        actor: str,
        reference_id: Optional[str] = None,
        order_public_id: Optional[str] = None,
        sku: Optional[str] = None,
    ) -> InventoryLedgerEntry:
        entry = InventoryLedgerEntry(
            product_id=product_id,
            change=change,
            reason=reason,
            actor=actor,
            reference_id=reference_id,
            order_public_id=order_public_id,
            sku=sku,
        )
        self.db.add(entry)
        return entry

    def _filtered(self, product_id: Optional[int] = None, reference_id: Optional[str] = None):
        query = self.db.query(InventoryLedgerEntry)
        if product_id is not None:
            query = query.filter(InventoryLedgerEntry.product_id == product_id)
        if reference_id is not None:
            query = query.filter(InventoryLedgerEntry.reference_id == reference_id)
        return query

    def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        product_id: Optional[int] = None,
        reference_id: Optional[str] = None,
    ) -> List[InventoryLedgerEntry]:
        """Newest first"""
        return self._filtered(product_id, reference_id).order_by(
            desc(InventoryLedgerEntry.created_at), desc(InventoryLedgerEntry.id)
        ).offset(skip).limit(limit).all()

    def count(self, product_id: Optional[int] = None, reference_id: Optional[str] = None) -> int:
        return self._filtered(product_id, reference_id).count()

    def sum_changes(self, product_id: int) -> int:
        """Net stock change recorded for a product"""
        total = self.db.query(func.coalesce(func.sum(InventoryLedgerEntry.change), 0)).filter(
            InventoryLedgerEntry.product_id == product_id
        ).scalar()
        return int(total or 0)

    def sums_by_product(self) -> dict:
        rows = self.db.query(
            InventoryLedgerEntry.product_id, func.sum(InventoryLedgerEntry.change)
        ).group_by(InventoryLedgerEntry.product_id).all()
        return {product_id: int(total or 0) for product_id, total in rows}
