"""
Inventory Service - ledger queries and stock reconciliation
"""
from typing import List, Optional
from sqlalchemy.orm import Session

from orderdesk.exceptions import NotFoundError
from orderdesk.models.product import Product
from orderdesk.repositories.inventory_repository import InventoryLedgerRepository
from orderdesk.repositories.product_repository import ProductRepository
from orderdesk.schemas.inventory import LedgerEntryResponse, LedgerListResponse, ReconciliationResponse


class InventoryService:
    """Read side of the inventory ledger"""

    def __init__(self, db: Session):
        self.ledger = InventoryLedgerRepository(db)
        self.products = ProductRepository(db)

    def get_ledger(
        self,
        skip: int = 0,
        limit: int = 100,
        product_id: Optional[int] = None,
        reference_id: Optional[str] = None,
    ) -> LedgerListResponse:
        entries = self.ledger.get_all(skip=skip, limit=limit, product_id=product_id, reference_id=reference_id)
        return LedgerListResponse(
            entries=[LedgerEntryResponse.model_validate(e) for e in entries],
            total=self.ledger.count(product_id=product_id, reference_id=reference_id),
        )

    @staticmethod
    def _reconcile(product: Product, ledger_total: int) -> ReconciliationResponse:
        return ReconciliationResponse(
            product_id=product.id,
            sku=product.sku,
            initial_stock=product.initial_stock,
            ledger_total=ledger_total,
            current_stock=product.stock,
            consistent=product.initial_stock + ledger_total == product.stock,
        )

    def reconcile_product(self, product_id: int) -> ReconciliationResponse:
        """
        Check initial_stock + sum(ledger changes) == stock for one product

        Raises:
            NotFoundError: If product not found
        """
        product = self.products.get_by_id(product_id)
        if not product:
            raise NotFoundError(f"Product with id={product_id} not found")
        return self._reconcile(product, self.ledger.sum_changes(product_id))

    def reconcile_all(self) -> List[ReconciliationResponse]:
        sums = self.ledger.sums_by_product()
        products = self.products.get_all(limit=None)
        return [self._reconcile(p, sums.get(p.id, 0)) for p in products]
