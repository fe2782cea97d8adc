"""
Product Repository - Data Access Layer
"""
import logging
from typing import Iterable, List, Optional
from sqlalchemy import or_, update
from sqlalchemy.orm import Session
from sqlalchemy.orm.util import identity_key
from sqlalchemy.exc import IntegrityError

from orderdesk.database import transaction
from orderdesk.exceptions import (
    InsufficientStockError,
    NotFoundError,
    TransactionConflictError,
    ValidationError,
)
from orderdesk.models.product import Product
from orderdesk.repositories.inventory_repository import InventoryLedgerRepository
from orderdesk.schemas.product import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)


class ProductRepository:
    """Repository for Product CRUD and stock operations"""

    def __init__(self, db: Session):
        self.db = db
        self.ledger = InventoryLedgerRepository(db)

    def _filtered(self, q: Optional[str] = None, category: Optional[str] = None):
        query = self.db.query(Product)
        if q:
            pattern = f"%{q.strip()}%"
            query = query.filter(or_(Product.name.ilike(pattern), Product.sku.ilike(pattern)))
        if category:
            query = query.filter(Product.category == category)
        return query

    def get_all(
        self, skip: int = 0, limit: int = 100, q: Optional[str] = None, category: Optional[str] = None
    ) -> List[Product]:
        """Get products with pagination and optional name/SKU search"""
        return self._filtered(q, category).order_by(Product.name, Product.id).offset(skip).limit(limit).all()

    def count(self, q: Optional[str] = None, category: Optional[str] = None) -> int:
        """Get total count of products"""
        return self._filtered(q, category).count()

    def get_by_id(self, product_id: int) -> Optional[Product]:
        """Get product by ID"""
        return self.db.query(Product).filter(Product.id == product_id).first()

    def get_by_sku(self, sku: str) -> Optional[Product]:
        """Get product by SKU"""
        return self.db.query(Product).filter(Product.sku == sku.strip()).first()

    def get_many(self, product_ids: Iterable[int]) -> List[Product]:
        ids = list(set(product_ids))
        if not ids:
            return []
        return self.db.query(Product).filter(Product.id.in_(ids)).all()

    def get_low_stock(self) -> List[Product]:
        """Products with 0 < stock <= threshold, lowest stock first"""
        return self.db.query(Product).filter(
            Product.stock > 0, Product.stock <= Product.low_stock_threshold
        ).order_by(Product.stock, Product.name).all()

    def get_out_of_stock(self) -> List[Product]:
        return self.db.query(Product).filter(Product.stock <= 0).order_by(Product.name).all()

    def create(self, product_data: ProductCreate) -> Product:
        """Create new product; its initial stock is the ledger baseline"""
        data = product_data.model_dump()
        data["sku"] = data["sku"].strip()
        data["name"] = data["name"].strip()
        if self.get_by_sku(data["sku"]):
            raise ValidationError(f"SKU '{data['sku']}' already exists")

        product = Product(**data, initial_stock=data["stock"])
        self.db.add(product)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ValidationError(f"SKU '{data['sku']}' already exists") from e
        self.db.refresh(product)
        return product

    def update(self, product_id: int, product_data: ProductUpdate) -> Optional[Product]:
        """Update existing product"""
        product = self.get_by_id(product_id)
        if not product:
            return None

        # Update only provided fields
        update_data = product_data.model_dump(exclude_unset=True)
        new_sku = update_data.get("sku")
        if new_sku is not None:
            new_sku = update_data["sku"] = new_sku.strip()
            existing = self.get_by_sku(new_sku)
            if existing and existing.id != product.id:
                raise ValidationError(f"SKU '{new_sku}' already exists")

        for field, value in update_data.items():
            setattr(product, field, value)

        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ValidationError(f"SKU '{new_sku}' already exists") from e
        self.db.refresh(product)
        return product

    def delete(self, product_id: int) -> bool:
        """Delete product; ledger entries and order lines keep their product id"""
        product = self.get_by_id(product_id)
        if not product:
            return False

        self.db.delete(product)
        self.db.commit()
        return True

    def check_stock(self, product_id: int, required_quantity: int) -> bool:
        """Check if product has sufficient stock"""
        product = self.get_by_id(product_id)
        if not product:
            return False
        return product.stock >= required_quantity

    # Atomic stock primitives. They do not commit; callers run them inside
    # transaction() together with the matching ledger entry.

    def _expire_stock(self, product_id: int) -> None:
        cached = self.db.identity_map.get(identity_key(Product, product_id))
        if cached is not None:
            self.db.expire(cached, ["stock", "updated_at"])

    def decrement_stock_guarded(self, product_id: int, qty: int) -> bool:
        """
        stock = stock - qty, only where stock >= qty.

        Returns False when no row matched (product gone or stock already
        taken by a concurrent writer).
        """
        result = self.db.execute(
            update(Product)
            .where(Product.id == product_id, Product.stock >= qty)
            .values(stock=Product.stock - qty)
            .execution_options(synchronize_session=False)
        )
        self._expire_stock(product_id)
        return result.rowcount == 1

    def increment_stock(self, product_id: int, qty: int) -> bool:
        """stock = stock + qty; False if the product no longer exists"""
        result = self.db.execute(
            update(Product)
            .where(Product.id == product_id)
            .values(stock=Product.stock + qty)
            .execution_options(synchronize_session=False)
        )
        self._expire_stock(product_id)
        return result.rowcount == 1

    def set_stock_if(self, product_id: int, expected: int, new_stock: int) -> bool:
        """Compare-and-set the stock level"""
        result = self.db.execute(
            update(Product)
            .where(Product.id == product_id, Product.stock == expected)
            .values(stock=new_stock)
            .execution_options(synchronize_session=False)
        )
        self._expire_stock(product_id)
        return result.rowcount == 1

    def adjust_stock(
        self,
        product_id: int,
        actor: str,
        change: Optional[int] = None,
        set_to: Optional[int] = None,
        reason: str = "adjustment",
    ) -> Product:
        """
        Manual stock adjustment by delta (`change`) or to an absolute level
        (`set_to`), with one ledger entry in the same transaction.

        Raises:
            NotFoundError: If product not found
            InsufficientStockError: If resulting stock would be negative
            TransactionConflictError: If stock changed concurrently
        """
        product = self.get_by_id(product_id)
        if not product:
            raise NotFoundError(f"Product with id={product_id} not found")

        current = product.stock
        delta = change if change is not None else set_to - current
        if delta == 0:
            return product
        if current + delta < 0:
            raise InsufficientStockError(product.id, current, -delta, sku=product.sku)

        sku = product.sku
        with transaction(self.db):
            if set_to is not None:
                applied = self.set_stock_if(product_id, current, set_to)
            elif delta < 0:
                applied = self.decrement_stock_guarded(product_id, -delta)
            else:
                applied = self.increment_stock(product_id, delta)
            if not applied:
                raise TransactionConflictError(
                    f"Stock of product {sku} changed concurrently, please retry"
                )
            self.ledger.append(product_id, delta, reason, actor, sku=sku)

        logger.info("Stock adjusted for %s by %+d (%s) by %s", sku, delta, reason, actor)
        self.db.refresh(product)
        return product
