"""
Product Service - Business Logic Layer
"""
from typing import List, Optional
from sqlalchemy.orm import Session

from orderdesk.publishers.event_publisher import EventPublisher
from orderdesk.repositories.product_repository import ProductRepository
from orderdesk.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductListResponse,
    StockAdjustment,
    StockCheckResponse
)


class ProductService:
    """Service layer for product business logic"""

    def __init__(self, db: Session, event_publisher: Optional[EventPublisher] = None):
        self.repository = ProductRepository(db)
        self.event_publisher = event_publisher or EventPublisher()

    def get_all_products(
        self, skip: int = 0, limit: int = 100, q: Optional[str] = None, category: Optional[str] = None
    ) -> ProductListResponse:
        """Get all products with pagination"""
        products = self.repository.get_all(skip=skip, limit=limit, q=q, category=category)
        total = self.repository.count(q=q, category=category)

        return ProductListResponse(
            products=[ProductResponse.model_validate(p) for p in products],
            total=total
        )

    def get_product_by_id(self, product_id: int) -> Optional[ProductResponse]:
        """Get product by ID"""
        product = self.repository.get_by_id(product_id)
        if not product:
            return None
        return ProductResponse.model_validate(product)

    def get_product_by_sku(self, sku: str) -> Optional[ProductResponse]:
        product = self.repository.get_by_sku(sku)
        if not product:
            return None
        return ProductResponse.model_validate(product)

    def get_low_stock(self) -> List[ProductResponse]:
        return [ProductResponse.model_validate(p) for p in self.repository.get_low_stock()]

    def get_out_of_stock(self) -> List[ProductResponse]:
        return [ProductResponse.model_validate(p) for p in self.repository.get_out_of_stock()]

    def create_product(self, product_data: ProductCreate) -> ProductResponse:
        """Create new product"""
        product = self.repository.create(product_data)
        return ProductResponse.model_validate(product)

    def update_product(self, product_id: int, product_data: ProductUpdate) -> Optional[ProductResponse]:
        """Update existing product"""
        product = self.repository.update(product_id, product_data)
        if not product:
            return None
        return ProductResponse.model_validate(product)

    def delete_product(self, product_id: int) -> bool:
        """Delete product"""
        return self.repository.delete(product_id)

    def adjust_stock(self, product_id: int, adjustment: StockAdjustment, actor: str) -> ProductResponse:
        """
        Manually adjust product stock

        Raises:
            NotFoundError: If product not found
            InsufficientStockError: If resulting stock would be negative
            TransactionConflictError: If stock changed concurrently
        """
        before = self.repository.get_by_id(product_id)
        previous_stock = before.stock if before else None

        product = self.repository.adjust_stock(
            product_id,
            actor,
            change=adjustment.change,
            set_to=adjustment.set_to,
            reason=adjustment.reason,
        )
        if previous_stock is not None and product.stock != previous_stock:
            self.event_publisher.publish_stock_adjusted({
                'product_id': product.id,
                'sku': product.sku,
                'previous_stock': previous_stock,
                'stock': product.stock,
                'reason': adjustment.reason,
                'actor': actor,
            })
        return ProductResponse.model_validate(product)

    def check_stock(self, product_id: int, required_quantity: int = 1) -> StockCheckResponse:
        """Check if product has sufficient stock"""
        product = self.repository.get_by_id(product_id)

        if not product:
            return StockCheckResponse(
                product_id=product_id,
                available=False,
                stock=0,
                message="Product not found"
            )

        available = product.stock >= required_quantity
        message = None if available else f"Insufficient stock. Available: {product.stock}, Required: {required_quantity}"

        return StockCheckResponse(
            product_id=product_id,
            available=available,
            stock=product.stock,
            message=message
        )
