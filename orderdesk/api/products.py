"""
Product API endpoints
"""
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from orderdesk.api.deps import get_actor
from orderdesk.api.errors import conflict, http_error, not_found
from orderdesk.database import get_db
from orderdesk.exceptions import OrderDeskError, ValidationError
from orderdesk.services.product_service import ProductService
from orderdesk.schemas.product import (
    ProductCreate,
    ProductUpdate,
    StockAdjustment,
    ProductResponse,
    ProductListResponse,
    StockCheckResponse
)

router = APIRouter(prefix="/products", tags=["products"])


def get_product_service(db: Session = Depends(get_db)) -> ProductService:
    """Dependency to get ProductService instance"""
    return ProductService(db)


@router.get("", response_model=ProductListResponse, summary="List products")
def get_products(
    skip: int = Query(0, ge=0, description="Number of products to skip"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum number of products to return"),
    q: Optional[str] = Query(None, description="Search in name and SKU"),
    category: Optional[str] = Query(None, description="Filter by category"),
    service: ProductService = Depends(get_product_service)
):
    """
    Products ordered by name

    - **q**: Name/SKU substring
    - **category**: Exact category
    """
    return service.get_all_products(skip=skip, limit=limit, q=q, category=category)


@router.get("/low-stock", response_model=List[ProductResponse], summary="Low-stock products")
def get_low_stock(service: ProductService = Depends(get_product_service)):
    """Products with stock above zero but at or below their threshold"""
    return service.get_low_stock()


@router.get("/out-of-stock", response_model=List[ProductResponse], summary="Out-of-stock products")
def get_out_of_stock(service: ProductService = Depends(get_product_service)):
    return service.get_out_of_stock()


@router.get("/sku/{sku}", response_model=ProductResponse, summary="Get product by SKU")
def get_product_by_sku(sku: str, service: ProductService = Depends(get_product_service)):
    product = service.get_product_by_sku(sku)
    if not product:
        raise not_found("Product", f"sku={sku}")
    return product


@router.get("/{product_id}", response_model=ProductResponse, summary="Get product by ID")
def get_product(product_id: int, service: ProductService = Depends(get_product_service)):
    product = service.get_product_by_id(product_id)
    if not product:
        raise not_found("Product", f"id={product_id}")
    return product


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED, summary="Create product")
def create_product(
    product_data: ProductCreate,
    service: ProductService = Depends(get_product_service)
):
    """
    Add a product to the catalogue

    - **sku**: Unique product code
    - **name**, **price**: required
    - **stock**: Opening stock, the baseline for ledger reconciliation (default 0)
    - **low_stock_threshold**: default 5
    """
    try:
        return service.create_product(product_data)
    except ValidationError as e:
        raise conflict(e)


@router.put("/{product_id}", response_model=ProductResponse, summary="Update product")
def update_product(
    product_id: int,
    product_data: ProductUpdate,
    service: ProductService = Depends(get_product_service)
):
    """
    Partial update of catalogue fields.
    Stock is changed through `POST /products/{product_id}/stock`.
    """
    try:
        product = service.update_product(product_id, product_data)
    except ValidationError as e:
        raise conflict(e)
    if not product:
        raise not_found("Product", f"id={product_id}")
    return product


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete product")
def delete_product(product_id: int, service: ProductService = Depends(get_product_service)):
    """Order lines and ledger entries keep their copy of the product id and SKU"""
    if not service.delete_product(product_id):
        raise not_found("Product", f"id={product_id}")
    return None


@router.post("/{product_id}/stock", response_model=ProductResponse, summary="Adjust product stock")
def adjust_stock(
    product_id: int,
    adjustment: StockAdjustment,
    actor: str = Depends(get_actor),
    service: ProductService = Depends(get_product_service)
):
    """
    Adjust stock and record the change in the inventory ledger

    - **change**: Quantity to add (positive) or subtract (negative)
    - **set_to**: New absolute stock level (restock)
    - **reason**: Ledger reason (default: adjustment)

    Example: {"change": -5, "reason": "damaged"} writes off 5 units
    """
    try:
        return service.adjust_stock(product_id, adjustment, actor)
    except OrderDeskError as e:
        raise http_error(e)


@router.get("/{product_id}/check", response_model=StockCheckResponse, summary="Check stock availability")
def check_stock(
    product_id: int,
    quantity: int = Query(1, ge=1, description="Required quantity"),
    service: ProductService = Depends(get_product_service)
):
    return service.check_stock(product_id, quantity)
