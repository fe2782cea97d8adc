"""
Inventory ledger API endpoints
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from orderdesk.api.errors import http_error
from orderdesk.database import get_db
from orderdesk.exceptions import NotFoundError
from orderdesk.services.inventory_service import InventoryService
from orderdesk.schemas.inventory import LedgerListResponse, ReconciliationResponse

router = APIRouter(prefix="/inventory", tags=["inventory"])


def get_inventory_service(db: Session = Depends(get_db)) -> InventoryService:
    """Dependency to get InventoryService instance"""
    return InventoryService(db)


@router.get("/ledger", response_model=LedgerListResponse, summary="List ledger entries")
def get_ledger(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    product_id: Optional[int] = Query(None, description="Only entries for this product"),
    reference_id: Optional[str] = Query(None, description="Only entries for this order id"),
    service: InventoryService = Depends(get_inventory_service)
):
    """Stock changes, newest first"""
    return service.get_ledger(skip=skip, limit=limit, product_id=product_id, reference_id=reference_id)


@router.get("/reconciliation", response_model=List[ReconciliationResponse], summary="Reconcile all products")
def reconcile_all(service: InventoryService = Depends(get_inventory_service)):
    return service.reconcile_all()


@router.get(
    "/reconciliation/{product_id}", response_model=ReconciliationResponse, summary="Reconcile one product"
)
def reconcile_product(
    product_id: int,
    service: InventoryService = Depends(get_inventory_service)
):
    """Compare initial stock plus ledger changes with current stock"""
    try:
        return service.reconcile_product(product_id)
    except NotFoundError as e:
        raise http_error(e)
