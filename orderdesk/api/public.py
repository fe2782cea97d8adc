"""
Public order status endpoint (no authentication)
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from orderdesk.api.errors import not_found
from orderdesk.database import get_db
from orderdesk.services.order_service import OrderService
from orderdesk.schemas.order import PublicOrderResponse

router = APIRouter(prefix="/public", tags=["public"])


@router.get("/orders/{public_id}", response_model=PublicOrderResponse, summary="Track order by public id")
def get_public_order(public_id: str, db: Session = Depends(get_db)):
    """
    Customer-facing order view

    Only the order behind this public id is returned, without internal ids,
    staff ids, notes, contact details or payment data.
    """
    order = OrderService(db).get_public_order(public_id)
    if not order:
        raise not_found("Order", "this tracking id")
    return order
