"""
Customer API endpoints
"""
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from orderdesk.api.errors import conflict, not_found
from orderdesk.database import get_db
from orderdesk.exceptions import ValidationError
from orderdesk.services.customer_service import CustomerService
from orderdesk.services.order_service import OrderService
from orderdesk.schemas.customer import (
    CustomerCreate,
    CustomerUpdate,
    CustomerResponse,
    CustomerListResponse
)
from orderdesk.schemas.order import OrderResponse

router = APIRouter(prefix="/customers", tags=["customers"])


def get_customer_service(db: Session = Depends(get_db)) -> CustomerService:
    """Dependency to get CustomerService instance"""
    return CustomerService(db)


@router.get("", response_model=CustomerListResponse, summary="Get all customers")
def get_customers(
    skip: int = Query(0, ge=0, description="Number of customers to skip"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum number of customers to return"),
    q: Optional[str] = Query(None, description="Search in name, email and phone"),
    service: CustomerService = Depends(get_customer_service)
):
    return service.get_all_customers(skip=skip, limit=limit, q=q)


@router.get("/{customer_id}", response_model=CustomerResponse, summary="Get customer by ID")
def get_customer(
    customer_id: int,
    service: CustomerService = Depends(get_customer_service)
):
    customer = service.get_customer_by_id(customer_id)
    if not customer:
        raise not_found("Customer", f"id={customer_id}")
    return customer


@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED, summary="Create customer")
def create_customer(
    customer_data: CustomerCreate,
    service: CustomerService = Depends(get_customer_service)
):
    """
    Create a new customer

    - **name**: Customer name (required)
    - **email**, **phone**, **address**: optional
    """
    return service.create_customer(customer_data)


@router.put("/{customer_id}", response_model=CustomerResponse, summary="Update customer")
def update_customer(
    customer_id: int,
    customer_data: CustomerUpdate,
    service: CustomerService = Depends(get_customer_service)
):
    customer = service.update_customer(customer_id, customer_data)
    if not customer:
        raise not_found("Customer", f"id={customer_id}")
    return customer


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete customer")
def delete_customer(
    customer_id: int,
    service: CustomerService = Depends(get_customer_service)
):
    """Delete a customer that no order references"""
    try:
        success = service.delete_customer(customer_id)
    except ValidationError as e:
        raise conflict(e)
    if not success:
        raise not_found("Customer", f"id={customer_id}")
    return None


@router.get("/{customer_id}/orders", response_model=List[OrderResponse], summary="Get orders by customer")
def get_customer_orders(
    customer_id: int,
    db: Session = Depends(get_db)
):
    """
    Get all orders that reference this customer record

    - **customer_id**: Customer ID
    """
    if not CustomerService(db).get_customer_by_id(customer_id):
        raise not_found("Customer", f"id={customer_id}")
    return OrderService(db).get_orders_by_customer(customer_id)
