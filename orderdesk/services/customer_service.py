"""
Customer Service - Business Logic Layer
"""
from typing import Optional
from sqlalchemy.orm import Session

from orderdesk.repositories.customer_repository import CustomerRepository
from orderdesk.schemas.customer import (
    CustomerCreate,
    CustomerUpdate,
    CustomerResponse,
    CustomerListResponse
)


class CustomerService:
    """Service layer for customer records"""

    def __init__(self, db: Session):
        self.repository = CustomerRepository(db)

    def get_all_customers(self, skip: int = 0, limit: int = 100, q: Optional[str] = None) -> CustomerListResponse:
        customers = self.repository.get_all(skip=skip, limit=limit, q=q)
        return CustomerListResponse(
            customers=[CustomerResponse.model_validate(c) for c in customers],
            total=self.repository.count(q=q)
        )

    def get_customer_by_id(self, customer_id: int) -> Optional[CustomerResponse]:
        customer = self.repository.get_by_id(customer_id)
        if not customer:
            return None
        return CustomerResponse.model_validate(customer)

    def create_customer(self, customer_data: CustomerCreate) -> CustomerResponse:
        return CustomerResponse.model_validate(self.repository.create(customer_data))

    def update_customer(self, customer_id: int, customer_data: CustomerUpdate) -> Optional[CustomerResponse]:
        customer = self.repository.update(customer_id, customer_data)
        if not customer:
            return None
        return CustomerResponse.model_validate(customer)

    def delete_customer(self, customer_id: int) -> bool:
        """
        Delete customer

        Raises:
            ValidationError: If orders reference the customer
        """
        return self.repository.delete(customer_id)
