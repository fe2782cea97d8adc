"""
Customer Repository - Data Access Layer
"""
from typing import Iterable, List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session

from orderdesk.exceptions import ValidationError
from orderdesk.models.customer import Customer
from orderdesk.models.order import Order
from orderdesk.schemas.customer import CustomerCreate, CustomerUpdate


class CustomerRepository:
    """Repository for Customer CRUD operations"""

    def __init__(self, db: Session):
        self.db = db

    def _filtered(self, q: Optional[str] = None):
        query = self.db.query(Customer)
        if q:
            pattern = f"%{q.strip()}%"
            query = query.filter(or_(
                Customer.name.ilike(pattern),
                Customer.email.ilike(pattern),
                Customer.phone.ilike(pattern),
            ))
        return query

    def get_all(self, skip: int = 0, limit: int = 100, q: Optional[str] = None) -> List[Customer]:
        """Get customers with pagination and optional search"""
        return self._filtered(q).order_by(Customer.name, Customer.id).offset(skip).limit(limit).all()

    def count(self, q: Optional[str] = None) -> int:
        return self._filtered(q).count()

    def get_by_id(self, customer_id: int) -> Optional[Customer]:
        """Get customer by ID"""
        return self.db.query(Customer).filter(Customer.id == customer_id).first()

    def get_many(self, customer_ids: Iterable[int]) -> List[Customer]:
        ids = list(set(customer_ids))
        if not ids:
            return []
        return self.db.query(Customer).filter(Customer.id.in_(ids)).all()

    def create(self, customer_data: CustomerCreate) -> Customer:
        """Create new customer"""
        data = customer_data.model_dump()
        data["name"] = data["name"].strip()
        customer = Customer(**data)
        self.db.add(customer)
        self.db.commit()
        self.db.refresh(customer)
        return customer

    def update(self, customer_id: int, customer_data: CustomerUpdate) -> Optional[Customer]:
        """Update existing customer"""
        customer = self.get_by_id(customer_id)
        if not customer:
            return None

        for field, value in customer_data.model_dump(exclude_unset=True).items():
            setattr(customer, field, value)

        self.db.commit()
        self.db.refresh(customer)
        return customer

    def has_orders(self, customer_id: int) -> bool:
        return self.db.query(Order.id).filter(Order.customer_id == customer_id).first() is not None

    def delete(self, customer_id: int) -> bool:
        """
        Delete customer

        Raises:
            ValidationError: If orders still reference the customer
        """
        customer = self.get_by_id(customer_id)
        if not customer:
            return False
        if self.has_orders(customer_id):
            raise ValidationError(
                f"Customer with id={customer_id} is referenced by orders and cannot be deleted"
            )

        self.db.delete(customer)
        self.db.commit()
        return True
