"""
SQLAlchemy Product model
"""
from sqlalchemy import Column, Integer, String, Float, DateTime, Text, CheckConstraint
from sqlalchemy.sql import func
from orderdesk.database import Base


class Product(Base):
    """Product database model"""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    sku = Column(String(64), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False, default=0.0)
    stock = Column(Integer, nullable=False, default=0)
    initial_stock = Column(Integer, nullable=False, default=0)  # reconciliation baseline
    low_stock_threshold = Column(Integer, nullable=False, default=5)
    category = Column(String(100), nullable=True, index=True)
    image_url = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Constraints
    __table_args__ = (
        CheckConstraint('price >= 0', name='check_price_non_negative'),
        CheckConstraint('stock >= 0', name='check_stock_non_negative'),
        CheckConstraint('low_stock_threshold >= 0', name='check_threshold_non_negative'),
    )

    @property
    def is_out_of_stock(self) -> bool:
        return (self.stock or 0) <= 0

    @property
    def is_low_stock(self) -> bool:
        return 0 < (self.stock or 0) <= (self.low_stock_threshold or 0)

    def __repr__(self):
        return f"<Product(id={self.id}, sku='{self.sku}', price={self.price}, stock={self.stock})>"
