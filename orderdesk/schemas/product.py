"""
Pydantic schemas for product request/response validation
"""
from pydantic import BaseModel, Field, ConfigDict, model_validator
from typing import Optional
from datetime import datetime


class ProductBase(BaseModel):
    """Base Product schema with common fields"""
    sku: str = Field(..., min_length=1, max_length=64, description="Unique, human-facing product code")
    name: str = Field(..., min_length=1, max_length=255, description="Product name")
    description: Optional[str] = Field(None, description="Product description")
    price: float = Field(..., ge=0, description="Unit price (must be non-negative)")
    low_stock_threshold: int = Field(5, ge=0, description="Stock level at or below which the product is low")
    category: Optional[str] = Field(None, max_length=100, description="Product category")
    image_url: Optional[str] = Field(None, max_length=500, description="Product image URL")


class ProductCreate(ProductBase):
    """Schema for creating a new product"""
    stock: int = Field(0, ge=0, description="Initial stock quantity (must be non-negative)")


class ProductUpdate(BaseModel):
    """
    Schema for updating a product (all fields optional).

    Stock is not editable here; use a stock adjustment so the change is
    recorded in the inventory ledger.
    """
    sku: Optional[str] = Field(None, min_length=1, max_length=64)
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    low_stock_threshold: Optional[int] = Field(None, ge=0)
    category: Optional[str] = Field(None, max_length=100)
    image_url: Optional[str] = Field(None, max_length=500)


class StockAdjustment(BaseModel):
    """Manual stock adjustment: either a signed delta or an absolute target"""
    change: Optional[int] = Field(None, description="Quantity to add (positive) or subtract (negative)")
    set_to: Optional[int] = Field(None, ge=0, description="New absolute stock level")
    reason: str = Field("adjustment", min_length=1, max_length=100, description="Reason recorded in the ledger")

    @model_validator(mode="after")
    def exactly_one_target(self):
        if (self.change is None) == (self.set_to is None):
            raise ValueError("Provide exactly one of 'change' or 'set_to'")
        return self


class ProductResponse(ProductBase):
    """Schema for product response"""
    id: int
    stock: int
    initial_stock: int
    is_low_stock: bool
    is_out_of_stock: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProductListResponse(BaseModel):
    """Schema for list of products response"""
    products: list[ProductResponse]
    total: int


class StockCheckResponse(BaseModel):
    """Schema for stock availability check"""
    product_id: int
    available: bool
    stock: int
    message: Optional[str] = None
