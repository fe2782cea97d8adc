"""
Pydantic schemas for the inventory ledger
"""
from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime


class LedgerEntryResponse(BaseModel):
    """Schema for one ledger entry"""
    id: int
    product_id: int
    sku: Optional[str] = None
    change: int
    reason: str
    reference_id: Optional[str] = None
    order_public_id: Optional[str] = None
    actor: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LedgerListResponse(BaseModel):
    entries: list[LedgerEntryResponse]
    total: int


class ReconciliationResponse(BaseModel):
    """initial_stock + ledger_total must equal current_stock"""
    product_id: int
    sku: str
    initial_stock: int
    ledger_total: int
    current_stock: int
    consistent: bool
