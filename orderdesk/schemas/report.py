"""
Pydantic schemas for dashboard reports
"""
from pydantic import BaseModel
from typing import Dict


class DashboardSummary(BaseModel):
    total_orders: int
    revenue: float
    pending: int
    by_status: Dict[str, int]
    low_stock: int
    out_of_stock: int
