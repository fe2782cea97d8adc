"""
Report Service - dashboard figures
"""
from sqlalchemy.orm import Session

from orderdesk.order_status import ALL_STATUSES, is_final
from orderdesk.repositories.order_repository import OrderRepository
from orderdesk.schemas.report import DashboardSummary


class ReportService:

    def __init__(self, db: Session):
        self.orders = OrderRepository(db)

    def dashboard(self) -> DashboardSummary:
        counts = self.orders.count_by_status()
        by_status = {status: counts.get(status, 0) for status in ALL_STATUSES}
        return DashboardSummary(
            total_orders=sum(by_status.values()),
            revenue=self.orders.revenue(),
            pending=sum(n for status, n in by_status.items() if not is_final(status)),
            by_status=by_status,
            low_stock=len(self.orders.products.get_low_stock()),
            out_of_stock=len(self.orders.products.get_out_of_stock()),
        )
