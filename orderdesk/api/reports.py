"""
Report API endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from orderdesk.database import get_db
from orderdesk.services.report_service import ReportService
from orderdesk.schemas.report import DashboardSummary

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/dashboard", response_model=DashboardSummary, summary="Dashboard figures")
def dashboard(db: Session = Depends(get_db)):
    """Order counts, revenue and stock alerts"""
    return ReportService(db).dashboard()
