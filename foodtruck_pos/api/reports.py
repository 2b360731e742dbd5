from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from foodtruck_pos.api.deps import require_roles
from foodtruck_pos.database import get_db
from foodtruck_pos.models.user import UserRole
from foodtruck_pos.schemas.report import SalesSummary
from foodtruck_pos.schemas.sale import SaleResponse
from foodtruck_pos.services.report_service import ReportService

router = APIRouter(
    prefix="/admin",
    tags=["Reports"],
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)


@router.get(
    "/sales-report",
    response_model=list[SaleResponse],
    summary="Sales report",
    description="""
    Sales ordered newest first.

    `start` and `end` are calendar days (YYYY-MM-DD) in server local time.
    Both bounds are inclusive: the window runs from 00:00:00.000 on `start`
    to 23:59:59.999 on `end`.
    """
)
def sales_report(
    start: Optional[str] = Query(None, description="First day, YYYY-MM-DD"),
    end: Optional[str] = Query(None, description="Last day, YYYY-MM-DD"),
    db: Session = Depends(get_db)
):
    return ReportService(db).sales_report(start, end)


@router.get(
    "/sales-report/summary",
    response_model=SalesSummary,
    summary="Sales report totals",
    description="Count and totals by payment method for the same window as /sales-report."
)
def sales_summary(
    start: Optional[str] = Query(None, description="First day, YYYY-MM-DD"),
    end: Optional[str] = Query(None, description="Last day, YYYY-MM-DD"),
    db: Session = Depends(get_db)
):
    service = ReportService(db)
    return SalesSummary(**service.summarize(service.sales_report(start, end)))
