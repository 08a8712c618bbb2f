"""
API Endpoints de reporting.
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from restopos.core.dependencies import get_report_service
from restopos.schemas.report import DailyReportResponse, DailySalesResponse, DirectSalesResponse
from restopos.services.reports import ReportService

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/daily", response_model=DailyReportResponse, summary="Rapport journalier")
def daily_report(
    business_date: Optional[date] = Query(None, description="Journee commerciale (defaut: en cours)"),
    service: ReportService = Depends(get_report_service),
):
    return service.daily_report(business_date)


@router.get("/sales", response_model=List[DailySalesResponse], summary="Ventes des N dernieres journees")
def sales_summary(
    days: int = Query(7, ge=1, le=90),
    service: ReportService = Depends(get_report_service),
):
    return service.sales_summary(days)


@router.get("/direct-sales", response_model=DirectSalesResponse, summary="Ventes directes d'ingredients")
def direct_sales(
    business_date: Optional[date] = Query(None),
    service: ReportService = Depends(get_report_service),
):
    return service.direct_sales_summary(business_date)
