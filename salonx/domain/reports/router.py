"""Reports router - Dashboards, stock reports and downloads"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response, StreamingResponse
from sqlalchemy.orm import Session

from ...auth import get_current_salon_id
from ...database import get_db
from .pdf import BusinessReportPDF
from .service import ReportsService

router = APIRouter(prefix="/api/reports", tags=["Reports"])


def get_reports_service(db: Session = Depends(get_db)) -> ReportsService:
    """Dependency injection for ReportsService"""
    return ReportsService(db)


# ============================================================================
# REVENUE AND BILLS
# ============================================================================


@router.get("/revenue")
async def revenue(
    salon_id: str = Depends(get_current_salon_id),
    service: ReportsService = Depends(get_reports_service),
):
    return service.revenue_summary(salon_id)


@router.get("/bills")
async def bills(
    page: int = Query(1),
    limit: int = Query(20),
    from_date: Optional[str] = Query(None, alias="from"),
    to_date: Optional[str] = Query(None, alias="to"),
    search: Optional[str] = Query(None),
    salon_id: str = Depends(get_current_salon_id),
    service: ReportsService = Depends(get_reports_service),
):
    return service.list_bills(salon_id, page, limit, from_date, to_date, search)


@router.get("/chart")
async def chart(
    period: str = Query("daily"),
    days: int = Query(30),
    salon_id: str = Depends(get_current_salon_id),
    service: ReportsService = Depends(get_reports_service),
):
    return service.chart(salon_id, period, days)


@router.get("/performance")
async def performance(
    salon_id: str = Depends(get_current_salon_id),
    service: ReportsService = Depends(get_reports_service),
):
    return service.performance(salon_id)


# ============================================================================
# STOCK
# ============================================================================


@router.get("/stock")
async def stock(
    category: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    salon_id: str = Depends(get_current_salon_id),
    service: ReportsService = Depends(get_reports_service),
):
    return service.stock_report(salon_id, category, status)


@router.get("/movements")
async def movements(
    start_date: Optional[str] = Query(None),
    end_date: Optional[str] = Query(None),
    product_id: Optional[str] = Query(None),
    type: Optional[str] = Query(None),
    supplier_id: Optional[str] = Query(None),
    salon_id: str = Depends(get_current_salon_id),
    service: ReportsService = Depends(get_reports_service),
):
    return service.movements_report(salon_id, start_date, end_date, product_id, type, supplier_id)


@router.get("/suppliers")
async def suppliers(
    start_date: Optional[str] = Query(None),
    end_date: Optional[str] = Query(None),
    supplier_id: Optional[str] = Query(None),
    salon_id: str = Depends(get_current_salon_id),
    service: ReportsService = Depends(get_reports_service),
):
    return service.suppliers_report(salon_id, start_date, end_date, supplier_id)


# ============================================================================
# DOWNLOADS
# ============================================================================


@router.get("/download")
async def download_report(
    period: str = Query("month"),
    salon_id: str = Depends(get_current_salon_id),
    service: ReportsService = Depends(get_reports_service),
):
    report = service.business_report_data(salon_id, period)
    pdf_bytes = BusinessReportPDF(report).generate()
    filename = f"Report_{report['period_label'].replace(' ', '_')}.pdf"
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/export")
async def export_invoices(
    from_date: Optional[str] = Query(None, alias="from"),
    to_date: Optional[str] = Query(None, alias="to"),
    salon_id: str = Depends(get_current_salon_id),
    service: ReportsService = Depends(get_reports_service),
):
    content, filename = service.export_invoices_csv(salon_id, from_date, to_date)
    return StreamingResponse(
        iter([content]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}", "Cache-Control": "no-cache"},
    )


__all__ = ["router"]
