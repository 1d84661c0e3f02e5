"""Report index and workbook downloads."""
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from gelato_ops.api.deps import get_db_session
from gelato_ops.api.responses import XLSX_MEDIA_TYPE, file_response
from gelato_ops.api.routes.auth import AuthenticatedUser, get_current_user
from gelato_ops.core.config import get_settings
from gelato_ops.core.errors import NotFoundError
from gelato_ops.obs import DOCUMENT_RENDER_SECONDS, DOCUMENTS_RENDERED, document_span
from gelato_ops.schemas import ProductionDateRead
from gelato_ops.services.documents import (
    DeliveryListService,
    ProductAnalysisService,
    ProductionReportService,
    delivery_list_filename,
    product_analysis_filename,
    production_report_filename,
)

router = APIRouter(prefix="/reports")


@router.get("/production/dates", response_model=list[ProductionDateRead])
def production_dates(
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> list[ProductionDateRead]:
    """Delivery dates with orders, newest first."""

    return [
        ProductionDateRead.model_validate(summary)
        for summary in ProductionReportService(session).delivery_dates()
    ]


@router.get("/production")
def production_report(
    delivery_date: date = Query(..., description="Delivery date, YYYY-MM-DD"),
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> Response:
    """Download the production analysis workbook for one delivery date."""

    with document_span("production_report", delivery_date=delivery_date.isoformat()):
        with DOCUMENT_RENDER_SECONDS.labels(kind="production_report").time():
            try:
                content = ProductionReportService(session).render(delivery_date)
            except NotFoundError as exc:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    DOCUMENTS_RENDERED.labels(kind="production_report", format="xlsx").inc()
    return file_response(
        content,
        filename=production_report_filename(delivery_date),
        media_type=XLSX_MEDIA_TYPE,
    )


@router.get("/delivery-list")
def delivery_list(
    year: int = Query(..., ge=2000, le=9999, description="Calendar year of the delivery dates"),
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> Response:
    """Download the driver delivery sheets for every delivery date in a year."""

    settings = get_settings()
    with document_span("delivery_list", year=year):
        with DOCUMENT_RENDER_SECONDS.labels(kind="delivery_list").time():
            try:
                content = DeliveryListService(session).render(year, brand=settings.company_name)
            except NotFoundError as exc:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    DOCUMENTS_RENDERED.labels(kind="delivery_list", format="xlsx").inc()
    return file_response(content, filename=delivery_list_filename(year), media_type=XLSX_MEDIA_TYPE)


@router.get("/product-analysis")
def product_analysis(
    year: int = Query(..., ge=2000, le=9999, description="Calendar year of the delivery dates"),
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> Response:
    """Download the product analysis by client for a year."""

    with document_span("product_analysis", year=year):
        with DOCUMENT_RENDER_SECONDS.labels(kind="product_analysis").time():
            try:
                content = ProductAnalysisService(session).render(year)
            except NotFoundError as exc:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    DOCUMENTS_RENDERED.labels(kind="product_analysis", format="xlsx").inc()
    return file_response(content, filename=product_analysis_filename(year), media_type=XLSX_MEDIA_TYPE)


__all__ = ["router"]
