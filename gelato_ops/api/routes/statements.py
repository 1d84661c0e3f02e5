"""Statement backfill, listing, aging and document endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from gelato_ops.api.deps import get_db_session
from gelato_ops.api.responses import pdf_response
from gelato_ops.api.routes.auth import AuthenticatedUser, get_current_user
from gelato_ops.core.config import get_settings
from gelato_ops.core.errors import (
    EmptyInvoiceSet,
    MissingClient,
    NotFoundError,
    StoreError,
    ValidationError,
)
from gelato_ops.obs import DOCUMENT_RENDER_SECONDS, DOCUMENTS_RENDERED, document_span
from gelato_ops.schemas import (
    AgingCategoryUpdate,
    BackfillResponse,
    StatementDetail,
    StatementInvoiceRead,
    StatementListItem,
    StatementRead,
)
from gelato_ops.services.documents import RenderMode, build_statement_model, render_pdf, statement_filename
from gelato_ops.services.statements import BackfillReport, StatementService
from gelato_ops.services.templates import header_store

router = APIRouter(prefix="/statements")


def _backfill_response(report: BackfillReport) -> BackfillResponse:
    return BackfillResponse(
        statements_created=report.statements_created,
        statements_updated=report.statements_updated,
        orders_assigned=report.orders_assigned,
        failed_groups=[f"{client_id}:{year:04d}-{month:02d}" for client_id, year, month in report.failed_groups],
    )


@router.post("/backfill", response_model=BackfillResponse)
def run_backfill(
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> BackfillResponse:
    """Assign every unassigned order to its client's monthly statement."""

    try:
        report = StatementService(session).backfill_statements()
    except StoreError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return _backfill_response(report)


@router.get("", response_model=list[StatementListItem])
def list_statements(
    backfill: bool = Query(default=True, description="Run the backfill before listing"),
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> list[StatementListItem]:
    service = StatementService(session)
    if backfill:
        try:
            service.backfill_statements()
        except StoreError as exc:
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return [
        StatementListItem(
            **StatementRead.model_validate(summary.statement).model_dump(),
            business_name=summary.business_name,
            business_address=summary.business_address,
            invoice_count=summary.invoice_count,
        )
        for summary in service.list_statements()
    ]


@router.get("/{statement_id}", response_model=StatementDetail)
def get_statement(
    statement_id: str,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> StatementDetail:
    service = StatementService(session)
    try:
        statement = service.get_statement(statement_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return StatementDetail(
        **StatementRead.model_validate(statement).model_dump(),
        invoices=[StatementInvoiceRead.model_validate(order) for order in service.statement_orders(statement_id)],
    )


@router.put("/{statement_id}/aging-category", response_model=StatementRead)
def update_aging_category(
    statement_id: str,
    payload: AgingCategoryUpdate,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> StatementRead:
    try:
        statement = StatementService(session).update_aging_category(statement_id, payload.aging_category)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except StoreError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return StatementRead.model_validate(statement)


@router.get("/{statement_id}/document")
def statement_document(
    statement_id: str,
    mode: RenderMode = Query(default=RenderMode.DOWNLOAD),
    header_id: int | None = Query(default=None),
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> Response:
    """Render the statement PDF for download or for the browser print dialog."""

    settings = get_settings()
    service = StatementService(session)
    try:
        statement = service.get_statement(statement_id)
        header = header_store(session).get_optional(header_id)
        model = build_statement_model(statement, statement.client, service.statement_orders(statement_id), header)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except MissingClient as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except EmptyInvoiceSet as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc

    with document_span("statement", statement_id=statement_id, mode=mode.value):
        with DOCUMENT_RENDER_SECONDS.labels(kind="statement").time():
            content = render_pdf(
                model,
                mode=mode,
                currency_symbol=settings.currency_symbol,
                company_name=settings.company_name,
            )
    DOCUMENTS_RENDERED.labels(kind="statement", format="pdf").inc()
    return pdf_response(
        content,
        filename=statement_filename(statement.statement_id, statement.statement_month),
        mode=mode,
    )


__all__ = ["router"]
