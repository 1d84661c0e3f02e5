"""Order lookup, maintenance and invoice endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from gelato_ops.api.deps import get_db_session
from gelato_ops.api.responses import pdf_response
from gelato_ops.api.routes.auth import AuthenticatedUser, get_current_user
from gelato_ops.core.config import get_settings
from gelato_ops.core.errors import EmptyInvoiceSet, MissingClient, NotFoundError, StoreError, ValidationError
from gelato_ops.obs import DOCUMENT_RENDER_SECONDS, DOCUMENTS_RENDERED, document_span
from gelato_ops.schemas import OrderRead, OrderStatusUpdate
from gelato_ops.services.documents import RenderMode, build_invoice_model, invoice_filename, render_pdf
from gelato_ops.services.orders import delete_order, get_order, update_order_status
from gelato_ops.services.templates import footer_store, header_store

router = APIRouter(prefix="/orders")


@router.get("/{order_id}", response_model=OrderRead)
def read_order(
    order_id: int,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> OrderRead:
    try:
        order = get_order(session, order_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return OrderRead.model_validate(order)


@router.patch("/{order_id}/status", response_model=OrderRead)
def change_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> OrderRead:
    try:
        order = update_order_status(session, order_id, payload.status)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except StoreError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return OrderRead.model_validate(order)


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_order(
    order_id: int,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> None:
    try:
        delete_order(session, order_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except StoreError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc


@router.get("/{order_id}/invoice")
def order_invoice(
    order_id: int,
    mode: RenderMode = Query(default=RenderMode.DOWNLOAD),
    header_id: int | None = Query(default=None),
    footer_id: int | None = Query(default=None),
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> Response:
    """Render the invoice PDF for one order."""

    settings = get_settings()
    try:
        order = get_order(session, order_id)
        header = header_store(session).get_optional(header_id)
        footer = footer_store(session).get_optional(footer_id)
        model = build_invoice_model(
            order,
            order.client,
            order.items,
            header,
            footer,
            tax_rate=settings.gst_rate,
            drift_tolerance=settings.totals_drift_tolerance,
        )
    except (NotFoundError, MissingClient) as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except EmptyInvoiceSet as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc

    with document_span("invoice", order_id=order_id, mode=mode.value):
        with DOCUMENT_RENDER_SECONDS.labels(kind="invoice").time():
            content = render_pdf(
                model,
                mode=mode,
                currency_symbol=settings.currency_symbol,
                company_name=settings.company_name,
            )
    DOCUMENTS_RENDERED.labels(kind="invoice", format="pdf").inc()
    return pdf_response(content, filename=invoice_filename(order.invoice_id, order.delivery_date), mode=mode)


__all__ = ["router"]
