"""Header and footer template endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from gelato_ops.api.deps import get_db_session
from gelato_ops.api.routes.auth import AuthenticatedUser, get_current_user
from gelato_ops.core.errors import NotFoundError, StoreError, ValidationError
from gelato_ops.schemas import (
    FooterTemplateRead,
    FooterTemplateWrite,
    HeaderTemplateRead,
    HeaderTemplateWrite,
    TemplateSelectionRead,
)
from gelato_ops.services.templates import footer_store, header_store

router = APIRouter(prefix="/templates")


def _to_http(exc: Exception) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))


@router.get("/headers", response_model=list[HeaderTemplateRead])
def list_headers(
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> list[HeaderTemplateRead]:
    """Header templates, default first."""

    return [HeaderTemplateRead.model_validate(item) for item in header_store(session).list()]


@router.post("/headers", response_model=HeaderTemplateRead, status_code=status.HTTP_201_CREATED)
def create_header(
    payload: HeaderTemplateWrite,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> HeaderTemplateRead:
    try:
        template = header_store(session).create(payload.model_dump(exclude_none=True))
    except (ValidationError, StoreError) as exc:
        raise _to_http(exc) from exc
    return HeaderTemplateRead.model_validate(template)


@router.put("/headers/{template_id}", response_model=HeaderTemplateRead)
def update_header(
    template_id: int,
    payload: HeaderTemplateWrite,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> HeaderTemplateRead:
    try:
        template = header_store(session).update(
            template_id, payload.model_dump(exclude_unset=True)
        )
    except (NotFoundError, ValidationError, StoreError) as exc:
        raise _to_http(exc) from exc
    return HeaderTemplateRead.model_validate(template)


@router.delete("/headers/{template_id}", response_model=TemplateSelectionRead)
def delete_header(
    template_id: int,
    selected_id: int | None = Query(default=None, description="Template currently selected by the caller"),
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> TemplateSelectionRead:
    try:
        selected = header_store(session).delete(template_id, selected_id=selected_id)
    except (NotFoundError, StoreError) as exc:
        raise _to_http(exc) from exc
    return TemplateSelectionRead(selected_id=selected)


@router.get("/footers", response_model=list[FooterTemplateRead])
def list_footers(
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> list[FooterTemplateRead]:
    return [FooterTemplateRead.model_validate(item) for item in footer_store(session).list()]


@router.post("/footers", response_model=FooterTemplateRead, status_code=status.HTTP_201_CREATED)
def create_footer(
    payload: FooterTemplateWrite,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> FooterTemplateRead:
    try:
        template = footer_store(session).create(payload.model_dump(exclude_none=True))
    except (ValidationError, StoreError) as exc:
        raise _to_http(exc) from exc
    return FooterTemplateRead.model_validate(template)


@router.put("/footers/{template_id}", response_model=FooterTemplateRead)
def update_footer(
    template_id: int,
    payload: FooterTemplateWrite,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> FooterTemplateRead:
    try:
        template = footer_store(session).update(
            template_id, payload.model_dump(exclude_unset=True)
        )
    except (NotFoundError, ValidationError, StoreError) as exc:
        raise _to_http(exc) from exc
    return FooterTemplateRead.model_validate(template)


@router.delete("/footers/{template_id}", response_model=TemplateSelectionRead)
def delete_footer(
    template_id: int,
    selected_id: int | None = Query(default=None, description="Template currently selected by the caller"),
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> TemplateSelectionRead:
    try:
        selected = footer_store(session).delete(template_id, selected_id=selected_id)
    except (NotFoundError, StoreError) as exc:
        raise _to_http(exc) from exc
    return TemplateSelectionRead(selected_id=selected)


__all__ = ["router"]
