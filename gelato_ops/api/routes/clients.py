"""Client account, custom price and document endpoints."""
from __future__ import annotations

from collections.abc import Callable

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from gelato_ops.api.deps import get_blob_store, get_db_session, get_session_factory
from gelato_ops.api.routes.auth import AuthenticatedUser, get_current_user
from gelato_ops.core.config import get_settings
from gelato_ops.core.errors import NotFoundError, PartialBatchFailure, StoreError, ValidationError
from gelato_ops.models import Client
from gelato_ops.schemas import ClientCreate, ClientDocumentRead, ClientRead, CustomPriceResult, CustomPriceUpdate
from gelato_ops.services.blob_store import S3BlobStore
from gelato_ops.services.clients import ClientDocumentService, NewClient, create_client
from gelato_ops.services.pricing import CustomPriceService

router = APIRouter(prefix="/clients")


@router.post("", response_model=ClientRead, status_code=status.HTTP_201_CREATED)
def create_client_account(
    payload: ClientCreate,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> ClientRead:
    try:
        client = create_client(session, NewClient(**payload.model_dump()))
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except StoreError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return ClientRead.model_validate(client)


@router.put("/{client_id}/prices", response_model=CustomPriceResult)
def update_custom_prices(
    client_id: str,
    payload: CustomPriceUpdate,
    session: Session = Depends(get_db_session),
    session_factory: Callable[[], Session] = Depends(get_session_factory),
    _: AuthenticatedUser = Depends(get_current_user),
) -> CustomPriceResult:
    """Apply custom prices concurrently; failures are reported, successes kept."""

    if session.get(Client, client_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Client '{client_id}' was not found")

    service = CustomPriceService(session_factory, max_workers=get_settings().price_update_workers)
    try:
        applied = service.apply_custom_prices(client_id, payload.prices)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except PartialBatchFailure as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "message": str(exc),
                "failed_product_ids": exc.failed,
                "succeeded": exc.succeeded,
            },
        ) from exc
    return CustomPriceResult(applied=applied)


@router.post(
    "/{client_id}/documents/{kind}",
    response_model=ClientDocumentRead,
    status_code=status.HTTP_201_CREATED,
)
async def upload_client_document(
    client_id: str,
    kind: str,
    request: Request,
    session: Session = Depends(get_db_session),
    blob_store: S3BlobStore = Depends(get_blob_store),
    _: AuthenticatedUser = Depends(get_current_user),
) -> ClientDocumentRead:
    """Upload a raw request body as the client's ACRA document or profile photo."""

    body = await request.body()
    content_type = request.headers.get("content-type", "application/octet-stream").split(";")[0]
    filename = request.headers.get("x-upload-filename")

    service = ClientDocumentService(session, blob_store)
    try:
        attached = service.attach_document(
            client_id, kind, body, filename=filename, content_type=content_type
        )
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except StoreError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return ClientDocumentRead(
        client_id=attached.client_id,
        kind=attached.kind.value,
        path=attached.path,
        public_url=attached.public_url,
    )


__all__ = ["router"]
