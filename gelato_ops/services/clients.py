"""Client account creation and document attachment."""
from __future__ import annotations

import logging
import re
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gelato_ops.core.errors import NotFoundError, StoreError, ValidationError
from gelato_ops.models import Client
from gelato_ops.services.blob_store import S3BlobStore
from gelato_ops.services.events import ChangeNotifier, change_notifier

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
CONTACT_PATTERN = re.compile(r"^\+?\d[\d\s-]{6,18}\d$")


class ClientDocumentKind(str, Enum):
    ACRA_DOCUMENT = "acra_document"
    PROFILE_PHOTO = "profile_photo"


@dataclass(slots=True, frozen=True)
class NewClient:
    business_name: str
    email: str
    person_incharge: str | None = None
    business_contact: str | None = None
    delivery_address: str | None = None
    street_name: str | None = None
    country: str | None = None
    postal_code: str | None = None
    client_id: str | None = None


@dataclass(slots=True, frozen=True)
class AttachedDocument:
    client_id: str
    kind: ClientDocumentKind
    path: str
    public_url: str


def validate_new_client(data: NewClient) -> None:
    if not data.business_name or not data.business_name.strip():
        raise ValidationError("Business name is required", field="business_name")
    if not EMAIL_PATTERN.match(data.email or ""):
        raise ValidationError("Please enter a valid email address", field="email")
    if data.business_contact and not CONTACT_PATTERN.match(data.business_contact.strip()):
        raise ValidationError("Please enter a valid contact number", field="business_contact")


def create_client(
    session: Session,
    data: NewClient,
    *,
    notifier: ChangeNotifier | None = None,
) -> Client:
    """Validate and insert a client account."""

    validate_new_client(data)
    email = data.email.strip().lower()
    if session.scalar(select(Client.id).where(Client.email == email)) is not None:
        raise ValidationError(f"A client with email '{email}' already exists", field="email")

    client = Client(
        id=data.client_id or str(uuid4()),
        business_name=data.business_name.strip(),
        email=email,
        person_incharge=data.person_incharge,
        business_contact=data.business_contact,
        delivery_address=data.delivery_address,
        street_name=data.street_name,
        country=data.country,
        postal_code=data.postal_code,
    )
    session.add(client)
    try:
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        raise StoreError("Failed to create client") from exc
    session.refresh(client)
    (notifier or change_notifier).notify("clients")
    return client


def _blob_path(kind: ClientDocumentKind, client_id: str, filename: str | None) -> str:
    extension = "bin"
    if filename and "." in filename:
        extension = filename.rsplit(".", 1)[-1].lower()
    return f"{kind.value}/{client_id}_{int(time.time() * 1000)}_{uuid4().hex[:6]}.{extension}"


class ClientDocumentService:
    """Uploads a client file and then links it to the client row.

    When the row update fails the fresh upload is deleted again, so a blob
    never stays in the bucket without a referencing client.
    """

    def __init__(
        self,
        session: Session,
        blob_store: S3BlobStore,
        *,
        notifier: ChangeNotifier | None = None,
        path_factory: Callable[[ClientDocumentKind, str, str | None], str] = _blob_path,
    ) -> None:
        self._session = session
        self._blob_store = blob_store
        self._notifier = notifier or change_notifier
        self._path_factory = path_factory

    def attach_document(
        self,
        client_id: str,
        kind: ClientDocumentKind | str,
        data: bytes,
        *,
        filename: str | None = None,
        content_type: str = "application/octet-stream",
    ) -> AttachedDocument:
        try:
            kind = ClientDocumentKind(kind)
        except ValueError as exc:
            raise ValidationError(f"Unknown document kind '{kind}'", field="kind") from exc
        if not data:
            raise ValidationError("Uploaded file is empty", field="file")

        client = self._session.get(Client, client_id)
        if client is None:
            raise NotFoundError(f"Client '{client_id}' was not found")

        previous = getattr(client, kind.value)
        path = self._path_factory(kind, client_id, filename)
        self._blob_store.upload(path, data, content_type)

        setattr(client, kind.value, path)
        try:
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            logger.error(
                "linking uploaded blob failed, removing it",
                extra={"client_id": client_id, "path": path},
            )
            self._blob_store.delete([path])
            raise StoreError(f"Failed to update {kind.value} for client '{client_id}'") from exc

        if previous and previous != path:
            try:
                self._blob_store.delete([previous])
            except StoreError:
                logger.warning("could not delete replaced blob %s", previous)

        self._notifier.notify("clients")
        return AttachedDocument(
            client_id=client_id,
            kind=kind,
            path=path,
            public_url=self._blob_store.public_url(path),
        )


__all__ = [
    "AttachedDocument",
    "ClientDocumentKind",
    "ClientDocumentService",
    "NewClient",
    "create_client",
    "validate_new_client",
]
