"""Exception hierarchy shared by services and API routes."""
from __future__ import annotations

from collections.abc import Sequence


class GelatoOpsError(RuntimeError):
    """Base exception for service errors."""


class ValidationError(GelatoOpsError):
    """Raised when user input fails validation before any store mutation."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class StoreError(GelatoOpsError):
    """Raised when a record store or blob store operation fails."""


class NotFoundError(GelatoOpsError):
    """Raised when a requested record does not exist."""


class DocumentError(GelatoOpsError):
    """Base class for document builder precondition failures."""


class EmptyInvoiceSet(DocumentError):
    """Raised when a document would be rendered without any line items."""


class MissingClient(DocumentError):
    """Raised when the client referenced by an order or statement cannot be found."""


class PartialBatchFailure(GelatoOpsError):
    """Raised when some requests of a concurrent batch failed.

    Requests that succeeded are not rolled back.
    """

    def __init__(self, failed: Sequence[object], *, succeeded: int) -> None:
        self.failed = list(failed)
        self.succeeded = succeeded
        super().__init__(f"{len(self.failed)} update(s) failed, {succeeded} succeeded")


__all__ = [
    "DocumentError",
    "EmptyInvoiceSet",
    "GelatoOpsError",
    "MissingClient",
    "NotFoundError",
    "PartialBatchFailure",
    "StoreError",
    "ValidationError",
]
