"""Common dependencies for API routes."""
from __future__ import annotations

from collections.abc import Callable, Iterator

from sqlalchemy.orm import Session

from gelato_ops.db.session import SessionLocal
from gelato_ops.services.blob_store import S3BlobStore


def get_db_session() -> Iterator[Session]:
    """Yield a database session for FastAPI dependencies."""

    session: Session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def get_session_factory() -> Callable[[], Session]:
    """Factory for work that needs one session per thread, such as price batches."""

    return SessionLocal


def get_blob_store() -> S3BlobStore:
    return S3BlobStore()


__all__ = ["get_blob_store", "get_db_session", "get_session_factory"]
