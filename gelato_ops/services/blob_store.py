"""S3-backed storage for client documents and profile photos."""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from gelato_ops.core.config import Settings, get_settings
from gelato_ops.core.errors import StoreError

logger = logging.getLogger(__name__)


class S3BlobStore:
    """Uploads, deletes and resolves public URLs for blobs in one bucket."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        s3_client_factory: Callable[[], Any] | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._s3_client_factory = s3_client_factory or self._default_s3_client
        self._s3_client: Any | None = None
        self._bucket_ready = False

    @property
    def bucket(self) -> str:
        return self._settings.blob_bucket

    def _default_s3_client(self) -> Any:
        return boto3.client(
            "s3",
            region_name=self._settings.aws_region,
            endpoint_url=self._settings.s3_endpoint_url,
        )

    def _get_s3_client(self) -> Any:
        if self._s3_client is None:
            self._s3_client = self._s3_client_factory()
        return self._s3_client

    def _ensure_bucket(self) -> None:
        if self._bucket_ready:
            return
        client = self._get_s3_client()
        try:
            client.head_bucket(Bucket=self.bucket)
        except ClientError:
            client.create_bucket(Bucket=self.bucket)
        self._bucket_ready = True

    def upload(self, path: str, data: bytes, content_type: str) -> str:
        """Store ``data`` at ``path`` and return the path."""

        try:
            self._ensure_bucket()
            self._get_s3_client().put_object(
                Bucket=self.bucket,
                Key=path,
                Body=data,
                ContentType=content_type or "application/octet-stream",
            )
        except (BotoCoreError, ClientError) as exc:
            raise StoreError(f"Failed to upload '{path}'") from exc
        logger.info("uploaded blob", extra={"bucket": self.bucket, "key": path, "size": len(data)})
        return path

    def delete(self, paths: Iterable[str]) -> None:
        keys = [{"Key": path} for path in paths if path]
        if not keys:
            return
        try:
            self._get_s3_client().delete_objects(Bucket=self.bucket, Delete={"Objects": keys})
        except (BotoCoreError, ClientError) as exc:
            raise StoreError("Failed to delete blobs") from exc
        logger.info("deleted blobs", extra={"bucket": self.bucket, "count": len(keys)})

    def public_url(self, path: str) -> str:
        base = self._settings.blob_public_base_url
        if base:
            return f"{base.rstrip('/')}/{path}"
        return f"https://{self.bucket}.s3.{self._settings.aws_region}.amazonaws.com/{path}"


__all__ = ["S3BlobStore"]
