"""Configuration management for the gelato operations service."""
from __future__ import annotations

from decimal import Decimal
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = Field(default="Gelato Wholesale Operations")
    version: str = Field(default="0.1.0")
    docs_url: str | None = Field(default="/docs")
    redoc_url: str | None = Field(default="/redoc")
    openapi_url: str = Field(default="/openapi.json")

    database_url: str = Field(default="postgresql+psycopg://gelato:gelato@db:5432/gelato")

    aws_region: str = Field(default="ap-southeast-1")
    s3_endpoint_url: str | None = Field(default=None)
    blob_bucket: str = Field(default="gelato-files")
    blob_public_base_url: str | None = Field(
        default=None,
        description="Public URL prefix for stored blobs; defaults to the virtual-hosted S3 URL.",
    )

    enable_metrics: bool = Field(default=True)
    enable_tracing: bool = Field(default=False)
    otel_exporter_endpoint: str | None = Field(default=None)

    company_name: str = Field(default="Gelato Wholesale")
    currency_symbol: str = Field(default="S$")
    gst_rate: Decimal = Field(default=Decimal("0.09"))
    totals_drift_tolerance: Decimal = Field(default=Decimal("0.05"))
    price_update_workers: int = Field(default=4, ge=1)

    jwt_algorithm: str = Field(default="HS256")
    jwt_secret_key: str = Field(default="change-me-in-production")
    access_token_expire_minutes: int = Field(default=60)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()


__all__ = ["Settings", "get_settings"]
