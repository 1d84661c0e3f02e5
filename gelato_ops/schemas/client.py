"""Schemas for client accounts, custom prices and attached documents."""
from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class ClientCreate(BaseModel):
    business_name: str = Field(..., max_length=255)
    email: str = Field(..., max_length=320)
    person_incharge: str | None = Field(default=None, max_length=255)
    business_contact: str | None = Field(default=None, max_length=32)
    delivery_address: str | None = None
    street_name: str | None = Field(default=None, max_length=255)
    country: str | None = Field(default=None, max_length=64)
    postal_code: str | None = Field(default=None, max_length=16)


class ClientRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    business_name: str
    email: str
    person_incharge: str | None
    business_contact: str | None
    delivery_address: str | None
    structured_address: str | None
    acra_document: str | None
    profile_photo: str | None


class CustomPriceUpdate(BaseModel):
    """Map of product id to the client's negotiated price."""

    prices: dict[int, Decimal]


class CustomPriceResult(BaseModel):
    applied: int


class ClientDocumentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    client_id: str
    kind: str
    path: str
    public_url: str


__all__ = ["ClientCreate", "ClientDocumentRead", "ClientRead", "CustomPriceResult", "CustomPriceUpdate"]
