"""Schemas for header and footer templates."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class FooterTemplateWrite(BaseModel):
    """Create or update payload; omitted lines are left unchanged on update."""

    option_name: str | None = Field(default=None, max_length=128)
    line1: str | None = Field(default=None, max_length=255)
    line2: str | None = Field(default=None, max_length=255)
    line3: str | None = Field(default=None, max_length=255)
    line4: str | None = Field(default=None, max_length=255)
    line5: str | None = Field(default=None, max_length=255)
    is_default: bool | None = None


class HeaderTemplateWrite(FooterTemplateWrite):
    line6: str | None = Field(default=None, max_length=255)
    line7: str | None = Field(default=None, max_length=255)


class FooterTemplateRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    option_name: str
    line1: str | None
    line2: str | None
    line3: str | None
    line4: str | None
    line5: str | None
    is_default: bool


class HeaderTemplateRead(FooterTemplateRead):
    line6: str | None
    line7: str | None


class TemplateSelectionRead(BaseModel):
    """Template selected after a delete; ``None`` when the set is empty."""

    selected_id: int | None


__all__ = [
    "FooterTemplateRead",
    "FooterTemplateWrite",
    "HeaderTemplateRead",
    "HeaderTemplateWrite",
    "TemplateSelectionRead",
]
