"""Schemas for the report index."""
from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict


class ProductionDateRead(BaseModel):
    """A delivery date that has a production report."""

    model_config = ConfigDict(from_attributes=True)

    summary_id: str
    delivery_date: date
    order_count: int
