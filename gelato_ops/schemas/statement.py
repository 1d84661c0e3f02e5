"""Schemas for statements and the backfill run."""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from gelato_ops.models.statement import AgingCategory


class BackfillResponse(BaseModel):
    """Counts reported by one backfill run."""

    statements_created: int
    statements_updated: int
    orders_assigned: int
    failed_groups: list[str] = Field(default_factory=list, description="client_id:YYYY-MM keys skipped")


class StatementRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    statement_id: str
    client_id: str
    statement_month: date
    total_amount: Decimal
    date_generated: datetime
    aging_category: AgingCategory


class StatementListItem(StatementRead):
    business_name: str
    business_address: str
    invoice_count: int


class StatementInvoiceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    invoice_id: str
    order_date: date
    delivery_date: date
    total_amount: Decimal


class StatementDetail(StatementRead):
    invoices: list[StatementInvoiceRead]


class AgingCategoryUpdate(BaseModel):
    aging_category: str = Field(..., description="One of current, 1-30_days, 31-60_days, 61-90_days, 90plus_days")


__all__ = [
    "AgingCategoryUpdate",
    "BackfillResponse",
    "StatementDetail",
    "StatementInvoiceRead",
    "StatementListItem",
    "StatementRead",
]
