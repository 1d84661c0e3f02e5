"""Renderer-independent document models for invoices and statements."""
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum

from gelato_ops.core.errors import EmptyInvoiceSet, MissingClient
from gelato_ops.models import Client, FooterTemplate, HeaderTemplate, Order, OrderLineItem, Statement
from gelato_ops.services.financials import (
    GST_RATE,
    AgingAmounts,
    aging_amounts,
    calculate_tax,
    line_subtotal,
    to_money,
    totals_drift,
)

logger = logging.getLogger(__name__)

DRIFT_TOLERANCE = Decimal("0.05")
INVOICE_TERMS = "Due on receipt"
NOT_AVAILABLE = "N/A"


class DocumentKind(str, Enum):
    INVOICE = "invoice"
    STATEMENT = "statement"


@dataclass(frozen=True, slots=True)
class Recipient:
    name: str
    address: str


@dataclass(frozen=True, slots=True)
class DocumentMeta:
    title: str
    number: str
    date: date
    due_date: date | None = None
    terms: str | None = None
    tracking_number: str | None = None


@dataclass(frozen=True, slots=True)
class DocumentLine:
    description: str
    amount: Decimal
    product: str | None = None
    quantity: int | None = None
    unit_price: Decimal | None = None
    date: date | None = None
    open_amount: Decimal | None = None


@dataclass(frozen=True, slots=True)
class DocumentTotals:
    subtotal: Decimal
    tax: Decimal
    total: Decimal


@dataclass(frozen=True, slots=True)
class DocumentModel:
    """Everything a renderer needs; no store access happens after this is built."""

    kind: DocumentKind
    recipient: Recipient
    meta: DocumentMeta
    lines: tuple[DocumentLine, ...]
    totals: DocumentTotals
    header: tuple[str, ...] = ()
    footer: tuple[str, ...] = field(default=())
    aging: AgingAmounts | None = None
    tax_rate: Decimal = GST_RATE


def _template_lines(template: HeaderTemplate | FooterTemplate | None) -> tuple[str, ...]:
    if template is None:
        return ()
    return tuple(template.lines)


def recipient_address(client: Client, fallback: str | None = None) -> str:
    """Structured client address when recorded, else the flat delivery address."""

    return client.structured_address or fallback or client.delivery_address or NOT_AVAILABLE


def build_invoice_model(
    order: Order,
    client: Client | None,
    items: Sequence[OrderLineItem],
    header: HeaderTemplate | None = None,
    footer: FooterTemplate | None = None,
    *,
    tax_rate: Decimal = GST_RATE,
    drift_tolerance: Decimal = DRIFT_TOLERANCE,
) -> DocumentModel:
    """Build the invoice for one order.

    The stored ``order.total_amount`` is the authoritative total. When it
    differs from subtotal plus GST by more than ``drift_tolerance`` a warning
    is logged and the stored value is still used.
    """

    if client is None:
        raise MissingClient(f"Order {order.id} has no client")
    if not items:
        raise EmptyInvoiceSet(f"Order {order.id} has no line items")

    lines = tuple(
        DocumentLine(
            product=item.product_type or item.product_name,
            description=item.billing_name or item.product_name,
            quantity=item.quantity,
            unit_price=to_money(item.unit_price),
            amount=to_money(item.subtotal),
        )
        for item in items
    )
    subtotal = line_subtotal(items)
    tax = calculate_tax(subtotal, tax_rate)
    total = to_money(order.total_amount)

    drift = totals_drift(items, total, tax_rate)
    if abs(drift) > drift_tolerance:
        logger.warning(
            "invoice %s total %s differs from subtotal plus GST by %s",
            order.invoice_id,
            total,
            drift,
        )

    return DocumentModel(
        kind=DocumentKind.INVOICE,
        header=_template_lines(header),
        footer=_template_lines(footer),
        recipient=Recipient(
            name=client.business_name or NOT_AVAILABLE,
            address=recipient_address(client, order.delivery_address),
        ),
        meta=DocumentMeta(
            title="Invoice",
            number=order.invoice_id,
            date=order.delivery_date,
            due_date=order.delivery_date,
            terms=INVOICE_TERMS,
            tracking_number=order.tracking_number,
        ),
        lines=lines,
        totals=DocumentTotals(subtotal=subtotal, tax=tax, total=total),
        tax_rate=tax_rate,
    )


def build_statement_model(
    statement: Statement,
    client: Client | None,
    invoices: Sequence[Order],
    header: HeaderTemplate | None = None,
) -> DocumentModel:
    """Build a monthly statement listing each enclosed invoice once."""

    if client is None:
        raise MissingClient(f"Statement {statement.statement_id} has no client")
    if not invoices:
        raise EmptyInvoiceSet(f"Statement {statement.statement_id} has no invoices")

    lines = []
    for order in invoices:
        amount = to_money(order.total_amount)
        lines.append(
            DocumentLine(
                date=order.delivery_date,
                description=f"Invoice No. {order.invoice_id}: Due {order.delivery_date:%d/%m/%Y}",
                amount=amount,
                open_amount=amount,
            )
        )

    total = to_money(statement.total_amount)
    generated = statement.date_generated.date() if statement.date_generated else statement.statement_month
    return DocumentModel(
        kind=DocumentKind.STATEMENT,
        header=_template_lines(header),
        recipient=Recipient(name=client.business_name or NOT_AVAILABLE, address=recipient_address(client)),
        meta=DocumentMeta(title="Statement", number=statement.statement_id, date=generated),
        lines=tuple(lines),
        totals=DocumentTotals(subtotal=total, tax=Decimal("0.00"), total=total),
        aging=aging_amounts(statement),
    )


__all__ = [
    "DRIFT_TOLERANCE",
    "DocumentKind",
    "DocumentLine",
    "DocumentMeta",
    "DocumentModel",
    "DocumentTotals",
    "INVOICE_TERMS",
    "Recipient",
    "build_invoice_model",
    "build_statement_model",
    "recipient_address",
]
