"""Statement and invoice arithmetic: subtotals, GST and aging buckets."""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol

from gelato_ops.models import AgingCategory

GST_RATE = Decimal("0.09")
_CENT = Decimal("0.01")
ZERO = Decimal("0.00")


class _HasSubtotal(Protocol):
    subtotal: Decimal


class _HasAging(Protocol):
    total_amount: Decimal
    aging_category: AgingCategory | str | None


def to_money(value: Decimal | int | float | str | None) -> Decimal:
    """Return ``value`` as a Decimal rounded half-up to cents."""

    if value is None:
        return ZERO
    return Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP)


def line_subtotal(items: Iterable[_HasSubtotal]) -> Decimal:
    """Sum the stored ``subtotal`` of each line item without recomputing qty * price."""

    return sum((to_money(item.subtotal) for item in items), ZERO)


def calculate_tax(subtotal: Decimal | int | float, rate: Decimal = GST_RATE) -> Decimal:
    """Return GST on ``subtotal`` at the fixed rate, rounded to cents."""

    return to_money(Decimal(str(subtotal)) * rate)


def totals_drift(items: Iterable[_HasSubtotal], total: Decimal, rate: Decimal = GST_RATE) -> Decimal:
    """Stored order total minus the subtotal-plus-GST computed from its lines."""

    subtotal = line_subtotal(items)
    return to_money(total) - (subtotal + calculate_tax(subtotal, rate))


@dataclass(frozen=True, slots=True)
class AgingAmounts:
    current: Decimal = ZERO
    d1_30: Decimal = ZERO
    d31_60: Decimal = ZERO
    d61_90: Decimal = ZERO
    d90plus: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.current + self.d1_30 + self.d31_60 + self.d61_90 + self.d90plus

    def as_row(self) -> list[Decimal]:
        return [self.current, self.d1_30, self.d31_60, self.d61_90, self.d90plus]


_BUCKET_FIELDS = {
    AgingCategory.CURRENT: "current",
    AgingCategory.DAYS_1_30: "d1_30",
    AgingCategory.DAYS_31_60: "d31_60",
    AgingCategory.DAYS_61_90: "d61_90",
    AgingCategory.DAYS_90_PLUS: "d90plus",
}


def aging_amounts(statement: _HasAging) -> AgingAmounts:
    """Place the whole statement balance in the bucket named by its aging category.

    This is a categorical assignment chosen by an admin, not an age-based
    split; unset or unrecognised categories fall into the 1-30 day bucket.
    """

    category = AgingCategory.coerce(statement.aging_category)
    return AgingAmounts(**{_BUCKET_FIELDS[category]: to_money(statement.total_amount)})


__all__ = [
    "AgingAmounts",
    "GST_RATE",
    "ZERO",
    "aging_amounts",
    "calculate_tax",
    "line_subtotal",
    "to_money",
    "totals_drift",
]
