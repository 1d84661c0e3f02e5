from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from types import SimpleNamespace

import pytest

from gelato_ops.models import AgingCategory
from gelato_ops.services.financials import (
    AgingAmounts,
    aging_amounts,
    calculate_tax,
    line_subtotal,
    totals_drift,
)


@pytest.mark.parametrize(
    "subtotal",
    ["0", "0.01", "1.00", "5.55", "19.99", "100.00", "150.00", "1234.56", "99999.99"],
)
def test_tax_is_nine_percent_rounded_to_cents(subtotal: str) -> None:
    expected = (Decimal(subtotal) * Decimal("0.09")).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    assert calculate_tax(Decimal(subtotal)) == expected


def test_tax_of_zero_is_zero() -> None:
    assert calculate_tax(Decimal("0")) == Decimal("0.00")


def test_tax_rounds_half_up() -> None:
    # 0.50 * 0.09 = 0.045
    assert calculate_tax(Decimal("0.50")) == Decimal("0.05")


def test_line_subtotal_sums_stored_subtotals_without_recomputing() -> None:
    items = [
        SimpleNamespace(quantity=3, unit_price=Decimal("10.00"), subtotal=Decimal("30.00")),
        SimpleNamespace(quantity=1, unit_price=Decimal("5.00"), subtotal=Decimal("4.50")),
    ]
    assert line_subtotal(items) == Decimal("34.50")


def test_line_subtotal_of_no_items_is_zero() -> None:
    assert line_subtotal([]) == Decimal("0.00")


def test_totals_drift_is_zero_for_consistent_order() -> None:
    items = [SimpleNamespace(subtotal=Decimal("100.00"))]
    assert totals_drift(items, Decimal("109.00")) == Decimal("0.00")


def test_totals_drift_reports_difference() -> None:
    items = [SimpleNamespace(subtotal=Decimal("100.00"))]
    assert totals_drift(items, Decimal("110.00")) == Decimal("1.00")


@pytest.mark.parametrize(
    ("category", "bucket"),
    [
        (AgingCategory.CURRENT, "current"),
        (AgingCategory.DAYS_1_30, "d1_30"),
        (AgingCategory.DAYS_31_60, "d31_60"),
        (AgingCategory.DAYS_61_90, "d61_90"),
        (AgingCategory.DAYS_90_PLUS, "d90plus"),
    ],
)
def test_aging_places_whole_total_in_one_bucket(category: AgingCategory, bucket: str) -> None:
    statement = SimpleNamespace(total_amount=Decimal("250.40"), aging_category=category)

    amounts = aging_amounts(statement)

    assert getattr(amounts, bucket) == Decimal("250.40")
    assert sum(1 for value in amounts.as_row() if value != 0) == 1
    assert amounts.total == Decimal("250.40")


@pytest.mark.parametrize("category", [None, "", "45_days"])
def test_unset_or_unknown_aging_category_falls_back_to_one_to_thirty(category: str | None) -> None:
    statement = SimpleNamespace(total_amount=Decimal("80.00"), aging_category=category)

    assert aging_amounts(statement) == AgingAmounts(d1_30=Decimal("80.00"))


def test_aging_category_strings_are_accepted() -> None:
    statement = SimpleNamespace(total_amount=Decimal("12.00"), aging_category="90plus_days")

    assert aging_amounts(statement).d90plus == Decimal("12.00")
