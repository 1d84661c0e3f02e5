from __future__ import annotations

import io
from datetime import date
from decimal import Decimal

import pytest
from openpyxl import load_workbook

from gelato_ops.core.errors import NotFoundError
from gelato_ops.models import Product
from gelato_ops.services.documents import ProductAnalysisService, product_analysis_filename
from gelato_ops.services.documents.product_analysis import DAY_COLUMNS, MONTH_COLUMNS, ConsolidatedLine


def _seed(db_session, client_factory, order_factory, make_item) -> None:
    pistachio = Product(
        name="Pistachio 5L",
        product_type="5L Tub",
        gelato_type="Dairy",
        unit_weight=Decimal("3.25"),
        price=Decimal("48.00"),
        cost=Decimal("20.00"),
        milk_base=Decimal("2.6"),
    )
    mango = Product(
        name="Mango Sorbet 5L",
        product_type="5L Tub",
        gelato_type="Sorbet",
        unit_weight=Decimal("3.5"),
        price=Decimal("40.00"),
        cost=Decimal("10.00"),
        sugar_base=Decimal("1.4"),
    )
    db_session.add_all([pistachio, mango])
    db_session.commit()

    alpha = client_factory("client-a", "Alpha Co")
    bravo = client_factory("client-b", "Bravo Co")
    order_factory(
        bravo,
        date(2025, 3, 5),
        "96.00",
        items=(make_item("Pistachio 5L", 2, "48.00", product=pistachio),),
    )
    order_factory(
        alpha,
        date(2025, 3, 5),
        "88.00",
        items=(
            make_item("Pistachio 5L", 1, "48.00", product=pistachio),
            make_item("Mango Sorbet 5L", 1, "40.00", product=mango),
        ),
    )
    order_factory(
        alpha,
        date(2025, 4, 2),
        "120.00",
        items=(make_item("Mango Sorbet 5L", 3, "40.00", product=mango),),
    )
    order_factory(alpha, date(2025, 4, 3), "0.00")


def test_day_sheets_total_milk_and_sugar_syrup(db_session, client_factory, order_factory, make_item) -> None:
    _seed(db_session, client_factory, order_factory, make_item)

    analysis = ProductAnalysisService(db_session).analysis_for_year(2025)

    assert [day.delivery_date for day in analysis.days] == [date(2025, 3, 5), date(2025, 4, 2)]
    march = analysis.days[0]
    assert [(row.customer, row.description, row.weight) for row in march.rows] == [
        ("Alpha Co", "Mango Sorbet 5L", Decimal("3.5")),
        ("Alpha Co", "Pistachio 5L", Decimal("3.3")),
        ("Bravo Co", "Pistachio 5L", Decimal("6.5")),
    ]
    assert march.milk_kg == 8
    assert march.sugar_syrup_kg == 1
    assert march.type_totals == {"5L Tub": 4}


def test_months_are_consolidated_per_product(db_session, client_factory, order_factory, make_item) -> None:
    _seed(db_session, client_factory, order_factory, make_item)

    months = ProductAnalysisService(db_session).analysis_for_year(2025).months

    assert list(months) == [date(2025, 3, 1), date(2025, 4, 1)]
    march = {line.description: line for line in months[date(2025, 3, 1)]}
    assert march["Pistachio 5L"].quantity == 3
    assert march["Pistachio 5L"].total_cost == Decimal("60.00")
    assert march["Pistachio 5L"].total_sales == Decimal("144.00")
    assert march["Pistachio 5L"].gross_margin == Decimal("41.67")
    assert [line.description for line in months[date(2025, 3, 1)]] == ["Mango Sorbet 5L", "Pistachio 5L"]


def test_gross_margin_without_sales_is_zero() -> None:
    line = ConsolidatedLine(
        description="Sample", product_type="Cup", quantity=4, unit_cost=Decimal("1.00"), unit_price=Decimal("0")
    )

    assert line.gross_margin == 0


def test_year_without_line_items_raises_not_found(db_session, client_factory, order_factory) -> None:
    order_factory(client_factory("client-a"), date(2025, 4, 3), "0.00")

    with pytest.raises(NotFoundError):
        ProductAnalysisService(db_session).render(2025)


def test_workbook_layout(db_session, client_factory, order_factory, make_item) -> None:
    _seed(db_session, client_factory, order_factory, make_item)

    workbook = load_workbook(io.BytesIO(ProductAnalysisService(db_session).render(2025)))

    assert workbook.sheetnames == ["5 Mar", "2 Apr", "Mar 2025", "Apr 2025"]
    day = workbook["5 Mar"]
    assert [cell.value for cell in day[1]] == [title for title, _ in DAY_COLUMNS]
    assert [cell.value for cell in day[2]][:5] == ["5 Mar", "Alpha Co", "Mango Sorbet 5L", 1, "5L Tub"]
    assert [day.cell(row=row, column=8).value for row in (2, 3, 5, 6, 7)] == [
        "Dairy",
        "8",
        "Sugar Syrup Production (kg)",
        "Sorbet",
        "1",
    ]
    assert not day["H4"].value
    assert day["H5"].font.b is True
    assert day["H1"].fill.fgColor.rgb == "FFFFF2CC"
    assert day["H9"].value == "Total 5L Tub"
    assert day.page_setup.orientation == "portrait"

    month = workbook["Mar 2025"]
    assert [cell.value for cell in month[1]] == [title for title, _ in MONTH_COLUMNS]
    assert month["A3"].value == "Pistachio 5L"
    assert month["F3"].value == 60
    assert month["F3"].number_format == "#,##0.00"
    assert month["H3"].number_format == '0.00"%"'
    assert month.page_setup.orientation == "landscape"


def test_filename() -> None:
    assert product_analysis_filename(2025) == "Product_Analysis_(by_Client)_2025.xlsx"
