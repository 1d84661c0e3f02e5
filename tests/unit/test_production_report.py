from __future__ import annotations

import io
from datetime import date
from decimal import Decimal

import pytest
from openpyxl import load_workbook

from gelato_ops.core.errors import NotFoundError
from gelato_ops.models import Product
from gelato_ops.services.documents import ProductionReportService, production_report_filename
from gelato_ops.services.documents.production_report import (
    COLUMNS,
    SHEET_TITLE,
    ProductionRow,
    render_production_workbook,
    short_date,
)

DELIVERY = date(2025, 3, 5)


def _seed(db_session, client_factory, order_factory, make_item) -> None:
    tub = Product(name="Pistachio 5L", product_type="5L Tub", gelato_type="Dairy", unit_weight=Decimal("3.5"))
    sorbet = Product(name="Mango Sorbet 5L", product_type="5L Tub", gelato_type="Vegan", unit_weight=None)
    db_session.add_all([tub, sorbet])
    db_session.commit()

    bravo = client_factory("client-b", "Bravo Co")
    alpha = client_factory("client-a", "Alpha Co")
    lower = client_factory("client-c", "alpha bistro")
    order_factory(
        bravo,
        DELIVERY,
        "10.00",
        items=(make_item("Pistachio 5L", 2, "5.00", product=tub),),
    )
    order_factory(
        alpha,
        DELIVERY,
        "10.00",
        items=(
            make_item("Pistachio 5L", 4, "1.00", product=tub),
            make_item("Mango Sorbet 5L", 1, "6.00", product=sorbet),
        ),
    )
    order_factory(lower, DELIVERY, "10.00", items=(make_item("Lemon Popsicle", 3, "2.00"),))
    order_factory(alpha, date(2025, 3, 6), "10.00", items=(make_item("Pistachio 5L", 9, "1.00", product=tub),))


def test_rows_are_sorted_by_customer_then_description(
    db_session, client_factory, order_factory, make_item
) -> None:
    _seed(db_session, client_factory, order_factory, make_item)

    rows = ProductionReportService(db_session).rows_for(DELIVERY)

    assert [(row.customer, row.description) for row in rows] == [
        ("Alpha Co", "Mango Sorbet 5L"),
        ("Alpha Co", "Pistachio 5L"),
        ("Bravo Co", "Pistachio 5L"),
        ("alpha bistro", "Lemon Popsicle"),
    ]


def test_weight_and_defaults(db_session, client_factory, order_factory, make_item) -> None:
    _seed(db_session, client_factory, order_factory, make_item)

    rows = {(row.customer, row.description): row for row in ProductionReportService(db_session).rows_for(DELIVERY)}

    assert rows[("Alpha Co", "Pistachio 5L")].weight == Decimal("14.0")
    assert rows[("Alpha Co", "Mango Sorbet 5L")].weight == 0
    assert rows[("Alpha Co", "Mango Sorbet 5L")].gelato_type == "Vegan"
    popsicle = rows[("alpha bistro", "Lemon Popsicle")]
    assert popsicle.product_type == "N/A"
    assert popsicle.gelato_type == "Dairy"
    assert popsicle.weight == 0


def test_render_without_rows_raises_not_found(db_session) -> None:
    with pytest.raises(NotFoundError):
        ProductionReportService(db_session).render(DELIVERY)


def test_workbook_layout() -> None:
    rows = [
        ProductionRow(
            delivery_date=DELIVERY,
            customer="Alpha Co",
            description="Pistachio 5L",
            product_type="5L Tub",
            quantity=4,
            gelato_type="Dairy",
            weight=Decimal("14.0"),
        )
    ]

    workbook = load_workbook(io.BytesIO(render_production_workbook(rows)))
    sheet = workbook.active

    assert sheet.title == SHEET_TITLE
    assert [cell.value for cell in sheet[1]] == [title for title, _ in COLUMNS]
    assert [cell.value for cell in sheet[2]][:6] == ["5 Mar", "Alpha Co", "Pistachio 5L", "5L Tub", 4, "Dairy"]
    assert sheet["G2"].value == pytest.approx(14.0)
    assert sheet["A1"].font.b is True
    assert not sheet["B2"].font.b
    assert sheet["B2"].font.name == "Poppins"
    assert sheet.column_dimensions["C"].width == 55
    assert sheet.page_setup.orientation == "landscape"
    assert sheet.page_setup.fitToWidth == 1
    assert sheet.page_setup.fitToHeight == 0
    assert sheet.sheet_properties.pageSetUpPr.fitToPage is True


def test_short_date_and_filename() -> None:
    assert short_date(DELIVERY) == "5 Mar"
    assert short_date(date(2025, 12, 25)) == "25 Dec"
    assert production_report_filename(DELIVERY) == "Production_Analysis_5_Mar.xlsx"


def test_delivery_dates_index(db_session, client_factory, order_factory, make_item) -> None:
    _seed(db_session, client_factory, order_factory, make_item)

    dates = ProductionReportService(db_session).delivery_dates()

    assert [(entry.delivery_date, entry.order_count, entry.summary_id) for entry in dates] == [
        (date(2025, 3, 6), 1, "PROD-20250306"),
        (DELIVERY, 3, "PROD-20250305"),
    ]


def test_delivery_dates_index_is_empty_without_orders(db_session) -> None:
    assert ProductionReportService(db_session).delivery_dates() == []


def test_line_type_falls_back_to_recorded_item_type(db_session, client_factory, order_factory, make_item) -> None:
    order_factory(
        client_factory("client-a", "Alpha Co"),
        DELIVERY,
        "6.00",
        items=(make_item("Lemon Popsicle", 3, "2.00", product_type="Popsicle"),),
    )

    [row] = ProductionReportService(db_session).rows_for(DELIVERY)

    assert row.product_type == "Popsicle"
