from __future__ import annotations

import io
from datetime import date

import pytest
from openpyxl import load_workbook

from gelato_ops.core.errors import NotFoundError
from gelato_ops.services.documents import DeliveryListService, delivery_list_filename
from gelato_ops.services.documents.delivery_list import (
    COLUMNS,
    DeliveryStop,
    render_delivery_list_workbook,
    sheet_title,
)


def _seed(client_factory, order_factory) -> None:
    alpha = client_factory("client-a", "Alpha Co", street_name="1 Harbour Rd", country="Singapore", postal_code="098765")
    bravo = client_factory("client-b", "Bravo Co", delivery_address="Blk 5 Jurong")
    order_factory(bravo, date(2025, 3, 5), "10.00")
    order_factory(alpha, date(2025, 3, 5), "10.00", invoice_id="INV-0100")
    order_factory(alpha, date(2025, 1, 20), "10.00")
    order_factory(alpha, date(2024, 12, 31), "10.00")
    order_factory(bravo, date(2025, 3, 6), "10.00", invoice_id="   ")


def test_stops_are_grouped_by_date_and_ordered_by_client(db_session, client_factory, order_factory) -> None:
    _seed(client_factory, order_factory)

    stops = DeliveryListService(db_session).stops_for_year(2025)

    assert sorted(stops) == [date(2025, 1, 20), date(2025, 3, 5)]
    assert stops[date(2025, 3, 5)] == [
        DeliveryStop(company="Alpha Co", address="1 Harbour Rd, Singapore, 098765", invoice_id="INV-0100"),
        DeliveryStop(company="Bravo Co", address="Blk 5 Jurong", invoice_id="INV-0001"),
    ]


def test_year_without_deliveries_raises_not_found(db_session, client_factory, order_factory) -> None:
    _seed(client_factory, order_factory)

    with pytest.raises(NotFoundError):
        DeliveryListService(db_session).render(2023, brand="Gelato Wholesale")


def test_workbook_has_one_driver_sheet_per_date() -> None:
    stops = {
        date(2025, 3, 5): [
            DeliveryStop(company="Alpha Co", address="1 Harbour Rd", invoice_id="INV-0100"),
            DeliveryStop(company="Bravo Co", address="Blk 5 Jurong", invoice_id="INV-0001"),
        ],
        date(2025, 1, 20): [DeliveryStop(company="Alpha Co", address="1 Harbour Rd", invoice_id="INV-0002")],
    }

    workbook = load_workbook(io.BytesIO(render_delivery_list_workbook(stops, brand="Gelato Wholesale")))

    assert workbook.sheetnames == ["Jan 20", "Mar 5"]
    sheet = workbook["Mar 5"]
    assert sheet["A1"].value == "GELATO WHOLESALE"
    assert sheet["I1"].value == "March 5, 2025"
    assert sheet["I3"].value == "(WEDNESDAY)"
    assert sheet["A2"].value.startswith("IMPORTANT NOTE:")
    assert [cell.value for cell in sheet[4]] == [title for title, _ in COLUMNS]
    assert sheet["A4"].fill.fgColor.rgb == "FFFF0000"
    assert [sheet.cell(row=row, column=column).value for row in (5, 6) for column in (1, 2, 5)] == [
        1, "Alpha Co", "INV-0100", 2, "Bravo Co", "INV-0001",
    ]
    assert sheet.column_dimensions["C"].width == 30
    assert sheet.page_setup.orientation == "landscape"
    assert "A2:F3" in {str(merged) for merged in sheet.merged_cells.ranges}


def test_names() -> None:
    assert sheet_title(date(2025, 12, 31)) == "Dec 31"
    assert delivery_list_filename(2025) == "Delivery_Reports_2025.xlsx"
