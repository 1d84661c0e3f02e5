"""Yearly delivery list workbook with one driver sheet per delivery date."""
from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.worksheet.worksheet import Worksheet
from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from gelato_ops.core.errors import NotFoundError, ValidationError
from gelato_ops.models import Order
from gelato_ops.services.documents.dates import long_date, month_abbreviation, weekday_name
from gelato_ops.services.documents.model import recipient_address
from gelato_ops.services.documents.workbook import THIN_BORDER, fit_to_width, set_column_widths, workbook_bytes

logger = logging.getLogger(__name__)

COLUMNS = (
    ("No.", 6),
    ("Company", 25),
    ("Address", 30),
    ("Operating Hours", 20),
    ("Invoice", 12),
    ("Items", 25),
    ("Remarks", 20),
    ("Temp °", 10),
    ("Route #", 10),
)
TABLE_HEADER_ROW = 4
DRIVER_NOTES = (
    "IMPORTANT NOTE:\n"
    "Kindly follow TIMINGS strictly and accordingly. Inform office if going to be late.\n"
    "Kindly ensure all invoice is signed/acknowledged.\n"
    "Kindly write down truck temperature.\n"
    "Kindly check orders with invoice delivery to make sure number of items is correct."
)
HEADER_FILL = PatternFill(fill_type="solid", fgColor="FFFF0000")
SHEET_FONT = "Arial"
NOT_AVAILABLE = "N/A"


@dataclass(frozen=True, slots=True)
class DeliveryStop:
    company: str
    address: str
    invoice_id: str


def delivery_list_filename(year: int) -> str:
    return f"Delivery_Reports_{year}.xlsx"


def sheet_title(delivery_date: date) -> str:
    """``Mar 5`` style worksheet name."""
    return f"{month_abbreviation(delivery_date)} {delivery_date.day}"


def build_delivery_stops(orders: Iterable[Order]) -> dict[date, list[DeliveryStop]]:
    """Group deliverable orders by date. Orders without an invoice number or client are left off."""

    stops: dict[date, list[DeliveryStop]] = defaultdict(list)
    for order in orders:
        if not (order.invoice_id or "").strip() or order.client is None:
            continue
        stops[order.delivery_date].append(
            DeliveryStop(
                company=order.client.business_name or NOT_AVAILABLE,
                address=recipient_address(order.client),
                invoice_id=order.invoice_id,
            )
        )
    return dict(stops)


def _boxed(sheet: Worksheet, ref: str, value: str, *, bold: bool) -> None:
    cell = sheet[ref]
    cell.value = value
    cell.font = Font(name=SHEET_FONT, size=11, bold=bold)
    cell.alignment = Alignment(horizontal="center", vertical="middle", wrap_text=True)
    cell.border = THIN_BORDER


def _write_sheet(sheet: Worksheet, delivery_date: date, stops: list[DeliveryStop], brand: str) -> None:
    set_column_widths(sheet, (width for _, width in COLUMNS))

    sheet.merge_cells("A1:F1")
    sheet["A1"].value = brand.upper()
    sheet["A1"].font = Font(name="Arial Black", size=24, bold=True)
    sheet["A1"].alignment = Alignment(horizontal="left", vertical="center")

    sheet.merge_cells("G1:H1")
    _boxed(sheet, "G1", "Date", bold=True)
    _boxed(sheet, "I1", long_date(delivery_date), bold=False)
    sheet.merge_cells("G2:H2")
    _boxed(sheet, "G2", "Driver", bold=True)
    _boxed(sheet, "I2", "", bold=True)
    sheet["I3"].value = f"({weekday_name(delivery_date).upper()})"
    sheet["I3"].font = Font(name=SHEET_FONT, size=11, bold=True)
    sheet["I3"].alignment = Alignment(horizontal="center", vertical="center")

    sheet.row_dimensions[2].height = 70
    sheet.merge_cells("A2:F3")
    sheet["A2"].value = DRIVER_NOTES
    sheet["A2"].font = Font(name=SHEET_FONT, size=9, bold=True)
    sheet["A2"].alignment = Alignment(horizontal="left", vertical="top", wrap_text=True)

    sheet.row_dimensions[TABLE_HEADER_ROW].height = 30
    for column, (title, _) in enumerate(COLUMNS, start=1):
        cell = sheet.cell(row=TABLE_HEADER_ROW, column=column, value=title)
        cell.font = Font(name=SHEET_FONT, size=11, bold=True, color="FFFFFFFF")
        cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)
        cell.fill = HEADER_FILL
        cell.border = THIN_BORDER

    for number, stop in enumerate(stops, start=1):
        row = TABLE_HEADER_ROW + number
        sheet.row_dimensions[row].height = 40
        values = [number, stop.company, stop.address, "", stop.invoice_id, "", "", "", ""]
        for column, value in enumerate(values, start=1):
            cell = sheet.cell(row=row, column=column, value=value)
            cell.font = Font(name=SHEET_FONT, size=10)
            cell.border = THIN_BORDER
            if column == 1:
                cell.alignment = Alignment(horizontal="center", vertical="center")
            else:
                cell.alignment = Alignment(horizontal="left", vertical="center", wrap_text=True)

    fit_to_width(sheet, landscape=True)


def render_delivery_list_workbook(stops_by_date: dict[date, list[DeliveryStop]], *, brand: str) -> bytes:
    workbook = Workbook()
    workbook.remove(workbook.active)
    for delivery_date in sorted(stops_by_date):
        stops = stops_by_date[delivery_date]
        if stops:
            _write_sheet(workbook.create_sheet(title=sheet_title(delivery_date)), delivery_date, stops, brand)
    return workbook_bytes(workbook)


class DeliveryListService:
    """Builds the delivery list for every delivery date in a calendar year."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def stops_for_year(self, year: int) -> dict[date, list[DeliveryStop]]:
        if not 1 <= year <= 9999:
            raise ValidationError(f"Year {year} is out of range", field="year")
        orders = self._session.scalars(
            select(Order)
            .where(Order.delivery_date >= date(year, 1, 1), Order.delivery_date <= date(year, 12, 31))
            .options(joinedload(Order.client))
            .order_by(Order.delivery_date, Order.client_id, Order.id)
        ).all()
        return build_delivery_stops(orders)

    def render(self, year: int, *, brand: str) -> bytes:
        stops = self.stops_for_year(year)
        if not stops:
            raise NotFoundError(f"No deliveries in {year}")
        logger.info("rendering delivery list for %s across %d delivery dates", year, len(stops))
        return render_delivery_list_workbook(stops, brand=brand)


__all__ = [
    "COLUMNS",
    "DeliveryListService",
    "DeliveryStop",
    "build_delivery_stops",
    "delivery_list_filename",
    "render_delivery_list_workbook",
    "sheet_title",
]
