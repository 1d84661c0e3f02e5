"""Production analysis workbook for a single delivery date."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.worksheet.page import PageMargins
from sqlalchemy import func, select
from sqlalchemy.orm import Session, joinedload, selectinload

from gelato_ops.core.errors import NotFoundError
from gelato_ops.models import Order, OrderLineItem
from gelato_ops.services.documents.dates import short_date
from gelato_ops.services.documents.workbook import set_column_widths, workbook_bytes

logger = logging.getLogger(__name__)

SHEET_TITLE = "Production Analysis"
COLUMNS = (
    ("Delivery Date", 12),
    ("Customer Full Name", 28),
    ("Memo/Description", 55),
    ("Type", 22),
    ("Quantity", 10),
    ("Gelato Type", 12),
    ("Weight (kg)", 12),
)
DEFAULT_GELATO_TYPE = "Dairy"
NOT_AVAILABLE = "N/A"
CELL_FONT = "Poppins"


@dataclass(frozen=True, slots=True)
class ProductionRow:
    delivery_date: date
    customer: str
    description: str
    product_type: str
    quantity: int
    gelato_type: str
    weight: Decimal

    def as_cells(self) -> list[object]:
        return [
            short_date(self.delivery_date),
            self.customer,
            self.description,
            self.product_type,
            self.quantity,
            self.gelato_type,
            self.weight,
        ]


@dataclass(frozen=True, slots=True)
class DeliveryDateSummary:
    """One entry in the production report index."""

    delivery_date: date
    order_count: int

    @property
    def summary_id(self) -> str:
        return f"PROD-{self.delivery_date:%Y%m%d}"


def production_report_filename(delivery_date: date) -> str:
    return f"Production_Analysis_{short_date(delivery_date).replace(' ', '_')}.xlsx"


def line_product_type(item: OrderLineItem) -> str:
    """Catalog product type, else the type recorded on the line item."""

    product = item.product
    return (product.product_type if product is not None else None) or item.product_type or NOT_AVAILABLE


def build_production_rows(orders: Iterable[Order]) -> list[ProductionRow]:
    """Flatten orders into one row per line item, sorted by customer then description."""

    rows: list[ProductionRow] = []
    for order in orders:
        customer = order.client.business_name if order.client is not None else None
        for item in order.items:
            product = item.product
            unit_weight = product.unit_weight if product is not None else None
            rows.append(
                ProductionRow(
                    delivery_date=order.delivery_date,
                    customer=customer or NOT_AVAILABLE,
                    description=item.product_name,
                    product_type=line_product_type(item),
                    quantity=item.quantity,
                    gelato_type=(product.gelato_type if product is not None else None)
                    or DEFAULT_GELATO_TYPE,
                    weight=(unit_weight or Decimal("0")) * item.quantity,
                )
            )
    rows.sort(key=lambda row: (row.customer, row.description))
    return rows


def render_production_workbook(rows: Iterable[ProductionRow]) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = SHEET_TITLE

    sheet.append([title for title, _ in COLUMNS])
    for row in rows:
        sheet.append(row.as_cells())

    set_column_widths(sheet, (width for _, width in COLUMNS))
    for row_cells in sheet.iter_rows():
        for cell in row_cells:
            cell.font = Font(name=CELL_FONT, size=10, bold=cell.row == 1)

    sheet.page_margins = PageMargins(left=0.7, right=0.7, top=0.75, bottom=0.75, header=0.3, footer=0.3)
    sheet.page_setup.orientation = sheet.ORIENTATION_LANDSCAPE
    sheet.page_setup.paperSize = sheet.PAPERSIZE_LETTER
    sheet.page_setup.fitToWidth = 1
    sheet.page_setup.fitToHeight = 0
    sheet.sheet_properties.pageSetUpPr.fitToPage = True

    return workbook_bytes(workbook)


class ProductionReportService:
    """Loads the orders delivered on a date and renders the production workbook."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def rows_for(self, delivery_date: date) -> list[ProductionRow]:
        orders = self._session.scalars(
            select(Order)
            .where(Order.delivery_date == delivery_date)
            .options(
                joinedload(Order.client),
                selectinload(Order.items).joinedload(OrderLineItem.product),
            )
            .order_by(Order.id)
        ).unique().all()
        return build_production_rows(orders)

    def delivery_dates(self) -> list[DeliveryDateSummary]:
        """Every delivery date with orders, newest first."""

        rows = self._session.execute(
            select(Order.delivery_date, func.count(Order.id))
            .group_by(Order.delivery_date)
            .order_by(Order.delivery_date.desc())
        ).all()
        return [DeliveryDateSummary(delivery_date=day, order_count=int(count)) for day, count in rows]

    def render(self, delivery_date: date) -> bytes:
        rows = self.rows_for(delivery_date)
        if not rows:
            raise NotFoundError(f"No production data for {delivery_date.isoformat()}")
        logger.info("rendering production analysis for %s with %d rows", delivery_date, len(rows))
        return render_production_workbook(rows)


__all__ = [
    "COLUMNS",
    "DeliveryDateSummary",
    "ProductionReportService",
    "ProductionRow",
    "SHEET_TITLE",
    "build_production_rows",
    "line_product_type",
    "production_report_filename",
    "render_production_workbook",
    "short_date",
]
