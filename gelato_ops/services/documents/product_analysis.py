"""Yearly product analysis by client.

The workbook has one sheet per delivery date listing every line item by
customer, with milk and sugar syrup production totals beside it, followed by
one consolidated sheet per month with cost, sales and margin per product.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.worksheet.worksheet import Worksheet
from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload, selectinload

from gelato_ops.core.errors import NotFoundError, ValidationError
from gelato_ops.models import Order, OrderLineItem
from gelato_ops.services.documents.dates import month_label, short_date
from gelato_ops.services.documents.production_report import (
    DEFAULT_GELATO_TYPE,
    ProductionRow,
    build_production_rows,
    line_product_type,
)
from gelato_ops.services.documents.workbook import THIN_BORDER, fit_to_width, set_column_widths, workbook_bytes
from gelato_ops.services.financials import ZERO

logger = logging.getLogger(__name__)

DAY_COLUMNS = (
    ("Delivery Date", 12),
    ("Customer Full Name", 25),
    ("Memo/Description", 55),
    ("Quantity", 15),
    ("Type", 25),
    ("Gelato Type", 15),
    ("Weight (kg)", 15),
    ("Milk Production (kg)", 25),
)
MONTH_COLUMNS = (
    ("Memo/Description", 55),
    ("Type", 25),
    ("Quantity", 15),
    ("Cost per Tab", 15),
    ("Price per Tab", 15),
    ("Total Cost", 15),
    ("Total Sales", 15),
    ("Gross Margin", 15),
)
SORBET = "Sorbet"
CELL_FONT = "Poppins"
SUMMARY_FILL = PatternFill(fill_type="solid", fgColor="FFFFF2CC")
MONTH_HEADER_FILL = PatternFill(fill_type="solid", fgColor="FFD3D3D3")
ONE_DECIMAL = Decimal("0.1")


@dataclass(frozen=True, slots=True)
class DaySheet:
    delivery_date: date
    rows: list[ProductionRow]
    milk_kg: int
    sugar_syrup_kg: int
    type_totals: dict[str, int]

    def summary_cells(self) -> list[tuple[str, bool]]:
        """Column H text with its bold flag."""

        cells = [
            ("Dairy", False),
            (str(self.milk_kg), False),
            ("", False),
            ("Sugar Syrup Production (kg)", True),
            (SORBET, False),
            (str(self.sugar_syrup_kg), False),
            ("", False),
        ]
        for product_type, quantity in self.type_totals.items():
            cells.extend([(f"Total {product_type}", True), (str(quantity), False), ("", False)])
        return cells


@dataclass(slots=True)
class ConsolidatedLine:
    description: str
    product_type: str
    quantity: int
    unit_cost: Decimal
    unit_price: Decimal

    @property
    def total_cost(self) -> Decimal:
        return self.unit_cost * self.quantity

    @property
    def total_sales(self) -> Decimal:
        return self.unit_price * self.quantity

    @property
    def gross_margin(self) -> Decimal:
        """Cost as a percentage of sales."""
        if self.total_sales <= 0:
            return ZERO
        return (self.total_cost / self.total_sales * 100).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


@dataclass(slots=True)
class ProductAnalysis:
    days: list[DaySheet] = field(default_factory=list)
    months: dict[date, list[ConsolidatedLine]] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.days


def product_analysis_filename(year: int) -> str:
    return f"Product_Analysis_(by_Client)_{year}.xlsx"


def _whole_kg(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _day_sheet(delivery_date: date, orders: list[Order]) -> DaySheet:
    milk = ZERO
    sugar = ZERO
    for order in orders:
        for item in order.items:
            product = item.product
            if product is None:
                continue
            gelato_type = product.gelato_type or DEFAULT_GELATO_TYPE
            if gelato_type == DEFAULT_GELATO_TYPE:
                milk += (product.milk_base or ZERO) * item.quantity
            elif gelato_type == SORBET:
                sugar += (product.sugar_base or ZERO) * item.quantity

    rows = [
        ProductionRow(
            delivery_date=row.delivery_date,
            customer=row.customer,
            description=row.description,
            product_type=row.product_type,
            quantity=row.quantity,
            gelato_type=row.gelato_type,
            weight=Decimal(row.weight).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP),
        )
        for row in build_production_rows(orders)
    ]
    type_totals: dict[str, int] = {}
    for row in rows:
        type_totals[row.product_type] = type_totals.get(row.product_type, 0) + row.quantity
    return DaySheet(
        delivery_date=delivery_date,
        rows=rows,
        milk_kg=_whole_kg(milk),
        sugar_syrup_kg=_whole_kg(sugar),
        type_totals=type_totals,
    )


def _consolidate(orders: Iterable[Order]) -> list[ConsolidatedLine]:
    lines: dict[tuple[str, str], ConsolidatedLine] = {}
    for order in orders:
        for item in order.items:
            key = (item.product_name, line_product_type(item))
            line = lines.get(key)
            if line is not None:
                line.quantity += item.quantity
                continue
            product = item.product
            lines[key] = ConsolidatedLine(
                description=item.product_name,
                product_type=key[1],
                quantity=item.quantity,
                unit_cost=(product.cost if product is not None else None) or ZERO,
                unit_price=(product.price if product is not None else None) or ZERO,
            )
    return sorted(lines.values(), key=lambda line: line.description)


def build_product_analysis(orders: Iterable[Order]) -> ProductAnalysis:
    """Day sheets for every delivery date with line items, plus one consolidation per month."""

    by_day: dict[date, list[Order]] = defaultdict(list)
    by_month: dict[date, list[Order]] = defaultdict(list)
    for order in orders:
        if not order.items:
            continue
        by_day[order.delivery_date].append(order)
        by_month[order.delivery_date.replace(day=1)].append(order)

    return ProductAnalysis(
        days=[_day_sheet(day, by_day[day]) for day in sorted(by_day)],
        months={month: _consolidate(by_month[month]) for month in sorted(by_month)},
    )


def _style_header(sheet: Worksheet, columns: tuple[tuple[str, int], ...], fill: PatternFill | None) -> None:
    sheet.append([title for title, _ in columns])
    set_column_widths(sheet, (width for _, width in columns))
    sheet.row_dimensions[1].height = 60
    for cell in sheet[1]:
        cell.font = Font(name=CELL_FONT, size=11, bold=True)
        cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)
        cell.border = THIN_BORDER
        if fill is not None:
            cell.fill = fill


def _write_day_sheet(sheet: Worksheet, day: DaySheet) -> None:
    _style_header(sheet, DAY_COLUMNS, None)
    sheet["H1"].fill = SUMMARY_FILL

    summary = day.summary_cells()
    for index in range(max(len(day.rows), len(summary))):
        row = day.rows[index] if index < len(day.rows) else None
        text, bold = summary[index] if index < len(summary) else ("", False)
        if row is not None:
            values = [
                short_date(row.delivery_date),
                row.customer,
                row.description,
                row.quantity,
                row.product_type,
                row.gelato_type,
                row.weight,
            ]
        else:
            values = [""] * 7
        sheet.append([*values, text])
        for cell in sheet[sheet.max_row]:
            cell.font = Font(name=CELL_FONT, size=11, bold=bold and cell.column == 8)
            cell.border = THIN_BORDER
            horizontal = "left" if cell.column in (2, 3) else "center"
            cell.alignment = Alignment(horizontal=horizontal, vertical="top", wrap_text=True)
            if cell.column == 7 and row is not None:
                cell.number_format = "0.0"
            if cell.column == 8:
                cell.fill = SUMMARY_FILL

    fit_to_width(sheet, landscape=False)


def _write_month_sheet(sheet: Worksheet, lines: list[ConsolidatedLine]) -> None:
    _style_header(sheet, MONTH_COLUMNS, MONTH_HEADER_FILL)
    for line in lines:
        sheet.append(
            [
                line.description,
                line.product_type,
                line.quantity,
                line.unit_cost,
                line.unit_price,
                line.total_cost,
                line.total_sales,
                line.gross_margin,
            ]
        )
        for cell in sheet[sheet.max_row]:
            cell.font = Font(name=CELL_FONT, size=11)
            cell.border = THIN_BORDER
            horizontal = "left" if cell.column == 1 else "center"
            cell.alignment = Alignment(horizontal=horizontal, vertical="top", wrap_text=True)
            if 4 <= cell.column <= 7:
                cell.number_format = "#,##0.00"
            elif cell.column == 8:
                cell.number_format = '0.00"%"'

    fit_to_width(sheet, landscape=True)


def render_product_analysis_workbook(analysis: ProductAnalysis) -> bytes:
    workbook = Workbook()
    workbook.remove(workbook.active)
    for day in analysis.days:
        _write_day_sheet(workbook.create_sheet(title=short_date(day.delivery_date)), day)
    for month, lines in analysis.months.items():
        _write_month_sheet(workbook.create_sheet(title=month_label(month)), lines)
    return workbook_bytes(workbook)


class ProductAnalysisService:
    """Loads a year of orders with their products and renders the analysis workbook."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def analysis_for_year(self, year: int) -> ProductAnalysis:
        if not 1 <= year <= 9999:
            raise ValidationError(f"Year {year} is out of range", field="year")
        orders = self._session.scalars(
            select(Order)
            .where(Order.delivery_date >= date(year, 1, 1), Order.delivery_date <= date(year, 12, 31))
            .options(
                joinedload(Order.client),
                selectinload(Order.items).joinedload(OrderLineItem.product),
            )
            .order_by(Order.delivery_date, Order.id)
        ).unique().all()
        return build_product_analysis(orders)

    def render(self, year: int) -> bytes:
        analysis = self.analysis_for_year(year)
        if analysis.is_empty:
            raise NotFoundError(f"No product sales in {year}")
        logger.info(
            "rendering product analysis for %s: %d delivery dates, %d months",
            year,
            len(analysis.days),
            len(analysis.months),
        )
        return render_product_analysis_workbook(analysis)


__all__ = [
    "ConsolidatedLine",
    "DAY_COLUMNS",
    "DaySheet",
    "MONTH_COLUMNS",
    "ProductAnalysis",
    "ProductAnalysisService",
    "build_product_analysis",
    "product_analysis_filename",
    "render_product_analysis_workbook",
]
