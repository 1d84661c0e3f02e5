"""Shared openpyxl styling for the report workbooks."""
from __future__ import annotations

import io
from collections.abc import Iterable

from openpyxl import Workbook
from openpyxl.styles import Border, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.page import PageMargins
from openpyxl.worksheet.worksheet import Worksheet

THIN = Side(style="thin", color="FF000000")
THIN_BORDER = Border(left=THIN, right=THIN, top=THIN, bottom=THIN)


def set_column_widths(sheet: Worksheet, widths: Iterable[float]) -> None:
    for index, width in enumerate(widths, start=1):
        sheet.column_dimensions[get_column_letter(index)].width = width


def fit_to_width(sheet: Worksheet, *, landscape: bool, margin: float = 0.5) -> None:
    """One page wide, as many pages tall as needed."""

    sheet.page_margins = PageMargins(
        left=margin, right=margin, top=margin, bottom=margin, header=0.3, footer=0.3
    )
    sheet.page_setup.orientation = sheet.ORIENTATION_LANDSCAPE if landscape else sheet.ORIENTATION_PORTRAIT
    sheet.page_setup.fitToWidth = 1
    sheet.page_setup.fitToHeight = 0
    sheet.sheet_properties.pageSetUpPr.fitToPage = True


def workbook_bytes(workbook: Workbook) -> bytes:
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


__all__ = ["THIN_BORDER", "fit_to_width", "set_column_widths", "workbook_bytes"]
