"""ReportLab rendering of invoice and statement document models.

Coordinates are millimetres measured from the top-left corner of an A4
page; :class:`_PdfPage` converts them to ReportLab's bottom-left points.
"""
from __future__ import annotations

import io
import logging
from datetime import date
from decimal import Decimal
from enum import Enum

from reportlab.lib.colors import HexColor, black
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfbase.pdfdoc import PDFDictionary, PDFName, PDFString
from reportlab.pdfgen import canvas

from gelato_ops.services.documents.dates import month_name
from gelato_ops.services.documents.model import DocumentKind, DocumentLine, DocumentModel

logger = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = A4

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"

TEAL = HexColor("#0D909A")
BAND = HexColor("#B8E6E7")
RULE = HexColor("#4DB8BA")
DOTTED = HexColor("#E0E0E0")

LEFT = 20
RIGHT = 190
HEADER_LEADING = 5
FOOTER_LEADING = 4
ROW_LINE_STEP = 4
TABLE_TOP_CONTINUED = 20
TABLE_BOTTOM = 262
AGING_BAND_Y = 270
FOOTER_Y = 275
LABEL_X = 155
VALUE_X = 157
VALUE_WIDTH = RIGHT - VALUE_X
RECIPIENT_STEP = 5
RECIPIENT_MAX_LINES = 3
ELLIPSIS = "..."

PRINT_SCRIPT = "this.print({bUI:true,bSilent:false,bShrinkToFit:true});"

INVOICE_TERMS_TEXT = (
    "We acknowledge that the above goods are received in good condition. Please inform us of "
    "any issues within 24 hours. Otherwise, kindly note no return or refunds accepted.",
    "We are not liable for any damage to products once stored at your premises. Please keep "
    "frozen products (gelato and / or popsicles) frozen at -18 degree Celsius and below.",
)
# Height below the last row taken by terms, signature line and totals.
INVOICE_CLOSING_HEIGHT = 63


class RenderMode(str, Enum):
    DOWNLOAD = "download"
    PRINT = "print"


def format_date(value: date | None) -> str:
    return f"{value:%d/%m/%Y}" if value else "N/A"


def format_amount(value: Decimal | None) -> str:
    return f"{value:.2f}" if value is not None else ""


def invoice_filename(invoice_id: str, delivery_date: date) -> str:
    return f"Invoice_{invoice_id}_{delivery_date:%d-%m-%Y}.pdf"


def statement_filename(statement_id: str, statement_month: date) -> str:
    return f"Statement_{statement_id}_{month_name(statement_month)}_{statement_month.year}.pdf"


class _PdfPage:
    """Thin wrapper over a ReportLab canvas speaking top-origin millimetres."""

    def __init__(self, pdf: canvas.Canvas) -> None:
        self.pdf = pdf
        self.page_count = 1

    def _y(self, y: float) -> float:
        return PAGE_HEIGHT - y * mm

    def text(
        self,
        value: str,
        x: float,
        y: float,
        *,
        size: float = 10,
        bold: bool = False,
        align: str = "left",
        color=black,
    ) -> None:
        self.pdf.setFont(FONT_BOLD if bold else FONT, size)
        self.pdf.setFillColor(color)
        if align == "right":
            self.pdf.drawRightString(x * mm, self._y(y), value)
        elif align == "center":
            self.pdf.drawCentredString(x * mm, self._y(y), value)
        else:
            self.pdf.drawString(x * mm, self._y(y), value)

    def lines(
        self,
        values: list[str],
        x: float,
        y: float,
        *,
        step: float,
        size: float = 10,
        bold: bool = False,
    ) -> None:
        for index, value in enumerate(values):
            self.text(value, x, y + index * step, size=size, bold=bold)

    def band(self, y: float, height: float) -> None:
        self.pdf.setFillColor(BAND)
        self.pdf.rect(LEFT * mm, self._y(y + height), (RIGHT - LEFT) * mm, height * mm, stroke=0, fill=1)

    def rule(self, x1: float, y1: float, x2: float, y2: float, color=black, width: float = 0.57) -> None:
        self.pdf.setStrokeColor(color)
        self.pdf.setLineWidth(width)
        self.pdf.line(x1 * mm, self._y(y1), x2 * mm, self._y(y2))

    def new_page(self) -> None:
        self.pdf.showPage()
        self.page_count += 1


def wrap(value: str, width: float, *, size: float = 9, bold: bool = False) -> list[str]:
    """Split ``value`` into lines no wider than ``width`` millimetres."""

    return simpleSplit(value, FONT_BOLD if bold else FONT, size, width * mm) or [""]


def _ellipsize(value: str, width: float, font: str, size: float) -> str:
    text = value.rstrip()
    while text and stringWidth(text + ELLIPSIS, font, size) > width * mm:
        text = text[:-1].rstrip()
    return text + ELLIPSIS


def fit_lines(lines: list[str], limit: int, width: float, *, size: float = 10, bold: bool = False) -> list[str]:
    """Keep at most ``limit`` lines, each within ``width``; cut lines end in an ellipsis."""

    font = FONT_BOLD if bold else FONT
    kept = [
        line if stringWidth(line, font, size) <= width * mm else _ellipsize(line, width, font, size)
        for line in lines[:limit]
    ]
    if len(lines) > limit and kept and not kept[-1].endswith(ELLIPSIS):
        kept[-1] = _ellipsize(kept[-1], width, font, size)
    return kept


def single_line(value: str, width: float, *, size: float = 10) -> str:
    return fit_lines(wrap(value, width, size=size), 1, width, size=size)[0]


def recipient_lines(name: str, address: str, width: float) -> list[str]:
    """Recipient name then address, wrapped to ``width`` and capped above the next section."""

    name_lines = fit_lines(wrap(name, width, size=10), RECIPIENT_MAX_LINES - 1, width)
    address_limit = RECIPIENT_MAX_LINES - len(name_lines)
    return name_lines + fit_lines(wrap(address, width, size=10), address_limit, width)


def row_height(line: DocumentLine) -> float:
    """Invoice row height: the taller of the product and description cells plus 1 mm."""

    product_lines = wrap(line.product or "", 30, bold=True)
    description_lines = wrap(line.description, 50)
    return max(len(product_lines), len(description_lines)) * ROW_LINE_STEP + 1


def _draw_header(page: _PdfPage, header: tuple[str, ...]) -> None:
    y = 20
    for index, value in enumerate(header):
        if not value:
            continue
        page.text(value, LEFT, y, bold=index == 0)
        y += HEADER_LEADING


def _draw_footer(page: _PdfPage, footer: tuple[str, ...]) -> None:
    y = FOOTER_Y
    for value in footer:
        if not value:
            continue
        page.text(value, 105, y, align="center")
        y += FOOTER_LEADING


def _draw_invoice_band(page: _PdfPage, top: float) -> None:
    page.band(top, 8)
    page.text("PRODUCT /", 22, top + 3, size=9, color=TEAL)
    page.text("SERVICES", 22, top + 6, size=9, color=TEAL)
    page.text("DESCRIPTION", 60, top + 5, size=9, color=TEAL)
    page.text("QTY", 150, top + 5, size=9, align="center", color=TEAL)
    page.text("UNIT", 168, top + 3, size=9, align="right", color=TEAL)
    page.text("PRICE", 168, top + 6, size=9, align="right", color=TEAL)
    page.text("AMOUNT", 185, top + 5, size=9, align="right", color=TEAL)


def _draw_invoice(page: _PdfPage, model: DocumentModel, currency_symbol: str) -> None:
    meta = model.meta
    _draw_header(page, model.header)
    page.text(meta.title, LEFT, 57, size=16, color=TEAL)

    recipient = recipient_lines(model.recipient.name, model.recipient.address, 52)
    for x, label in ((LEFT, "BILL TO"), (75, "SHIP TO")):
        page.text(label, x, 67, bold=True)
        page.lines(recipient, x, 72, step=RECIPIENT_STEP)

    for y, label, value in (
        (67, "INVOICE NO.", meta.number),
        (72, "DATE", format_date(meta.date)),
        (77, "DUE DATE", format_date(meta.due_date)),
        (82, "TERMS", meta.terms or ""),
    ):
        page.text(label, LABEL_X, y, bold=True, align="right")
        page.text(single_line(value, VALUE_WIDTH), VALUE_X, y)

    page.rule(LEFT, 87, RIGHT, 87, color=RULE)
    page.text("SHIP DATE", LEFT, 93, bold=True)
    page.text(format_date(meta.due_date), LEFT, 98)
    page.text("TRACKING NO.", 100, 93, bold=True)
    page.text(meta.tracking_number or "N/A", 100, 98)

    table_top = 104
    _draw_invoice_band(page, table_top)
    y = table_top + 13
    for line in model.lines:
        height = row_height(line)
        if y + height - ROW_LINE_STEP > TABLE_BOTTOM:
            page.new_page()
            _draw_invoice_band(page, TABLE_TOP_CONTINUED)
            y = TABLE_TOP_CONTINUED + 13
        product_lines = wrap(line.product or "", 30, bold=True)
        description_lines = wrap(line.description, 50)
        page.lines(product_lines, 22, y, step=ROW_LINE_STEP, size=9, bold=True)
        page.lines(description_lines, 60, y, step=ROW_LINE_STEP, size=9)
        centre_y = y + (max(len(product_lines), len(description_lines)) - 1) * ROW_LINE_STEP / 2
        page.text(str(line.quantity or 0), 150, centre_y, size=9, align="center")
        page.text(format_amount(line.unit_price), 168, centre_y, size=9, align="right")
        page.text(format_amount(line.amount), 185, centre_y, size=9, align="right")
        y += height

    if y + INVOICE_CLOSING_HEIGHT > FOOTER_Y - 3:
        page.new_page()
        y = TABLE_TOP_CONTINUED

    x = float(LEFT)
    while x < RIGHT:
        page.rule(x, y + 2, x + 0.75, y + 2, color=DOTTED)
        x += 1.5

    y += 7
    page.text("Terms & Conditions", LEFT, y, size=9)
    page.lines(wrap(INVOICE_TERMS_TEXT[0], 70, size=10), LEFT, y + 5, step=ROW_LINE_STEP + 0.6)
    page.lines(wrap(INVOICE_TERMS_TEXT[1], 70, size=10), LEFT, y + 25, step=ROW_LINE_STEP + 0.6)
    page.rule(LEFT, y + 50, 85, y + 50)
    page.text("Client's Signature & Company Stamp", LEFT, y + 55)

    totals = model.totals
    rate_label = f"GST {(model.tax_rate * 100).normalize():f}%"
    for offset, label, value in (
        (5, "SUBTOTAL", totals.subtotal),
        (10, rate_label, totals.tax),
        (15, "TOTAL", totals.total),
    ):
        page.text(label, 100, y + offset)
        page.text(format_amount(value), 185, y + offset, align="right")
    page.text("BALANCE DUE", 100, y + 23)
    page.text(f"{currency_symbol}{totals.total:.2f}", 185, y + 23, size=14, bold=True, align="right")

    _draw_footer(page, model.footer)


def _draw_statement_band(page: _PdfPage, top: float) -> None:
    page.band(top, 7)
    page.text("DATE", 22, top + 5, size=9, color=TEAL)
    page.text("DESCRIPTION", 50, top + 5, size=9, color=TEAL)
    page.text("AMOUNT", 150, top + 5, size=9, align="right", color=TEAL)
    page.text("OPEN AMOUNT", 185, top + 5, size=9, align="right", color=TEAL)


def _draw_aging_band(page: _PdfPage, model: DocumentModel, currency_symbol: str) -> None:
    if model.aging is None:
        return
    y = AGING_BAND_Y
    page.band(y, 8)
    for x, first, second in (
        (23, "Current", "Due"),
        (45, "1-30 Days", "Past Due"),
        (80, "31-60 Days", "Past Due"),
        (115, "61-90 Days", "Past Due"),
        (150, "90+ Days", "Past Due"),
    ):
        page.text(first, x, y + 3, size=9, color=TEAL)
        page.text(second, x, y + 6.5, size=9, color=TEAL)
    page.text("Amount", 185, y + 3, size=9, bold=True, align="right", color=TEAL)
    page.text("Due", 185, y + 6.5, size=9, bold=True, align="right", color=TEAL)

    for x, amount in zip((23, 45, 80, 115, 150), model.aging.as_row()):
        page.text(format_amount(amount), x, y + 12, size=9)
    page.text(f"{currency_symbol}{model.totals.total:.2f}", 186, y + 12, size=9, bold=True, align="right")


def _draw_statement(page: _PdfPage, model: DocumentModel, currency_symbol: str) -> None:
    meta = model.meta
    _draw_header(page, model.header)
    page.text(meta.title, LEFT, 58, size=16, color=TEAL)

    for y, label, value in (
        (67, "STATEMENT NO.", meta.number),
        (72, "DATE", format_date(meta.date)),
        (77, "TOTAL DUE", f"{currency_symbol}{model.totals.total:.2f}"),
    ):
        page.text(label, LABEL_X, y, bold=True, align="right")
        page.text(single_line(value, VALUE_WIDTH), VALUE_X, y)
    page.text("ENCLOSED", LABEL_X, 82, bold=True, align="right")

    page.text("TO", LEFT, 67, bold=True)
    page.lines(recipient_lines(model.recipient.name, model.recipient.address, 60), LEFT, 72, step=RECIPIENT_STEP)

    table_top = 88
    _draw_statement_band(page, table_top)
    y = table_top + 13
    for line in model.lines:
        description_lines = wrap(line.description, 90)
        height = max(len(description_lines) * ROW_LINE_STEP, 6)
        if y + height - ROW_LINE_STEP > TABLE_BOTTOM:
            page.new_page()
            _draw_statement_band(page, TABLE_TOP_CONTINUED)
            y = TABLE_TOP_CONTINUED + 13
        page.text(format_date(line.date), 22, y, size=9)
        page.lines(description_lines, 50, y, step=ROW_LINE_STEP, size=9)
        page.text(format_amount(line.amount), 150, y, size=9, align="right")
        page.text(format_amount(line.open_amount), 185, y, size=9, align="right")
        y += height

    _draw_aging_band(page, model, currency_symbol)
    _draw_footer(page, model.footer)


def _set_open_action(pdf: canvas.Canvas, action: PDFDictionary) -> None:
    # Canvas exposes no setter for the catalog OpenAction entry; this reaches
    # the document catalog through the private _doc attribute.
    pdf._doc.Catalog.OpenAction = action


def _request_print_dialog(pdf: canvas.Canvas) -> None:
    _set_open_action(pdf, PDFDictionary({"S": PDFName("JavaScript"), "JS": PDFString(PRINT_SCRIPT)}))


def render_pdf(
    model: DocumentModel,
    *,
    mode: RenderMode = RenderMode.DOWNLOAD,
    currency_symbol: str = "S$",
    company_name: str | None = None,
) -> bytes:
    """Lay out ``model`` on A4 pages and return the PDF bytes.

    The canvas runs in invariant mode, so equal models give equal bytes.
    """

    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4, invariant=1, pageCompression=0)
    pdf.setTitle(f"{model.meta.title} {model.meta.number}")
    if company_name:
        pdf.setAuthor(company_name)
    page = _PdfPage(pdf)

    if model.kind is DocumentKind.INVOICE:
        _draw_invoice(page, model, currency_symbol)
    else:
        _draw_statement(page, model, currency_symbol)

    if RenderMode(mode) is RenderMode.PRINT:
        _request_print_dialog(pdf)

    pdf.showPage()
    pdf.save()
    logger.debug(
        "rendered %s %s on %d page(s)", model.kind.value, model.meta.number, page.page_count
    )
    return buffer.getvalue()


__all__ = [
    "RenderMode",
    "fit_lines",
    "format_amount",
    "format_date",
    "invoice_filename",
    "recipient_lines",
    "render_pdf",
    "row_height",
    "statement_filename",
    "wrap",
]
