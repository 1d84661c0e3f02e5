"""Document model building and rendering."""

from .delivery_list import DeliveryListService, delivery_list_filename
from .model import DocumentKind, DocumentModel, build_invoice_model, build_statement_model
from .pdf import RenderMode, invoice_filename, render_pdf, statement_filename
from .product_analysis import ProductAnalysisService, product_analysis_filename
from .production_report import DeliveryDateSummary, ProductionReportService, production_report_filename

__all__ = [
    "DeliveryDateSummary",
    "DeliveryListService",
    "DocumentKind",
    "DocumentModel",
    "ProductAnalysisService",
    "ProductionReportService",
    "RenderMode",
    "build_invoice_model",
    "build_statement_model",
    "delivery_list_filename",
    "invoice_filename",
    "product_analysis_filename",
    "production_report_filename",
    "render_pdf",
    "statement_filename",
]
