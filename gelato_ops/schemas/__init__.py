"""Pydantic schemas package."""

from .client import ClientCreate, ClientDocumentRead, ClientRead, CustomPriceResult, CustomPriceUpdate
from .order import OrderItemRead, OrderRead, OrderStatusUpdate
from .report import ProductionDateRead
from .statement import (
    AgingCategoryUpdate,
    BackfillResponse,
    StatementDetail,
    StatementInvoiceRead,
    StatementListItem,
    StatementRead,
)
from .template import (
    FooterTemplateRead,
    FooterTemplateWrite,
    HeaderTemplateRead,
    HeaderTemplateWrite,
    TemplateSelectionRead,
)

__all__ = [
    "AgingCategoryUpdate",
    "BackfillResponse",
    "ClientCreate",
    "ClientDocumentRead",
    "ClientRead",
    "CustomPriceResult",
    "CustomPriceUpdate",
    "FooterTemplateRead",
    "FooterTemplateWrite",
    "HeaderTemplateRead",
    "HeaderTemplateWrite",
    "OrderItemRead",
    "OrderRead",
    "OrderStatusUpdate",
    "ProductionDateRead",
    "StatementDetail",
    "StatementInvoiceRead",
    "StatementListItem",
    "StatementRead",
    "TemplateSelectionRead",
]
