"""Schemas for orders and their line items."""
from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from gelato_ops.models.order import OrderStatus


class OrderItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int | None
    product_name: str
    product_type: str | None
    billing_name: str | None
    quantity: int
    unit_price: Decimal
    subtotal: Decimal


class OrderRead(BaseModel):
    """Order with its line items."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    client_id: str
    order_date: date
    delivery_date: date
    delivery_address: str | None
    total_amount: Decimal
    status: OrderStatus
    tracking_number: str | None
    invoice_id: str
    statement_id: str | None
    items: list[OrderItemRead]


class OrderStatusUpdate(BaseModel):
    status: str


__all__ = ["OrderItemRead", "OrderRead", "OrderStatusUpdate"]
