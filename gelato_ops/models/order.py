"""Order and order line item ORM models."""
from __future__ import annotations

import enum
from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Index, Integer, String, Text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gelato_ops.models.base import Base, TimestampMixin


class OrderStatus(str, enum.Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class Order(TimestampMixin, Base):
    """One client purchase event; ``statement_id`` stays null until the backfill assigns it."""

    __tablename__ = "orders"
    __table_args__ = (
        Index("ix_orders_client_id", "client_id"),
        Index("ix_orders_statement_id", "statement_id"),
        Index("ix_orders_delivery_date", "delivery_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    client_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("clients.id", ondelete="RESTRICT"), nullable=False
    )
    order_date: Mapped[date] = mapped_column(Date, nullable=False)
    delivery_date: Mapped[date] = mapped_column(Date, nullable=False)
    delivery_address: Mapped[str | None] = mapped_column(Text)
    total_amount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0.00"))
    status: Mapped[OrderStatus] = mapped_column(
        SAEnum(OrderStatus, name="order_status"), nullable=False, default=OrderStatus.PENDING
    )
    tracking_number: Mapped[str | None] = mapped_column(String(64))
    invoice_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    statement_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("statements.statement_id", ondelete="SET NULL"), nullable=True
    )

    client = relationship("Client", back_populates="orders")
    statement = relationship("Statement", back_populates="orders")
    items = relationship(
        "OrderLineItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderLineItem.id",
    )


class OrderLineItem(TimestampMixin, Base):
    """Product line within an order; product fields are copied at order time."""

    __tablename__ = "order_items"
    __table_args__ = (Index("ix_order_items_order_id", "order_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False
    )
    product_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("products.id", ondelete="SET NULL"), nullable=True
    )
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    product_type: Mapped[str | None] = mapped_column(String(128))
    billing_name: Mapped[str | None] = mapped_column(String(255))
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(nullable=False)
    subtotal: Mapped[Decimal] = mapped_column(nullable=False)

    order = relationship("Order", back_populates="items")
    product = relationship("Product")


__all__ = ["Order", "OrderLineItem", "OrderStatus"]
