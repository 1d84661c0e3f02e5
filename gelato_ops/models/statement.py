"""Monthly client statement ORM model."""
from __future__ import annotations

import enum
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Date, DateTime, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gelato_ops.models.base import Base, TimestampMixin


class AgingCategory(str, enum.Enum):
    """Manually selected classification applied to a whole statement balance."""

    CURRENT = "current"
    DAYS_1_30 = "1-30_days"
    DAYS_31_60 = "31-60_days"
    DAYS_61_90 = "61-90_days"
    DAYS_90_PLUS = "90plus_days"

    @classmethod
    def coerce(cls, value: object) -> "AgingCategory":
        """Return the matching category, defaulting to 1-30 days for unset or unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.DAYS_1_30


class Statement(TimestampMixin, Base):
    """Monthly grouping of one client's orders."""

    __tablename__ = "statements"
    __table_args__ = (
        UniqueConstraint("client_id", "statement_month", name="uq_statements_client_month"),
        Index("ix_statements_client_id", "client_id"),
    )

    statement_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    client_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("clients.id", ondelete="RESTRICT"), nullable=False
    )
    statement_month: Mapped[date] = mapped_column(Date, nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0.00"))
    date_generated: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    aging_category: Mapped[AgingCategory] = mapped_column(
        SAEnum(
            AgingCategory,
            name="aging_category",
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
        default=AgingCategory.DAYS_1_30,
    )

    client = relationship("Client", back_populates="statements")
    orders = relationship("Order", back_populates="statement", order_by="Order.order_date")


__all__ = ["AgingCategory", "Statement"]
