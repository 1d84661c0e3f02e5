"""Product catalog ORM models."""
from __future__ import annotations

from decimal import Decimal

from sqlalchemy import ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gelato_ops.models.base import Base, TimestampMixin


class Product(TimestampMixin, Base):
    """Catalog entry for a gelato product in a given packaging."""

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    product_type: Mapped[str | None] = mapped_column(String(128))
    billing_name: Mapped[str | None] = mapped_column(String(255))
    gelato_type: Mapped[str] = mapped_column(String(64), nullable=False, default="Dairy")
    unit_weight: Mapped[Decimal | None] = mapped_column(Numeric(10, 3))
    price: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0.00"))
    cost: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0.00"))
    # Kilograms of milk or sugar syrup base per unit.
    milk_base: Mapped[Decimal | None] = mapped_column(Numeric(10, 3))
    sugar_base: Mapped[Decimal | None] = mapped_column(Numeric(10, 3))

    custom_prices = relationship(
        "ClientProductPrice", back_populates="product", cascade="all, delete-orphan"
    )


class ClientProductPrice(TimestampMixin, Base):
    """Price override negotiated with a single client."""

    __tablename__ = "client_product_prices"
    __table_args__ = (
        UniqueConstraint("client_id", "product_id", name="uq_client_product_prices_client_product"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    client_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False
    )
    product_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    )
    custom_price: Mapped[Decimal] = mapped_column(nullable=False)

    client = relationship("Client", back_populates="custom_prices")
    product = relationship("Product", back_populates="custom_prices")


__all__ = ["ClientProductPrice", "Product"]
