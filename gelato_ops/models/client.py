"""Client account ORM model."""
from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gelato_ops.models.base import Base, TimestampMixin


class Client(TimestampMixin, Base):
    """A wholesale customer; ``id`` is the identity provider's account id."""

    __tablename__ = "clients"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    business_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    person_incharge: Mapped[str | None] = mapped_column(String(255))
    business_contact: Mapped[str | None] = mapped_column(String(32))
    delivery_address: Mapped[str | None] = mapped_column(Text)
    street_name: Mapped[str | None] = mapped_column(String(255))
    country: Mapped[str | None] = mapped_column(String(64))
    postal_code: Mapped[str | None] = mapped_column(String(16))
    acra_document: Mapped[str | None] = mapped_column(String(512))
    profile_photo: Mapped[str | None] = mapped_column(String(512))

    orders = relationship("Order", back_populates="client")
    statements = relationship("Statement", back_populates="client")
    custom_prices = relationship(
        "ClientProductPrice", back_populates="client", cascade="all, delete-orphan"
    )

    @property
    def structured_address(self) -> str | None:
        """Street, country and postal code joined, or ``None`` when no part is recorded."""
        parts = [part for part in (self.street_name, self.country, self.postal_code) if part]
        if not parts:
            return None
        return ", ".join(parts)


__all__ = ["Client"]
