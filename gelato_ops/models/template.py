"""Letterhead and footer template ORM models."""
from __future__ import annotations

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from gelato_ops.models.base import Base, TimestampMixin


class HeaderTemplate(TimestampMixin, Base):
    """Up to seven lines of letterhead; line 1 renders bold."""

    __tablename__ = "header_templates"

    LINE_COUNT = 7

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    option_name: Mapped[str] = mapped_column(String(128), nullable=False)
    line1: Mapped[str | None] = mapped_column(String(255))
    line2: Mapped[str | None] = mapped_column(String(255))
    line3: Mapped[str | None] = mapped_column(String(255))
    line4: Mapped[str | None] = mapped_column(String(255))
    line5: Mapped[str | None] = mapped_column(String(255))
    line6: Mapped[str | None] = mapped_column(String(255))
    line7: Mapped[str | None] = mapped_column(String(255))
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    @property
    def lines(self) -> list[str]:
        return [getattr(self, f"line{index}") or "" for index in range(1, self.LINE_COUNT + 1)]


class FooterTemplate(TimestampMixin, Base):
    """Up to five centred footer lines."""

    __tablename__ = "footer_templates"

    LINE_COUNT = 5

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    option_name: Mapped[str] = mapped_column(String(128), nullable=False)
    line1: Mapped[str | None] = mapped_column(String(255))
    line2: Mapped[str | None] = mapped_column(String(255))
    line3: Mapped[str | None] = mapped_column(String(255))
    line4: Mapped[str | None] = mapped_column(String(255))
    line5: Mapped[str | None] = mapped_column(String(255))
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    @property
    def lines(self) -> list[str]:
        return [getattr(self, f"line{index}") or "" for index in range(1, self.LINE_COUNT + 1)]


__all__ = ["FooterTemplate", "HeaderTemplate"]
