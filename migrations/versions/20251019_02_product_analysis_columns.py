"""Product cost and production base quantities."""
from __future__ import annotations

from collections.abc import Iterable

import sqlalchemy as sa
from alembic import op

revision = "20251019_02"
down_revision = "20250301_01"
branch_labels = None
depends_on: Iterable[str] | None = None


def upgrade() -> None:  # noqa: D401
    """Add the columns read by the product analysis workbook."""

    with op.batch_alter_table("products") as batch:
        batch.add_column(sa.Column("cost", sa.Numeric(12, 2), nullable=False, server_default="0"))
        batch.add_column(sa.Column("milk_base", sa.Numeric(10, 3)))
        batch.add_column(sa.Column("sugar_base", sa.Numeric(10, 3)))


def downgrade() -> None:  # noqa: D401
    """Remove the product analysis columns."""

    with op.batch_alter_table("products") as batch:
        batch.drop_column("sugar_base")
        batch.drop_column("milk_base")
        batch.drop_column("cost")
