"""Initial schema for clients, orders, statements and templates."""
from __future__ import annotations

from collections.abc import Iterable

import sqlalchemy as sa
from alembic import op

revision = "20250301_01"
down_revision = None
branch_labels = None
depends_on: Iterable[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _drop_enum(name: str) -> None:
    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        op.execute(sa.text(f"DROP TYPE IF EXISTS {name}"))


def upgrade() -> None:  # noqa: D401
    """Create the operations tables and constraints."""

    order_status = sa.Enum("PENDING", "COMPLETED", "CANCELLED", name="order_status")
    aging_category = sa.Enum(
        "current", "1-30_days", "31-60_days", "61-90_days", "90plus_days", name="aging_category"
    )
    order_status.create(op.get_bind(), checkfirst=True)
    aging_category.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "clients",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("business_name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("person_incharge", sa.String(length=255)),
        sa.Column("business_contact", sa.String(length=32)),
        sa.Column("delivery_address", sa.Text()),
        sa.Column("street_name", sa.String(length=255)),
        sa.Column("country", sa.String(length=64)),
        sa.Column("postal_code", sa.String(length=16)),
        sa.Column("acra_document", sa.String(length=512)),
        sa.Column("profile_photo", sa.String(length=512)),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_clients"),
        sa.UniqueConstraint("email", name="uq_clients_email"),
    )

    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("product_type", sa.String(length=128)),
        sa.Column("billing_name", sa.String(length=255)),
        sa.Column("gelato_type", sa.String(length=64), nullable=False, server_default="Dairy"),
        sa.Column("unit_weight", sa.Numeric(10, 3)),
        sa.Column("price", sa.Numeric(12, 2), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_products"),
    )

    op.create_table(
        "admin_users",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("full_name", sa.String(length=255)),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("profile_photo", sa.String(length=512)),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_admin_users"),
        sa.UniqueConstraint("email", name="uq_admin_users_email"),
    )

    for table, line_count in (("header_templates", 7), ("footer_templates", 5)):
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
            sa.Column("option_name", sa.String(length=128), nullable=False),
            *[sa.Column(f"line{index}", sa.String(length=255)) for index in range(1, line_count + 1)],
            sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.false()),
            *_timestamps(),
            sa.PrimaryKeyConstraint("id", name=f"pk_{table}"),
        )

    op.create_table(
        "statements",
        sa.Column("statement_id", sa.String(length=64), nullable=False),
        sa.Column("client_id", sa.String(length=64), nullable=False),
        sa.Column("statement_month", sa.Date(), nullable=False),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("date_generated", sa.DateTime(timezone=True), nullable=False),
        sa.Column("aging_category", aging_category, nullable=False, server_default="1-30_days"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("statement_id", name="pk_statements"),
        sa.ForeignKeyConstraint(
            ["client_id"], ["clients.id"], name="fk_statements_client_id_clients", ondelete="RESTRICT"
        ),
        sa.UniqueConstraint("client_id", "statement_month", name="uq_statements_client_month"),
    )
    op.create_index("ix_statements_client_id", "statements", ["client_id"])

    op.create_table(
        "orders",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("client_id", sa.String(length=64), nullable=False),
        sa.Column("order_date", sa.Date(), nullable=False),
        sa.Column("delivery_date", sa.Date(), nullable=False),
        sa.Column("delivery_address", sa.Text()),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("status", order_status, nullable=False, server_default="PENDING"),
        sa.Column("tracking_number", sa.String(length=64)),
        sa.Column("invoice_id", sa.String(length=64), nullable=False),
        sa.Column("statement_id", sa.String(length=64)),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_orders"),
        sa.ForeignKeyConstraint(
            ["client_id"], ["clients.id"], name="fk_orders_client_id_clients", ondelete="RESTRICT"
        ),
        sa.ForeignKeyConstraint(
            ["statement_id"],
            ["statements.statement_id"],
            name="fk_orders_statement_id_statements",
            ondelete="SET NULL",
        ),
        sa.UniqueConstraint("invoice_id", name="uq_orders_invoice_id"),
    )
    op.create_index("ix_orders_client_id", "orders", ["client_id"])
    op.create_index("ix_orders_statement_id", "orders", ["statement_id"])
    op.create_index("ix_orders_delivery_date", "orders", ["delivery_date"])

    op.create_table(
        "order_items",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("order_id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer()),
        sa.Column("product_name", sa.String(length=255), nullable=False),
        sa.Column("product_type", sa.String(length=128)),
        sa.Column("billing_name", sa.String(length=255)),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("subtotal", sa.Numeric(12, 2), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_order_items"),
        sa.ForeignKeyConstraint(
            ["order_id"], ["orders.id"], name="fk_order_items_order_id_orders", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["product_id"], ["products.id"], name="fk_order_items_product_id_products", ondelete="SET NULL"
        ),
    )
    op.create_index("ix_order_items_order_id", "order_items", ["order_id"])

    op.create_table(
        "client_product_prices",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("client_id", sa.String(length=64), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("custom_price", sa.Numeric(12, 2), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_client_product_prices"),
        sa.ForeignKeyConstraint(
            ["client_id"], ["clients.id"], name="fk_client_product_prices_client_id_clients", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["product_id"],
            ["products.id"],
            name="fk_client_product_prices_product_id_products",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint("client_id", "product_id", name="uq_client_product_prices_client_product"),
    )


def downgrade() -> None:  # noqa: D401
    """Drop the operations tables."""

    op.drop_table("client_product_prices")

    op.drop_index("ix_order_items_order_id", table_name="order_items")
    op.drop_table("order_items")

    op.drop_index("ix_orders_delivery_date", table_name="orders")
    op.drop_index("ix_orders_statement_id", table_name="orders")
    op.drop_index("ix_orders_client_id", table_name="orders")
    op.drop_table("orders")

    op.drop_index("ix_statements_client_id", table_name="statements")
    op.drop_table("statements")

    op.drop_table("footer_templates")
    op.drop_table("header_templates")
    op.drop_table("admin_users")
    op.drop_table("products")
    op.drop_table("clients")

    for enum_name in ["aging_category", "order_status"]:
        _drop_enum(enum_name)
