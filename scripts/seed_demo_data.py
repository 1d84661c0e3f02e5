"""Seed script for a demo admin, catalog, clients, templates and orders."""
from __future__ import annotations

import logging
import os
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from gelato_ops.api.routes.auth import hash_password
from gelato_ops.db.session import engine, get_session
from gelato_ops.models import (
    AdminUser,
    Base,
    Client,
    FooterTemplate,
    HeaderTemplate,
    Order,
    OrderLineItem,
    OrderStatus,
    Product,
)
from gelato_ops.services.financials import calculate_tax, to_money

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEMO_ADMIN_EMAIL = "admin@demo.local"


def _seed_admin(session: Session) -> None:
    if session.scalar(select(AdminUser).where(AdminUser.email == DEMO_ADMIN_EMAIL)) is not None:
        logger.info("Admin %s already exists", DEMO_ADMIN_EMAIL)
        return
    password = os.environ.get("SEED_ADMIN_PASSWORD", "changeme123")
    session.add(AdminUser(email=DEMO_ADMIN_EMAIL, full_name="Demo Admin", hashed_password=hash_password(password)))
    logger.info("Added admin %s", DEMO_ADMIN_EMAIL)


def _seed_templates(session: Session) -> None:
    if session.scalar(select(HeaderTemplate.id)) is None:
        session.add(
            HeaderTemplate(
                option_name="Main letterhead",
                line1="Gelato Wholesale Pte. Ltd.",
                line2="10 Ice Cream Lane #01-02",
                line3="Singapore 123456",
                line4="GST Reg. No. 201912345X",
                is_default=True,
            )
        )
    if session.scalar(select(FooterTemplate.id)) is None:
        session.add(
            FooterTemplate(
                option_name="Bank details",
                line1="Payment by PayNow to UEN 201912345X",
                line2="Thank you for your business",
                is_default=True,
            )
        )


def _seed_catalog(session: Session) -> list[Product]:
    products = list(session.scalars(select(Product)).all())
    if products:
        return products
    products = [
        Product(name="Pistachio 5L", product_type="5L Tub", billing_name="Pistachio Gelato 5L",
                gelato_type="Dairy", unit_weight=Decimal("3.200"), price=Decimal("48.00"),
                cost=Decimal("21.50"), milk_base=Decimal("2.600")),
        Product(name="Mango Sorbet 5L", product_type="5L Tub", billing_name="Mango Sorbet 5L",
                gelato_type="Sorbet", unit_weight=Decimal("3.500"), price=Decimal("42.00"),
                cost=Decimal("17.00"), sugar_base=Decimal("1.400")),
        Product(name="Vanilla Cup", product_type="120ml Cup", gelato_type="Dairy",
                unit_weight=Decimal("0.080"), price=Decimal("2.50"),
                cost=Decimal("0.90"), milk_base=Decimal("0.065")),
    ]
    session.add_all(products)
    session.flush()
    return products


def _seed_orders(session: Session, products: list[Product]) -> None:
    if session.scalar(select(Order.id)) is not None:
        logger.info("Orders already seeded")
        return
    clients = [
        Client(id="demo-alpha", business_name="Alpha Co", email="orders@alpha.example",
               business_contact="+65 6123 4567", street_name="1 Alpha Road", country="Singapore",
               postal_code="100001"),
        Client(id="demo-bravo", business_name="Bravo Co", email="orders@bravo.example",
               delivery_address="22 Bravo Street, Singapore 200002"),
    ]
    session.add_all(clients)
    for index, (client, delivery) in enumerate(
        [(clients[0], date(2025, 1, 10)), (clients[0], date(2025, 1, 24)), (clients[1], date(2025, 2, 3))],
        start=1,
    ):
        order = Order(
            client_id=client.id,
            order_date=delivery,
            delivery_date=delivery,
            delivery_address=client.structured_address or client.delivery_address,
            invoice_id=f"INV-{delivery:%Y%m}-{index:04d}",
            status=OrderStatus.COMPLETED,
        )
        subtotal = Decimal("0.00")
        for product, quantity in zip(products, (2, 1, 24)):
            line_total = to_money(product.price * quantity)
            subtotal += line_total
            order.items.append(
                OrderLineItem(
                    product_id=product.id,
                    product_name=product.name,
                    product_type=product.product_type,
                    billing_name=product.billing_name,
                    quantity=quantity,
                    unit_price=product.price,
                    subtotal=line_total,
                )
            )
        order.total_amount = subtotal + calculate_tax(subtotal)
        session.add(order)
    logger.info("Added demo clients and orders")


def seed(session: Session) -> None:
    """Seed demo admin, templates, catalog and orders."""

    _seed_admin(session)
    _seed_templates(session)
    products = _seed_catalog(session)
    _seed_orders(session, products)


def main() -> None:
    Base.metadata.create_all(bind=engine)
    with get_session() as session:
        seed(session)


if __name__ == "__main__":
    main()
