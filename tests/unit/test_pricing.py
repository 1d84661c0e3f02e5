from __future__ import annotations

from decimal import Decimal

import pytest
from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from gelato_ops.core.errors import PartialBatchFailure, StoreError, ValidationError
from gelato_ops.db.session import build_engine
from gelato_ops.models import Base, Client, ClientProductPrice, Product
from gelato_ops.services.events import ChangeNotifier
from gelato_ops.services.pricing import CustomPriceService, upsert_custom_price


@pytest.fixture()
def price_sessions(tmp_path):
    engine = build_engine(f"sqlite+pysqlite:///{tmp_path / 'prices.db'}")
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    with factory() as session:
        session.add(Client(id="client-a", business_name="Alpha Co", email="ops@alpha.example"))
        session.add_all(
            [
                Product(id=1, name="Pistachio 5L", price=Decimal("40.00")),
                Product(id=2, name="Mango Sorbet 5L", price=Decimal("35.00")),
            ]
        )
        session.commit()
    yield factory
    engine.dispose()


def _prices(factory) -> dict[int, Decimal]:
    with factory() as session:
        rows = session.scalars(select(ClientProductPrice).where(ClientProductPrice.client_id == "client-a"))
        return {row.product_id: row.custom_price for row in rows}


def test_applies_every_price(price_sessions) -> None:
    notifier = ChangeNotifier()
    seen: list[str] = []
    notifier.subscribe("prices", seen.append)
    service = CustomPriceService(price_sessions, max_workers=1, notifier=notifier)

    applied = service.apply_custom_prices("client-a", {1: "38.50", 2: Decimal("30")})

    assert applied == 2
    assert _prices(price_sessions) == {1: Decimal("38.50"), 2: Decimal("30.00")}
    assert seen == ["prices"]


def test_existing_price_is_replaced(price_sessions) -> None:
    service = CustomPriceService(price_sessions, max_workers=1, notifier=ChangeNotifier())
    service.apply_custom_prices("client-a", {1: "38.50"})

    service.apply_custom_prices("client-a", {1: "36.00"})

    assert _prices(price_sessions) == {1: Decimal("36.00")}


def test_partial_failure_keeps_successful_updates(price_sessions) -> None:
    service = CustomPriceService(price_sessions, max_workers=1, notifier=ChangeNotifier())

    with pytest.raises(PartialBatchFailure) as excinfo:
        service.apply_custom_prices("client-a", {1: "38.50", 999: "10.00", 2: "33.00"})

    assert excinfo.value.failed == [999]
    assert excinfo.value.succeeded == 2
    assert _prices(price_sessions) == {1: Decimal("38.50"), 2: Decimal("33.00")}


@pytest.mark.parametrize("bad_price", ["-1", "abc"])
def test_invalid_price_rejects_whole_batch(price_sessions, bad_price: str) -> None:
    service = CustomPriceService(price_sessions, max_workers=1, notifier=ChangeNotifier())

    with pytest.raises(ValidationError):
        service.apply_custom_prices("client-a", {1: "38.50", 2: bad_price})

    assert _prices(price_sessions) == {}


def test_empty_batch_applies_nothing(price_sessions) -> None:
    service = CustomPriceService(price_sessions, max_workers=1, notifier=ChangeNotifier())

    assert service.apply_custom_prices("client-a", {}) == 0


def test_upsert_rejects_unknown_product(price_sessions) -> None:
    with price_sessions() as session, pytest.raises(StoreError):
        upsert_custom_price(session, client_id="client-a", product_id=42, price=Decimal("1.00"))
