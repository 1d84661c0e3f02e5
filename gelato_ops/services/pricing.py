"""Concurrent per-client custom price updates."""
from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal, InvalidOperation

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gelato_ops.core.errors import PartialBatchFailure, StoreError, ValidationError
from gelato_ops.models import ClientProductPrice, Product
from gelato_ops.services.events import ChangeNotifier, change_notifier
from gelato_ops.services.financials import to_money

logger = logging.getLogger(__name__)


def _parse_price(product_id: int, value: Decimal | int | float | str) -> Decimal:
    try:
        price = to_money(value)
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"Invalid price for product {product_id}", field="prices") from exc
    if price < 0:
        raise ValidationError(f"Price for product {product_id} cannot be negative", field="prices")
    return price


def upsert_custom_price(session: Session, *, client_id: str, product_id: int, price: Decimal) -> None:
    """Insert or replace one client's price for one product and commit."""

    if session.get(Product, product_id) is None:
        raise StoreError(f"Product {product_id} does not exist")
    row = session.scalar(
        select(ClientProductPrice).where(
            ClientProductPrice.client_id == client_id,
            ClientProductPrice.product_id == product_id,
        )
    )
    if row is None:
        session.add(ClientProductPrice(client_id=client_id, product_id=product_id, custom_price=price))
    else:
        row.custom_price = price
    session.commit()


class CustomPriceService:
    """Applies a batch of custom prices as independent concurrent updates.

    There is no cross-update atomicity: updates that succeed stay committed
    when others in the same batch fail.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        *,
        max_workers: int = 4,
        notifier: ChangeNotifier | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._max_workers = max_workers
        self._notifier = notifier or change_notifier

    def _apply_one(self, client_id: str, product_id: int, price: Decimal) -> None:
        session = self._session_factory()
        try:
            upsert_custom_price(session, client_id=client_id, product_id=product_id, price=price)
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def apply_custom_prices(
        self, client_id: str, prices: Mapping[int, Decimal | int | float | str]
    ) -> int:
        """Apply every price in ``prices`` and return the number applied.

        Raises :class:`PartialBatchFailure` naming the product ids whose
        update failed.
        """

        parsed = {product_id: _parse_price(product_id, value) for product_id, value in prices.items()}
        if not parsed:
            return 0

        with ThreadPoolExecutor(max_workers=self._max_workers, thread_name_prefix="price-update") as pool:
            futures = {
                product_id: pool.submit(self._apply_one, client_id, product_id, price)
                for product_id, price in parsed.items()
            }

        failed: list[int] = []
        for product_id, future in futures.items():
            exc = future.exception()
            if exc is None:
                continue
            if not isinstance(exc, (SQLAlchemyError, StoreError)):
                raise exc
            logger.warning(
                "custom price update failed",
                extra={"client_id": client_id, "product_id": product_id, "error": str(exc)},
            )
            failed.append(product_id)

        succeeded = len(parsed) - len(failed)
        if succeeded:
            self._notifier.notify("prices")
        if failed:
            raise PartialBatchFailure(sorted(failed), succeeded=succeeded)
        logger.info("applied %d custom prices for client %s", succeeded, client_id)
        return succeeded


__all__ = ["CustomPriceService", "upsert_custom_price"]
