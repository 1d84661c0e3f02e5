"""Order status changes, deletion and invoice loading."""
from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from gelato_ops.core.errors import NotFoundError, StoreError, ValidationError
from gelato_ops.models import Order, OrderStatus
from gelato_ops.services.events import ChangeNotifier, change_notifier
from gelato_ops.services.statements import StatementService

logger = logging.getLogger(__name__)


def _resolve_status(value: OrderStatus | str) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError as exc:
        raise ValidationError(f"Unknown order status '{value}'", field="status") from exc


def get_order(session: Session, order_id: int) -> Order:
    """Load an order with its client and line items."""

    order = session.get(
        Order,
        order_id,
        options=[joinedload(Order.client), selectinload(Order.items)],
    )
    if order is None:
        raise NotFoundError(f"Order {order_id} was not found")
    return order


def update_order_status(
    session: Session,
    order_id: int,
    status: OrderStatus | str,
    *,
    notifier: ChangeNotifier | None = None,
) -> Order:
    resolved = _resolve_status(status)
    order = get_order(session, order_id)
    order.status = resolved
    try:
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        raise StoreError(f"Failed to update order {order_id}") from exc
    session.refresh(order)
    (notifier or change_notifier).notify("orders")
    return order


def delete_order(session: Session, order_id: int, *, notifier: ChangeNotifier | None = None) -> None:
    """Delete an order; its line items go with it and its statement total is recomputed."""

    order = get_order(session, order_id)
    statement_id = order.statement_id
    session.delete(order)
    try:
        session.flush()
        if statement_id is not None:
            StatementService(session, notifier=notifier).refresh_total(statement_id)
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        raise StoreError(f"Failed to delete order {order_id}") from exc
    logger.info("deleted order %s", order_id)
    notifier = notifier or change_notifier
    notifier.notify("orders")
    if statement_id is not None:
        notifier.notify("statements")


__all__ = ["delete_order", "get_order", "update_order_status"]
