"""Monthly statement aggregation and statement maintenance."""
from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from gelato_ops.core.errors import NotFoundError, StoreError, ValidationError
from gelato_ops.models import AgingCategory, Order, Statement
from gelato_ops.obs import BACKFILL_FAILED_GROUPS, STATEMENTS_CREATED, STATEMENTS_UPDATED
from gelato_ops.services.events import ChangeNotifier, change_notifier
from gelato_ops.services.financials import ZERO, to_money

logger = logging.getLogger(__name__)

GroupKey = tuple[str, int, int]


@dataclass(slots=True)
class BackfillReport:
    """Outcome of one backfill run."""

    statements_created: int = 0
    statements_updated: int = 0
    orders_assigned: int = 0
    failed_groups: list[GroupKey] = field(default_factory=list)

    @property
    def is_noop(self) -> bool:
        return not (self.statements_created or self.statements_updated or self.failed_groups)


@dataclass(slots=True, frozen=True)
class StatementSummary:
    """Statement row joined with the client fields shown in listings."""

    statement: Statement
    business_name: str
    business_address: str
    invoice_count: int


def generate_statement_id(statement_month: date) -> str:
    return f"ST-{statement_month:%Y%m}-{uuid4().hex[:8].upper()}"


def group_orders_by_client_month(orders: Iterable[Order]) -> dict[GroupKey, list[Order]]:
    """Group orders by client and the calendar month of their delivery date."""

    groups: dict[GroupKey, list[Order]] = defaultdict(list)
    for order in orders:
        key = (order.client_id, order.delivery_date.year, order.delivery_date.month)
        groups[key].append(order)
    return dict(groups)


class StatementService:
    """Assigns orders to monthly statements and serves statement records."""

    def __init__(
        self,
        session: Session,
        *,
        notifier: ChangeNotifier | None = None,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[date], str] = generate_statement_id,
    ) -> None:
        self._session = session
        self._notifier = notifier or change_notifier
        self._clock = clock or (lambda: datetime.now(UTC))
        self._id_factory = id_factory

    def backfill_statements(self) -> BackfillReport:
        """Attach every unassigned order to the statement for its client and delivery month.

        Each client-month group runs in its own savepoint. A store error in one
        group is logged and that group is skipped; the others still commit.
        Totals are recomputed from every order on the statement, so repeating
        the run without new orders changes nothing.
        """

        orders = self._session.scalars(
            select(Order).where(Order.statement_id.is_(None)).order_by(Order.id)
        ).all()
        report = BackfillReport()
        if not orders:
            logger.info("no orders awaiting statements")
            return report

        groups = group_orders_by_client_month(orders)
        logger.info("grouped %d orders into %d client-month groups", len(orders), len(groups))

        for key in sorted(groups):
            group = groups[key]
            try:
                statement, created = self._process_group(key, group)
            except SQLAlchemyError:
                logger.exception(
                    "failed to backfill statement group",
                    extra={"client_id": key[0], "year": key[1], "month": key[2]},
                )
                report.failed_groups.append(key)
                BACKFILL_FAILED_GROUPS.inc()
                continue

            report.orders_assigned += len(group)
            if created:
                report.statements_created += 1
                STATEMENTS_CREATED.inc()
            else:
                report.statements_updated += 1
                STATEMENTS_UPDATED.inc()
            logger.info(
                "statement %s now covers %d new orders, total %s",
                statement.statement_id,
                len(group),
                statement.total_amount,
            )

        try:
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise StoreError("Failed to commit statement backfill") from exc
        self._notifier.notify("statements")
        return report

    def _process_group(self, key: GroupKey, orders: list[Order]) -> tuple[Statement, bool]:
        client_id, year, month = key
        statement_month = date(year, month, 1)
        with self._session.begin_nested():
            statement, created = self._get_or_create_statement(client_id, statement_month)
            for order in orders:
                order.statement_id = statement.statement_id
            self._session.flush()
            statement.total_amount = self.recompute_total(statement.statement_id)
            self._session.flush()
        return statement, created

    def _find_statement(self, client_id: str, statement_month: date) -> Statement | None:
        return self._session.scalars(
            select(Statement).where(
                Statement.client_id == client_id,
                Statement.statement_month == statement_month,
            )
        ).one_or_none()

    def _get_or_create_statement(self, client_id: str, statement_month: date) -> tuple[Statement, bool]:
        existing = self._find_statement(client_id, statement_month)
        if existing is not None:
            return existing, False

        statement = Statement(
            statement_id=self._id_factory(statement_month),
            client_id=client_id,
            statement_month=statement_month,
            total_amount=ZERO,
            date_generated=self._clock(),
            aging_category=AgingCategory.DAYS_1_30,
        )
        try:
            with self._session.begin_nested():
                self._session.add(statement)
                self._session.flush()
        except IntegrityError:
            # Another backfill inserted this client-month first; join its statement.
            winner = self._find_statement(client_id, statement_month)
            if winner is None:
                raise
            logger.warning(
                "statement for %s %s created concurrently, reusing %s",
                client_id,
                statement_month.isoformat(),
                winner.statement_id,
            )
            return winner, False
        return statement, True

    def recompute_total(self, statement_id: str) -> Decimal:
        """Sum the totals of every order currently on the statement."""

        amounts = self._session.scalars(
            select(Order.total_amount).where(Order.statement_id == statement_id)
        ).all()
        return sum((to_money(amount) for amount in amounts), ZERO)

    def refresh_total(self, statement_id: str) -> Statement | None:
        """Reset a statement total to the sum of its orders. The caller commits."""

        statement = self._session.get(Statement, statement_id)
        if statement is None:
            return None
        statement.total_amount = self.recompute_total(statement_id)
        self._session.flush()
        return statement

    def list_statements(self) -> list[StatementSummary]:
        statements = self._session.scalars(
            select(Statement)
            .options(joinedload(Statement.client))
            .order_by(Statement.statement_month.desc(), Statement.statement_id)
        ).all()
        counts = dict(
            self._session.execute(
                select(Order.statement_id, func.count(Order.id))
                .where(Order.statement_id.is_not(None))
                .group_by(Order.statement_id)
            ).all()
        )
        summaries: list[StatementSummary] = []
        for statement in statements:
            client = statement.client
            summaries.append(
                StatementSummary(
                    statement=statement,
                    business_name=client.business_name if client is not None else "N/A",
                    business_address=(
                        (client.structured_address or client.delivery_address or "N/A")
                        if client is not None
                        else "N/A"
                    ),
                    invoice_count=int(counts.get(statement.statement_id, 0)),
                )
            )
        return summaries

    def get_statement(self, statement_id: str) -> Statement:
        statement = self._session.get(Statement, statement_id, options=[joinedload(Statement.client)])
        if statement is None:
            raise NotFoundError(f"Statement '{statement_id}' was not found")
        return statement

    def statement_orders(self, statement_id: str) -> list[Order]:
        return list(
            self._session.scalars(
                select(Order)
                .where(Order.statement_id == statement_id)
                .order_by(Order.order_date, Order.id)
            ).all()
        )

    def update_aging_category(self, statement_id: str, category: AgingCategory | str) -> Statement:
        try:
            resolved = AgingCategory(category)
        except ValueError as exc:
            raise ValidationError(f"Unknown aging category '{category}'", field="aging_category") from exc

        statement = self.get_statement(statement_id)
        statement.aging_category = resolved
        try:
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise StoreError("Failed to update aging category") from exc
        self._session.refresh(statement)
        self._notifier.notify("statements")
        return statement


__all__ = [
    "BackfillReport",
    "GroupKey",
    "StatementService",
    "StatementSummary",
    "generate_statement_id",
    "group_orders_by_client_month",
]
