"""Header and footer template storage and selection."""
from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gelato_ops.core.errors import NotFoundError, StoreError, ValidationError
from gelato_ops.models import FooterTemplate, HeaderTemplate
from gelato_ops.services.events import ChangeNotifier, change_notifier

logger = logging.getLogger(__name__)

TemplateT = TypeVar("TemplateT", HeaderTemplate, FooterTemplate)


@dataclass(slots=True)
class TemplateSelection:
    """Currently selected template id for one document screen.

    The initial selection is the default template, else the first listed
    one, else nothing. Deleting the selected template moves the selection to
    the first remaining template.
    """

    selected_id: int | None = None

    @classmethod
    def initial(cls, templates: Sequence[HeaderTemplate | FooterTemplate]) -> "TemplateSelection":
        for template in templates:
            if template.is_default:
                return cls(template.id)
        return cls(templates[0].id if templates else None)

    def select(self, template_id: int | None, templates: Sequence[HeaderTemplate | FooterTemplate]) -> None:
        if template_id is not None and template_id not in {template.id for template in templates}:
            raise NotFoundError(f"Template {template_id} was not found")
        self.selected_id = template_id

    def on_deleted(
        self, deleted_id: int, remaining: Sequence[HeaderTemplate | FooterTemplate]
    ) -> None:
        if self.selected_id != deleted_id:
            return
        self.selected_id = remaining[0].id if remaining else None

    def resolve(
        self, templates: Sequence[TemplateT]
    ) -> TemplateT | None:
        for template in templates:
            if template.id == self.selected_id:
                return template
        return None


class TemplateStore(Generic[TemplateT]):
    """CRUD over one template table; at most one row is flagged default."""

    def __init__(
        self,
        session: Session,
        model: type[TemplateT],
        *,
        notifier: ChangeNotifier | None = None,
    ) -> None:
        self._session = session
        self._model = model
        self._notifier = notifier or change_notifier

    def list(self) -> list[TemplateT]:
        return list(
            self._session.scalars(
                select(self._model).order_by(self._model.is_default.desc(), self._model.id)
            ).all()
        )

    def get(self, template_id: int) -> TemplateT:
        template = self._session.get(self._model, template_id)
        if template is None:
            raise NotFoundError(f"Template {template_id} was not found")
        return template

    def get_optional(self, template_id: int | None) -> TemplateT | None:
        """Explicit id, else the initial selection; ``None`` when no templates exist."""

        templates = self.list()
        selection = TemplateSelection.initial(templates)
        if template_id is not None:
            selection.select(template_id, templates)
        return selection.resolve(templates)

    def _apply_fields(self, template: TemplateT, fields: Mapping[str, object]) -> None:
        for key, value in fields.items():
            if key == "option_name":
                if not value or not str(value).strip():
                    raise ValidationError("Template name is required", field="option_name")
                template.option_name = str(value).strip()
            elif key.startswith("line") and key[4:].isdigit() and 1 <= int(key[4:]) <= self._model.LINE_COUNT:
                setattr(template, key, value or None)
            elif key != "is_default":
                raise ValidationError(f"Unknown template field '{key}'", field=key)

    def _clear_defaults(self, keep_id: int | None) -> None:
        statement = update(self._model).values(is_default=False)
        if keep_id is not None:
            statement = statement.where(self._model.id != keep_id)
        self._session.execute(statement)

    def _commit(self, action: str) -> None:
        try:
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise StoreError(f"Failed to {action} template") from exc
        self._notifier.notify("templates")

    def create(self, fields: Mapping[str, object]) -> TemplateT:
        template = self._model(option_name="", is_default=bool(fields.get("is_default", False)))
        self._apply_fields(template, {"option_name": fields.get("option_name"), **fields})
        self._session.add(template)
        try:
            self._session.flush()
            if template.is_default:
                self._clear_defaults(template.id)
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise StoreError("Failed to create template") from exc
        self._commit("create")
        self._session.refresh(template)
        return template

    def update(self, template_id: int, fields: Mapping[str, object]) -> TemplateT:
        template = self.get(template_id)
        self._apply_fields(template, fields)
        if "is_default" in fields:
            template.is_default = bool(fields["is_default"])
            if template.is_default:
                self._clear_defaults(template.id)
        self._commit("update")
        self._session.refresh(template)
        return template

    def delete(self, template_id: int, *, selected_id: int | None = None) -> int | None:
        """Delete a template and return the selection that follows from ``selected_id``."""

        template = self.get(template_id)
        self._session.delete(template)
        self._commit("delete")
        logger.info("deleted %s %s", self._model.__tablename__, template_id)
        selection = TemplateSelection(selected_id)
        selection.on_deleted(template_id, self.list())
        return selection.selected_id


def header_store(session: Session, **kwargs) -> TemplateStore[HeaderTemplate]:
    return TemplateStore(session, HeaderTemplate, **kwargs)


def footer_store(session: Session, **kwargs) -> TemplateStore[FooterTemplate]:
    return TemplateStore(session, FooterTemplate, **kwargs)


__all__ = ["TemplateSelection", "TemplateStore", "footer_store", "header_store"]
