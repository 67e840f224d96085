from __future__ import annotations

from typing import Any, Dict, Generic, List, Type, TypeVar

from sqlmodel import SQLModel, func, select

from social_transport.errors import NotFoundError, ValidationError
from social_transport.models.db import Database
from social_transport.utils.logging_config import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=SQLModel)


class RegistryService(Generic[ModelT]):
    """CRUD for persons, drivers and destinations.

    Deleting a row removes every transport that references it; the cascade
    is done by the database foreign keys.
    """

    def __init__(
        self,
        db: Database,
        model: Type[ModelT],
        label: str,
        required: tuple = ("name",),
        non_negative: tuple = (),
    ) -> None:
        self._db = db
        self._model = model
        self.label = label
        self._required = required
        self._non_negative = non_negative

    def list(self) -> List[ModelT]:
        with self._db.session() as session:
            statement = select(self._model).order_by(self._model.created_at.desc())
            return list(session.exec(statement).all())

    def get(self, item_id: str) -> ModelT:
        with self._db.session() as session:
            item = session.get(self._model, item_id)
            if not item:
                raise NotFoundError(f"{self.label} not found")
            return item

    def count(self) -> int:
        with self._db.session() as session:
            return session.exec(select(func.count()).select_from(self._model)).one()

    def create(self, **fields: Any) -> ModelT:
        values = self._clean(fields)
        with self._db.transaction() as session:
            item = self._model(**values)
            session.add(item)
            session.flush()
            session.refresh(item)
        logger.info(f"{self.label.capitalize()} created: id={item.id}")
        return item

    def update(self, item_id: str, **fields: Any) -> ModelT:
        """Replace every mutable field of one row."""
        values = self._clean(fields)
        with self._db.transaction() as session:
            item = session.get(self._model, item_id)
            if not item:
                raise NotFoundError(f"{self.label} not found")
            for key, value in values.items():
                setattr(item, key, value)
            session.add(item)
            session.flush()
            session.refresh(item)
        logger.info(f"{self.label.capitalize()} updated: id={item_id}")
        return item

    def delete(self, item_id: str) -> None:
        with self._db.transaction() as session:
            item = session.get(self._model, item_id)
            if not item:
                raise NotFoundError(f"{self.label} not found")
            session.delete(item)
        logger.info(f"{self.label.capitalize()} deleted: id={item_id}")

    def _clean(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        values = {}
        for key, value in fields.items():
            if key in ("id", "created_at"):
                continue
            if isinstance(value, str):
                value = value.strip() or None
            values[key] = value
        for key in self._required:
            if values.get(key) in (None, ""):
                raise ValidationError(f"{key} is required")
        for key in self._non_negative:
            if values.get(key) is not None and values[key] < 0:
                raise ValidationError(f"{key} must not be negative")
        return values
