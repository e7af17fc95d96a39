"""Entity store: the generic persistence interface used by every component.

Each public method opens its own session and commits or rolls back as a
unit, so a call is atomic and an abandoned request never leaves a partial
write behind. Filters are ``{column: value}`` equality maps; a list, tuple
or set value turns into ``IN``.

Driver failures are re-raised as StoreError with the original exception
chained; nothing here retries.
"""

import logging
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

from sqlalchemy import delete, func, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, SQLModel, select, text

from topichub.core.exceptions import (
    AppException,
    ConflictError,
    InvalidArgumentError,
    StoreError,
)
from topichub.core.query import Pagination

logger = logging.getLogger("topichub.store")

Filters = Mapping[str, Any]

# Dialects with INSERT ... ON CONFLICT.
_NATIVE_UPSERT = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}

_TRUE_STRINGS = {"1", "true", "t", "yes", "y", "on"}


def _column(model: type[SQLModel], name: str):
    try:
        return model.__table__.c[name]  # type: ignore[attr-defined]
    except KeyError as e:
        raise InvalidArgumentError(f"Unknown field: {name}") from e


def _coerce(column, value: Any) -> Any:
    """Convert query-string values to the column's Python type."""
    if value is None:
        return None
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return value
    if isinstance(value, python_type):
        return value
    if python_type is bool and isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    try:
        return python_type(value)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(f"Invalid value for {column.name}") from e


def _where(model: type[SQLModel], filters: Filters | None) -> list:
    clauses = []
    for name, value in (filters or {}).items():
        column = _column(model, name)
        if isinstance(value, (list, tuple, set, frozenset)):
            clauses.append(column.in_([_coerce(column, v) for v in value]))
        else:
            clauses.append(column == _coerce(column, value))
    return clauses


class EntityStore:
    """Find / insert / upsert / update / delete over SQLModel tables."""

    def __init__(self, engine: Engine):
        self.engine = engine

    @contextmanager
    def _session(self) -> Iterator[Session]:
        try:
            with Session(self.engine, expire_on_commit=False) as session:
                yield session
        except AppException:
            raise
        except SQLAlchemyError as e:
            logger.error("Store operation failed: %s", e.__class__.__name__)
            raise StoreError() from e

    def create_schema(self) -> None:
        """Create missing tables for every registered model."""
        # Registers the table models in SQLModel.metadata.
        import topichub.models  # noqa: F401

        try:
            SQLModel.metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            raise StoreError("Could not create database schema") from e

    def dispose(self) -> None:
        self.engine.dispose()

    def ping(self) -> None:
        """Raise StoreError unless the database answers."""
        with self._session() as session:
            session.exec(text("SELECT 1"))  # type: ignore[call-overload]

    def find[M: SQLModel](
        self,
        model: type[M],
        filters: Filters | None = None,
        *,
        pagination: Pagination | None = None,
    ) -> list[M]:
        statement = select(model).where(*_where(model, filters))
        if pagination is not None:
            for key in pagination.sort:
                column = _column(model, key.field)
                statement = statement.order_by(
                    column.desc() if key.descending else column.asc()
                )
            if pagination.offset:
                statement = statement.offset(pagination.offset)
            if pagination.limit:
                statement = statement.limit(pagination.limit)
        with self._session() as session:
            return list(session.exec(statement).all())

    def find_one[M: SQLModel](self, model: type[M], filters: Filters) -> M | None:
        statement = select(model).where(*_where(model, filters)).limit(1)
        with self._session() as session:
            return session.exec(statement).first()

    def count(self, model: type[SQLModel], filters: Filters | None = None) -> int:
        statement = (
            select(func.count()).select_from(model).where(*_where(model, filters))
        )
        with self._session() as session:
            return session.exec(statement).one()

    def insert[M: SQLModel](self, record: M) -> M:
        with self._session() as session:
            session.add(record)
            session.commit()
            session.refresh(record)
            return record

    def upsert[M: SQLModel](
        self,
        record: M,
        *,
        conflict_keys: Sequence[str],
        update_fields: Sequence[str] = (),
    ) -> M:
        """Insert ``record`` unless a row with the same conflict keys exists.

        With ``update_fields`` the existing row gets those columns from
        ``record``; without them this is insert-if-absent. Returns the row
        as stored. ``conflict_keys`` must be covered by a unique constraint.
        """
        model = type(record)
        values = record.model_dump()
        key_filter = {key: values[key] for key in conflict_keys}
        insert = _NATIVE_UPSERT.get(self.engine.dialect.name)

        with self._session() as session:
            if insert is not None:
                statement = insert(model).values(**values)
                if update_fields:
                    statement = statement.on_conflict_do_update(
                        index_elements=list(conflict_keys),
                        set_={field: values[field] for field in update_fields},
                    )
                else:
                    statement = statement.on_conflict_do_nothing(
                        index_elements=list(conflict_keys)
                    )
                session.exec(statement)  # type: ignore[call-overload]
            else:
                self._check_then_write(session, record, key_filter, update_fields)
            stored = session.exec(
                select(model).where(*_where(model, key_filter))
            ).one()
            session.commit()
            return stored

    @staticmethod
    def _check_then_write(
        session: Session,
        record: SQLModel,
        key_filter: Filters,
        update_fields: Sequence[str],
    ) -> None:
        model = type(record)
        existing = session.exec(select(model).where(*_where(model, key_filter))).first()
        try:
            if existing is None:
                session.add(record)
            else:
                for field in update_fields:
                    setattr(existing, field, getattr(record, field))
                session.add(existing)
            session.flush()
        except IntegrityError as e:
            session.rollback()
            raise ConflictError(f"{model.__name__} already exists") from e

    def update(
        self, model: type[SQLModel], filters: Filters, values: Mapping[str, Any]
    ) -> int:
        """Set ``values`` on matching rows and return how many matched."""
        for name in values:
            _column(model, name)
        statement = update(model).where(*_where(model, filters)).values(**values)
        with self._session() as session:
            result = session.exec(statement)  # type: ignore[call-overload]
            session.commit()
            return result.rowcount

    def delete(
        self,
        model: type[SQLModel],
        filters: Filters,
        *,
        dependents: Sequence[tuple[type[SQLModel], str]] = (),
    ) -> int:
        """Delete matching rows and return how many were removed.

        ``dependents`` lists ``(table, foreign_key_column)`` pairs whose rows
        referencing the deleted primary keys go in the same transaction.
        """
        clauses = _where(model, filters)
        with self._session() as session:
            if dependents:
                table = model.__table__  # type: ignore[attr-defined]
                primary_key = table.primary_key.columns.values()[0]
                ids = list(session.exec(select(primary_key).where(*clauses)).all())
                for dependent, column_name in dependents if ids else ():
                    column = _column(dependent, column_name)
                    session.exec(delete(dependent).where(column.in_(ids)))  # type: ignore[call-overload]
            result = session.exec(delete(model).where(*clauses))  # type: ignore[call-overload]
            session.commit()
            return result.rowcount
