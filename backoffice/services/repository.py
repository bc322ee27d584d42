# backoffice/services/repository.py
"""
Generic CRUD operations over one entity table.

Each entity module (car_service, student_service) describes its table with an
EntityDefinition; EntityRepository turns that description into SQL run through
the Store. Uniqueness is enforced by the UNIQUE constraint in the table: the
IntegrityError raised by a colliding INSERT/UPDATE becomes a ConflictError.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Mapping, Optional, Union

from sqlalchemy.exc import IntegrityError

from backoffice.database import ExecuteResult, Store, timestamp
from backoffice.exceptions import ConflictError, NotFoundError, ValidationFailedError
from backoffice.utils.logger import get_logger

logger = get_logger(__name__)

RECENT_LIMIT = 5


@dataclass(frozen=True)
class EntityDefinition:
    name: str                                   # singular label used in messages, e.g. "Car"
    table: str
    columns: tuple[str, ...]                    # writable columns, in insert order
    required: tuple[str, ...]
    defaults: Mapping[str, Union[Any, Callable[[], Any]]] = field(default_factory=dict)
    choices: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    unique: Optional[str] = None
    search_columns: tuple[str, ...] = ()
    filters: tuple[str, ...] = ()
    breakdowns: tuple[str, ...] = ()            # group-by columns for the dashboard


def _previous_timestamp(value) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


class EntityRepository:
    def __init__(self, definition: EntityDefinition):
        self.definition = definition

    # ── Helpers ──────────────────────────────────────────────────────────
    def _clean(self, data: Mapping[str, Any]) -> dict:
        """Keep writable columns only. Empty strings count as not provided."""
        return {
            column: (None if value == "" else value)
            for column, value in data.items()
            if column in self.definition.columns
        }

    def _check_choices(self, values: Mapping[str, Any]):
        for column, allowed in self.definition.choices.items():
            value = values.get(column)
            if value is not None and value not in allowed:
                raise ValidationFailedError(
                    f"Invalid {column} '{value}'. Expected one of: {', '.join(allowed)}",
                    [column],
                )

    def _default(self, column: str):
        default = self.definition.defaults.get(column)
        return default() if callable(default) else default

    def _next_updated_at(self, previous) -> str:
        # updated_at must strictly increase, even for two updates in the same microsecond
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        before = _previous_timestamp(previous)
        if before is not None and now <= before:
            now = before + timedelta(microseconds=1)
        return timestamp(now)

    def _write(self, store: Store, sql: str, params: dict) -> ExecuteResult:
        unique = self.definition.unique
        try:
            result = store.execute(sql, params)
        except IntegrityError as e:
            message = str(e.orig)
            if unique and "UNIQUE" in message and f"{self.definition.table}.{unique}" in message:
                raise ConflictError(self.definition.name, unique, params.get(unique)) from e
            raise
        if not result.durable:
            logger.debug(f"{self.definition.table}: write kept in memory only")
        return result

    # ── Operations ───────────────────────────────────────────────────────
    def list(self, store: Store, search: Optional[str] = None, **filters) -> list[dict]:
        d = self.definition
        unknown = set(filters) - set(d.filters)
        if unknown:
            raise ValueError(f"Unknown {d.table} filters: {', '.join(sorted(unknown))}")

        clauses, params = [], {}
        if search:
            clauses.append("(" + " OR ".join(f"{c} LIKE :search" for c in d.search_columns) + ")")
            params["search"] = f"%{search}%"
        for column, value in filters.items():
            if value is None or value == "":
                continue
            clauses.append(f"{column} = :{column}")
            params[column] = value

        where = " WHERE " + " AND ".join(clauses) if clauses else ""
        return store.query_all(f"SELECT * FROM {d.table}{where} ORDER BY created_at DESC, id DESC", params)

    def get(self, store: Store, entity_id: int) -> Optional[dict]:
        return store.query_one(f"SELECT * FROM {self.definition.table} WHERE id = :id", {"id": entity_id})

    def create(self, store: Store, data: Mapping[str, Any]) -> dict:
        d = self.definition
        values = self._clean(data)
        missing = [column for column in d.required if values.get(column) is None]
        if missing:
            raise ValidationFailedError.missing(missing)
        self._check_choices(values)

        row = {}
        for column in d.columns:
            value = values.get(column)
            row[column] = self._default(column) if value is None else value
        row["created_at"] = row["updated_at"] = timestamp()

        columns = list(row)
        sql = (
            f"INSERT INTO {d.table} ({', '.join(columns)}) "
            f"VALUES ({', '.join(':' + c for c in columns)})"
        )
        result = self._write(store, sql, row)
        logger.info(f"{d.name} {result.last_row_id} created")
        return self.get(store, result.last_row_id)

    def update(self, store: Store, entity_id: int, data: Mapping[str, Any]) -> dict:
        """Partial update: attributes left out (or null) keep their stored value."""
        d = self.definition
        existing = self.get(store, entity_id)
        if existing is None:
            raise NotFoundError(d.name, entity_id)

        values = {k: v for k, v in self._clean(data).items() if v is not None}
        self._check_choices(values)
        values["updated_at"] = self._next_updated_at(existing.get("updated_at"))

        assignments = ", ".join(f"{column} = :{column}" for column in values)
        self._write(store, f"UPDATE {d.table} SET {assignments} WHERE id = :id", {**values, "id": entity_id})
        logger.info(f"{d.name} {entity_id} updated ({', '.join(sorted(values))})")
        return self.get(store, entity_id)

    def delete(self, store: Store, entity_id: int):
        d = self.definition
        if self.get(store, entity_id) is None:
            raise NotFoundError(d.name, entity_id)
        self._write(store, f"DELETE FROM {d.table} WHERE id = :id", {"id": entity_id})
        logger.info(f"{d.name} {entity_id} deleted")

    def stats(self, store: Store) -> dict:
        """Dashboard aggregates: totals, status counts, breakdowns, latest rows."""
        d = self.definition
        total = store.query_one(f"SELECT COUNT(*) AS count FROM {d.table}")["count"]

        by_status = {status: 0 for status in d.choices.get("status", ())}
        for row in store.query_all(f"SELECT status, COUNT(*) AS count FROM {d.table} GROUP BY status"):
            if row["status"] is not None:
                by_status[row["status"]] = row["count"]

        breakdowns = {
            column: store.query_all(
                f"SELECT {column} AS value, COUNT(*) AS count FROM {d.table} "
                f"WHERE {column} IS NOT NULL GROUP BY {column} ORDER BY count DESC, value"
            )
            for column in d.breakdowns
        }
        recent = store.query_all(
            f"SELECT * FROM {d.table} ORDER BY created_at DESC, id DESC LIMIT :limit",
            {"limit": RECENT_LIMIT},
        )
        return {
            "entity": d.table,
            "total": total,
            "by_status": by_status,
            "breakdowns": breakdowns,
            "recent": recent,
        }
