"""In-memory stand-in for the Supabase table query builder.

Supports the subset of the builder the app.db modules use: select with a
column list, eq/neq/in_/gte filters, order, limit, insert, upsert with
on_conflict and ignore_duplicates, update and delete.
"""

from copy import deepcopy
from datetime import datetime, timezone
from typing import Any, Dict, List
from uuid import uuid4


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _comparable(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return value
    return value


class FakeResponse:
    def __init__(self, data: List[Dict[str, Any]]):
        self.data = data
        self.count = len(data)


class FakeQuery:
    """One chained query against a single table."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self.action = "select"
        self.columns = "*"
        self.filters: List[Any] = []
        self.orders: List[tuple] = []
        self.row_limit: int | None = None
        self.payload: Any = None
        self.on_conflict: str | None = None
        self.ignore_duplicates = False

    # Actions

    def select(self, columns: str = "*"):
        self.action = "select"
        self.columns = columns
        return self

    def insert(self, payload):
        self.action = "insert"
        self.payload = payload
        return self

    def upsert(self, payload, on_conflict: str | None = None, ignore_duplicates: bool = False):
        self.action = "upsert"
        self.payload = payload
        self.on_conflict = on_conflict
        self.ignore_duplicates = ignore_duplicates
        return self

    def update(self, payload):
        self.action = "update"
        self.payload = payload
        return self

    def delete(self):
        self.action = "delete"
        return self

    # Filters and modifiers

    def eq(self, column: str, value: Any):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column: str, value: Any):
        self.filters.append(lambda row: row.get(column) != value)
        return self

    def in_(self, column: str, values: List[Any]):
        allowed = list(values)
        self.filters.append(lambda row: row.get(column) in allowed)
        return self

    def gte(self, column: str, value: Any):
        bound = _comparable(value)
        self.filters.append(
            lambda row: row.get(column) is not None and _comparable(row.get(column)) >= bound
        )
        return self

    def order(self, column: str, desc: bool = False):
        self.orders.append((column, desc))
        return self

    def limit(self, count: int):
        self.row_limit = count
        return self

    # Execution

    def _matches(self, row: Dict[str, Any]) -> bool:
        return all(f(row) for f in self.filters)

    def _project(self, row: Dict[str, Any]) -> Dict[str, Any]:
        if self.columns.strip() == "*":
            return deepcopy(row)
        names = [c.strip() for c in self.columns.split(",") if c.strip()]
        return {name: deepcopy(row.get(name)) for name in names}

    def _new_row(self, values: Dict[str, Any]) -> Dict[str, Any]:
        row = {"id": str(uuid4()), "created_at": _now_iso()}
        row.update(deepcopy(values))
        return row

    def execute(self) -> FakeResponse:
        self.db.calls.append((self.table_name, self.action))
        if self.table_name in self.db.failing_tables:
            raise RuntimeError(f"{self.table_name} unavailable")

        rows = self.db.tables.setdefault(self.table_name, [])

        if self.action == "select":
            selected = [r for r in rows if self._matches(r)]
            # Stable sorts applied last-key-first give multi-column ordering
            for column, desc in reversed(self.orders):
                selected.sort(
                    key=lambda r: (r.get(column) is None, _comparable(r.get(column))),
                    reverse=desc,
                )
            if self.row_limit is not None:
                selected = selected[: self.row_limit]
            return FakeResponse([self._project(r) for r in selected])

        if self.action == "insert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = [self._new_row(values) for values in payload]
            rows.extend(inserted)
            return FakeResponse(deepcopy(inserted))

        if self.action == "upsert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            keys = [k.strip() for k in (self.on_conflict or "id").split(",")]
            written = []
            for values in payload:
                existing = next(
                    (r for r in rows if all(r.get(k) == values.get(k) for k in keys)),
                    None,
                )
                if existing is None:
                    row = self._new_row(values)
                    rows.append(row)
                    written.append(row)
                elif not self.ignore_duplicates:
                    existing.update(deepcopy(values))
                    written.append(existing)
            return FakeResponse(deepcopy(written))

        if self.action == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(deepcopy(self.payload))
                    updated.append(row)
            return FakeResponse(deepcopy(updated))

        if self.action == "delete":
            removed = [r for r in rows if self._matches(r)]
            self.db.tables[self.table_name] = [r for r in rows if not self._matches(r)]
            return FakeResponse(removed)

        raise ValueError(f"Unsupported action {self.action}")


class FakeSupabase:
    """In-memory client exposing ``table(name)``."""

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.calls: List[tuple] = []
        self.failing_tables: set[str] = set()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def seed(self, table: str, *rows: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Insert rows directly, filling id and created_at when missing."""
        stored = []
        for values in rows:
            row = {"id": str(uuid4()), "created_at": _now_iso()}
            row.update(values)
            self.tables.setdefault(table, []).append(row)
            stored.append(row)
        return stored

    def rows(self, table: str) -> List[Dict[str, Any]]:
        return self.tables.get(table, [])
