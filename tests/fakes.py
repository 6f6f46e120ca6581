"""In-memory stand-in for the parts of the Supabase client the services use."""

import copy
import re
import uuid
from datetime import UTC, datetime, timedelta
from typing import Any

from postgrest.exceptions import APIError

UNIQUE_KEYS: dict[str, list[tuple[str, ...]]] = {
    "team_members": [("team_id", "user_id")],
    "team_invites": [("token",)],
    "teams": [("invite_code",)],
    "public_shares": [("project_id",), ("token",)],
    "board_shares": [("token",)],
    "profiles": [("user_id",)],
    "item_tags": [("item_id", "tag_id")],
}

# (columns, flag): unique only among rows where the flag column is true
PARTIAL_UNIQUE_KEYS: dict[str, list[tuple[tuple[str, ...], str]]] = {
    "teams": [(("created_by",), "is_personal")],
}

_EPOCH = datetime(2025, 1, 1, tzinfo=UTC)


class FakeResponse:
    def __init__(self, data: list[dict[str, Any]], count: int | None = None) -> None:
        self.data = data
        self.count = count


class FakeQuery:
    """Chainable query mirroring the PostgREST request builder."""

    def __init__(self, db: "FakeSupabase", table: str) -> None:
        self.db = db
        self.table = table
        self.operation = "select"
        self.columns = "*"
        self.count_mode: str | None = None
        self.payload: Any = None
        self.filters: list = []
        self.ordering: tuple[str, bool] | None = None
        self.limit_n: int | None = None
        self.window: tuple[int, int] | None = None

    def select(self, columns: str = "*", count: str | None = None) -> "FakeQuery":
        self.columns = columns
        self.count_mode = count
        return self

    def insert(self, payload: dict | list) -> "FakeQuery":
        self.operation = "insert"
        self.payload = payload
        return self

    def update(self, payload: dict) -> "FakeQuery":
        self.operation = "update"
        self.payload = payload
        return self

    def delete(self) -> "FakeQuery":
        self.operation = "delete"
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(lambda row: row.get(column) != value)
        return self

    def is_(self, column: str, value: str) -> "FakeQuery":
        assert value == "null"
        self.filters.append(lambda row: row.get(column) is None)
        return self

    def ilike(self, column: str, pattern: str) -> "FakeQuery":
        regex = re.compile(
            "".join(".*" if c == "%" else "." if c == "_" else re.escape(c) for c in pattern),
            re.IGNORECASE,
        )
        self.filters.append(lambda row: row.get(column) is not None and regex.fullmatch(row.get(column)) is not None)
        return self

    def in_(self, column: str, values: list) -> "FakeQuery":
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self.ordering = (column, desc)
        return self

    def limit(self, n: int) -> "FakeQuery":
        self.limit_n = n
        return self

    def range(self, start: int, end: int) -> "FakeQuery":
        self.window = (start, end)
        return self

    def _matches(self, row: dict[str, Any]) -> bool:
        return all(f(row) for f in self.filters)

    def _project(self, row: dict[str, Any]) -> dict[str, Any]:
        if self.columns.strip() == "*":
            return copy.deepcopy(row)
        names = [c.strip() for c in self.columns.split(",")]
        return {name: copy.deepcopy(row.get(name)) for name in names}

    def execute(self) -> FakeResponse:
        self.db.check_failure(self.table, self.operation)
        rows = self.db.tables.setdefault(self.table, [])

        if self.operation == "insert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            created = [self.db.insert_row(self.table, item) for item in payload]
            return FakeResponse(copy.deepcopy(created))

        matched = [row for row in rows if self._matches(row)]

        if self.operation == "update":
            for row in matched:
                candidate = {**row, **copy.deepcopy(self.payload)}
                self.db.check_unique(self.table, candidate, ignore_id=row["id"])
                row.update(copy.deepcopy(self.payload))
            return FakeResponse(copy.deepcopy(matched))

        if self.operation == "delete":
            ids = {row["id"] for row in matched}
            self.db.tables[self.table] = [row for row in rows if row["id"] not in ids]
            return FakeResponse(copy.deepcopy(matched))

        total = len(matched)
        if self.ordering:
            column, desc = self.ordering
            matched = sorted(matched, key=lambda r: (r.get(column) is None, r.get(column) or ""), reverse=desc)
        if self.window:
            start, end = self.window
            matched = matched[start:end + 1]
        if self.limit_n is not None:
            matched = matched[:self.limit_n]
        count = total if self.count_mode == "exact" else None
        return FakeResponse([self._project(row) for row in matched], count)


class FakeBucket:
    def __init__(self, storage: "FakeStorage", name: str) -> None:
        self.storage = storage
        self.name = name

    def create_signed_url(self, path: str, expires_in: int) -> dict[str, str]:
        if path in self.storage.broken:
            raise RuntimeError("object not found")
        return {"signedURL": f"https://storage.test/{self.name}/{path}?ttl={expires_in}"}

    def remove(self, paths: list[str]) -> list:
        self.storage.removed.extend(paths)
        return []


class FakeStorage:
    def __init__(self) -> None:
        self.removed: list[str] = []
        self.broken: set[str] = set()

    def from_(self, bucket: str) -> FakeBucket:
        return FakeBucket(self, bucket)


class FakeSupabase:
    """Tables are plain lists of dicts; ids and created_at are assigned on insert."""

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.storage = FakeStorage()
        self.failures: set[tuple[str, str]] = set()
        self._tick = 0

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def fail_on(self, table: str, operation: str) -> None:
        """Make every later `operation` on `table` raise."""
        self.failures.add((table, operation))

    def check_failure(self, table: str, operation: str) -> None:
        if (table, operation) in self.failures:
            raise RuntimeError(f"{operation} on {table} failed")

    def next_timestamp(self) -> str:
        self._tick += 1
        return (_EPOCH + timedelta(seconds=self._tick)).isoformat()

    def check_unique(self, table: str, row: dict[str, Any], ignore_id: str | None = None) -> None:
        keys = [(key, None) for key in UNIQUE_KEYS.get(table, [])] + PARTIAL_UNIQUE_KEYS.get(table, [])
        for key, flag in keys:
            values = tuple(row.get(column) for column in key)
            if any(v is None for v in values) or (flag and not row.get(flag)):
                continue
            for existing in self.tables.get(table, []):
                if existing["id"] == ignore_id or (flag and not existing.get(flag)):
                    continue
                if tuple(existing.get(column) for column in key) == values:
                    raise APIError({
                        "code": "23505",
                        "message": f"duplicate key value violates unique constraint on {table}{key}",
                        "details": None,
                        "hint": None,
                    })

    def insert_row(self, table: str, values: dict[str, Any]) -> dict[str, Any]:
        row = copy.deepcopy(values)
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", self.next_timestamp())
        self.check_unique(table, row)
        self.tables.setdefault(table, []).append(row)
        return row

    def seed(self, table: str, **values: Any) -> dict[str, Any]:
        return copy.deepcopy(self.insert_row(table, values))

    def rows(self, table: str, **filters: Any) -> list[dict[str, Any]]:
        return [
            copy.deepcopy(row)
            for row in self.tables.get(table, [])
            if all(row.get(k) == v for k, v in filters.items())
        ]
