"""
In-memory data store.

Mirrors the error semantics of SupabaseDataStore without a network, for
tests and offline runs. Unique columns are enforced per table so
duplicate inserts fail the same way a unique index would.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from .exceptions import DuplicateKeyError, RowNotFoundError, StoreError


class InMemoryDataStore:
    """Dict-backed implementation of IDataStore."""

    def __init__(self, unique_columns: Optional[dict[str, list[str]]] = None):
        """
        Args:
            unique_columns: table -> columns that must be unique when not null.
        """
        self._tables: dict[str, list[dict[str, Any]]] = {}
        self._unique = unique_columns or {}
        self._token: Optional[str] = None
        # (operation, table, filters-or-record) for every call, in order
        self.calls: list[tuple[str, str, dict[str, Any]]] = []
        self.authorization_history: list[Optional[str]] = []

    @property
    def authorization(self) -> Optional[str]:
        return self._token

    def set_authorization(self, token: str) -> None:
        self._token = token
        self.authorization_history.append(token)

    def clear_authorization(self) -> None:
        self._token = None
        self.authorization_history.append(None)

    def rows(self, table: str) -> list[dict[str, Any]]:
        """Return a copy of every row in a table."""
        return [dict(row) for row in self._tables.get(table, [])]

    def seed(self, table: str, *rows: dict[str, Any]) -> None:
        """Add rows directly, bypassing constraints and the call log."""
        self._tables.setdefault(table, []).extend(dict(row) for row in rows)

    def count(self, operation: str, table: Optional[str] = None) -> int:
        """Count logged calls of one operation, optionally for one table."""
        return sum(
            1
            for op, tbl, _ in self.calls
            if op == operation and (table is None or tbl == table)
        )

    async def query(
        self,
        table: str,
        filters: dict[str, Any],
        columns: str = "*",
    ) -> dict[str, Any]:
        self.calls.append(("query", table, dict(filters)))
        matches = self._match(table, filters)
        if not matches:
            raise RowNotFoundError(table)
        if len(matches) > 1:
            raise StoreError(
                "JSON object requested, multiple rows returned",
                code="PGRST116",
                table=table,
            )
        return self._project(matches[0], columns)

    async def insert(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("insert", table, dict(record)))
        rows = self._tables.setdefault(table, [])
        for column in self._unique.get(table, []):
            value = record.get(column)
            if value is not None and any(row.get(column) == value for row in rows):
                raise DuplicateKeyError(
                    table,
                    f'duplicate key value violates unique constraint "{table}_{column}_key"',
                )
        row = dict(record)
        row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        rows.append(row)
        return dict(row)

    async def update(
        self,
        table: str,
        filters: dict[str, Any],
        patch: dict[str, Any],
    ) -> list[dict[str, Any]]:
        self.calls.append(("update", table, dict(filters)))
        targets = self._match(table, filters)
        others = [row for row in self._tables.get(table, []) if row not in targets]
        for column in self._unique.get(table, []):
            value = patch.get(column)
            if value is not None and any(row.get(column) == value for row in others):
                raise DuplicateKeyError(
                    table,
                    f'duplicate key value violates unique constraint "{table}_{column}_key"',
                )
        updated = []
        for row in targets:
            row.update(patch)
            updated.append(dict(row))
        return updated

    async def delete(self, table: str, filters: dict[str, Any]) -> None:
        self.calls.append(("delete", table, dict(filters)))
        doomed = self._match(table, filters)
        self._tables[table] = [
            row for row in self._tables.get(table, []) if row not in doomed
        ]

    def _match(self, table: str, filters: dict[str, Any]) -> list[dict[str, Any]]:
        return [
            row
            for row in self._tables.get(table, [])
            if all(row.get(column) == value for column, value in filters.items())
        ]

    @staticmethod
    def _project(row: dict[str, Any], columns: str) -> dict[str, Any]:
        if columns.strip() == "*":
            return dict(row)
        wanted = [c.strip() for c in columns.split(",")]
        return {c: row.get(c) for c in wanted}
