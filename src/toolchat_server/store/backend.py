"""Record store interface and its JSON-file implementation.

The services only talk to the generic ``RecordStore`` interface (query,
insert, delete, count). ``JsonRecordStore`` keeps one JSON file per table in
the configured store directory, which is enough to run the server without an
external database.
"""

import json
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from toolchat_server.errors import StoreError, UniqueConstraintError

logger = logging.getLogger(__name__)

Row = dict[str, Any]


def _matches(row: Row, filters: dict[str, Any] | None) -> bool:
    if not filters:
        return True
    return all(row.get(key) == value for key, value in filters.items())


class RecordStore(ABC):
    """Generic table-oriented record store."""

    @abstractmethod
    def query(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: str | tuple[str, ...] | None = None,
        descending: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Row]:
        """Return rows of ``table`` whose columns equal every filter value.

        Rows keep insertion order unless ``order_by`` names one or more
        columns to sort on.
        """

    @abstractmethod
    def insert(self, table: str, row: Row) -> Row:
        """Insert a row and return it with its assigned integer ``id``.

        Raises:
            UniqueConstraintError: If the row collides with an existing row
                on one of the table's unique keys.
        """

    @abstractmethod
    def delete(self, table: str, filters: dict[str, Any]) -> int:
        """Delete matching rows and return how many were removed."""

    @abstractmethod
    def count(self, table: str, filters: dict[str, Any] | None = None) -> int:
        """Count matching rows."""


class JsonRecordStore(RecordStore):
    """Record store persisting each table as ``<store_dir>/<table>.json``.

    Every operation holds a process-wide lock for its whole read-modify-write
    cycle, so unique keys are enforced atomically with the insert.

    The file layout is:
    {
        "next_id": 3,
        "rows": [{"id": 1, ...}, {"id": 2, ...}]
    }
    """

    def __init__(
        self,
        store_dir: Path,
        unique_keys: dict[str, list[tuple[str, ...]]] | None = None,
    ):
        """Initialize the store.

        Args:
            store_dir: Directory holding the table files. Created if missing.
            unique_keys: Per table, the column tuples that must be unique.
        """
        self.store_dir = store_dir
        self.unique_keys = unique_keys or {}
        self._lock = threading.Lock()
        self.store_dir.mkdir(parents=True, exist_ok=True)

    def _table_path(self, table: str) -> Path:
        return self.store_dir / f"{table}.json"

    def _load(self, table: str) -> dict[str, Any]:
        file_path = self._table_path(table)
        if not file_path.exists():
            return {"next_id": 1, "rows": []}
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read table {table}: {e}")
            raise StoreError(f"Failed to read table '{table}': {e}") from e

    def _save(self, table: str, data: dict[str, Any]) -> None:
        file_path = self._table_path(table)
        tmp_path = file_path.with_suffix(".json.tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            tmp_path.replace(file_path)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to write table {table}: {e}")
            raise StoreError(f"Failed to write table '{table}': {e}") from e

    def query(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: str | tuple[str, ...] | None = None,
        descending: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Row]:
        with self._lock:
            data = self._load(table)

        rows = [row for row in data["rows"] if _matches(row, filters)]

        if order_by is not None:
            columns = (order_by,) if isinstance(order_by, str) else order_by
            rows.sort(
                key=lambda row: tuple(row.get(column) for column in columns),
                reverse=descending,
            )

        if offset:
            rows = rows[offset:]
        if limit is not None:
            rows = rows[:limit]

        logger.debug(f"Query on {table} returned {len(rows)} rows")
        return rows

    def insert(self, table: str, row: Row) -> Row:
        with self._lock:
            data = self._load(table)

            for columns in self.unique_keys.get(table, []):
                key = tuple(row.get(column) for column in columns)
                for existing in data["rows"]:
                    if tuple(existing.get(column) for column in columns) == key:
                        raise UniqueConstraintError(table, columns)

            stored = {**row, "id": data["next_id"]}
            data["rows"].append(stored)
            data["next_id"] += 1
            self._save(table, data)

        logger.debug(f"Inserted row {stored['id']} into {table}")
        return dict(stored)

    def delete(self, table: str, filters: dict[str, Any]) -> int:
        with self._lock:
            data = self._load(table)
            kept = [row for row in data["rows"] if not _matches(row, filters)]
            deleted = len(data["rows"]) - len(kept)
            if deleted:
                data["rows"] = kept
                self._save(table, data)

        logger.debug(f"Deleted {deleted} rows from {table}")
        return deleted

    def count(self, table: str, filters: dict[str, Any] | None = None) -> int:
        with self._lock:
            data = self._load(table)
        return sum(1 for row in data["rows"] if _matches(row, filters))
