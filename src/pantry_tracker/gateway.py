"""Persistence gateway for Pantry Tracker.

The gateway is the boundary to whatever store holds the user's records.
Any store that offers list/insert/update/delete over the tables below can
back the session; JSONGateway keeps one JSON file per table on local disk.
Use create_gateway() to build the configured gateway.
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Protocol
from uuid import UUID, uuid4

from .errors import NotFoundError, UpstreamError

logger = logging.getLogger(__name__)


class Table(str, Enum):
    """Tables the session reads and writes."""

    PANTRY_ITEMS = "pantry_items"
    SHOPPING_LIST = "shopping_list"
    RECOMMENDATIONS = "recommendations"
    PRICE_SERIES = "price_series"


_GENERATED_FIELDS = ("id", "user_id", "created_at", "updated_at")


class PersistenceGateway(Protocol):
    """Protocol defining the persistence interface."""

    def list(self, table: Table) -> list[dict[str, Any]]: ...
    def insert(self, table: Table, record: dict[str, Any]) -> dict[str, Any]: ...
    def update(
        self, table: Table, record_id: UUID | str, partial: dict[str, Any]
    ) -> dict[str, Any]: ...
    def delete(self, table: Table, record_id: UUID | str) -> bool: ...


class JSONEncoder(json.JSONEncoder):
    """Custom JSON encoder for our data types."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, UUID):
            return str(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, date):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.value
        return super().default(obj)


class JSONGateway:
    """Stores each table as a JSON array of records, scoped by user."""

    def __init__(self, data_dir: Path | None = None, user_id: str = "local"):
        """Initialize the gateway.

        Args:
            data_dir: Directory for table files. Defaults to ./data
            user_id: Identity whose records this gateway reads and writes
        """
        self.data_dir = data_dir or Path.cwd() / "data"
        self.user_id = user_id
        self._ensure_directories()

    def _ensure_directories(self) -> None:
        """Create the data directory if it doesn't exist."""
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise UpstreamError(f"Cannot create data directory {self.data_dir}: {e}") from e

    def _table_path(self, table: Table) -> Path:
        """Path to a table file."""
        return self.data_dir / f"{Table(table).value}.json"

    def _load(self, table: Table) -> list[dict[str, Any]]:
        path = self._table_path(table)
        if not path.exists():
            return []

        try:
            with open(path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise UpstreamError(f"Could not read {Table(table).value}: {e}") from e

        if not isinstance(data, list):
            raise UpstreamError(f"Could not read {Table(table).value}: expected a list of records")
        return data

    def _save(self, table: Table, records: list[dict[str, Any]]) -> None:
        path = self._table_path(table)
        try:
            with open(path, "w") as f:
                json.dump(records, f, cls=JSONEncoder, indent=2)
        except (OSError, TypeError) as e:
            raise UpstreamError(f"Could not write {Table(table).value}: {e}") from e

    def _owned(self, record: dict[str, Any]) -> bool:
        return record.get("user_id") == self.user_id

    def list(self, table: Table) -> list[dict[str, Any]]:
        """List the user's records, newest created first."""
        records = [r for r in self._load(table) if self._owned(r)]
        records.reverse()
        records.sort(key=lambda r: r.get("created_at", ""), reverse=True)
        logger.debug("Listed %d records from %s", len(records), Table(table).value)
        return records

    def insert(self, table: Table, record: dict[str, Any]) -> dict[str, Any]:
        """Store a record with a generated id and timestamps.

        Returns:
            The stored record
        """
        now = datetime.now().isoformat()
        stored = {k: v for k, v in record.items() if k not in _GENERATED_FIELDS}
        stored.update(
            {
                "id": str(uuid4()),
                "user_id": self.user_id,
                "created_at": now,
                "updated_at": now,
            }
        )
        # Round-trip through the encoder so dates and UUIDs come back as strings.
        stored = json.loads(json.dumps(stored, cls=JSONEncoder))

        records = self._load(table)
        records.append(stored)
        self._save(table, records)
        logger.debug("Inserted %s into %s", stored["id"], Table(table).value)
        return stored

    def update(
        self, table: Table, record_id: UUID | str, partial: dict[str, Any]
    ) -> dict[str, Any]:
        """Apply a partial update to one record.

        Raises:
            NotFoundError: If the user has no record with this id
        """
        record_id = str(record_id)
        changes = {k: v for k, v in partial.items() if k not in _GENERATED_FIELDS}
        changes = json.loads(json.dumps(changes, cls=JSONEncoder))

        records = self._load(table)
        for record in records:
            if record.get("id") == record_id and self._owned(record):
                record.update(changes)
                record["updated_at"] = datetime.now().isoformat()
                self._save(table, records)
                logger.debug("Updated %s in %s", record_id, Table(table).value)
                return record

        raise NotFoundError(Table(table).value, record_id)

    def delete(self, table: Table, record_id: UUID | str) -> bool:
        """Delete one record.

        Raises:
            NotFoundError: If the user has no record with this id
        """
        record_id = str(record_id)
        records = self._load(table)
        for i, record in enumerate(records):
            if record.get("id") == record_id and self._owned(record):
                records.pop(i)
                self._save(table, records)
                logger.debug("Deleted %s from %s", record_id, Table(table).value)
                return True

        raise NotFoundError(Table(table).value, record_id)


def create_gateway(data_dir: Path | None = None, user_id: str = "local") -> PersistenceGateway:
    """Create the persistence gateway.

    Args:
        data_dir: Directory for table files
        user_id: Identity the gateway is scoped to

    Returns:
        A JSONGateway instance
    """
    return JSONGateway(data_dir=data_dir, user_id=user_id)
