"""Base repository protocol and utilities.

This module defines the interface that all repositories must implement.
Documents are stored as JSON text in a ``data`` column; the base class
handles (de)serialization so that repositories deal in plain dicts.
"""
import json
import uuid
from datetime import datetime, timezone
from typing import Protocol
import sqlite3


class ConnectionProtocol(Protocol):
    """Protocol for database connection."""

    def execute(self, sql: str, parameters: tuple = ...) -> sqlite3.Cursor: ...
    def commit(self) -> None: ...


def new_id() -> str:
    """Opaque document id."""
    return uuid.uuid4().hex


def utc_now() -> str:
    """Current UTC time as an ISO 8601 string."""
    return datetime.now(timezone.utc).isoformat()


def deep_merge(target: dict, updates: dict) -> dict:
    """Merge ``updates`` into a copy of ``target``, recursing into nested dicts.

    Examples:
        >>> deep_merge({"roles": {"member": True}}, {"roles": {"archived": False}})
        {'roles': {'member': True, 'archived': False}}
    """
    merged = dict(target)
    for key, value in updates.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class Repository:
    """Base repository class.

    All repositories should inherit from this class.

    Example:
        class ChaincodeRepository(Repository):
            def get_by_id(self, chaincode_id: str) -> dict | None:
                cursor = self._execute("SELECT * FROM chaincodes WHERE id = ?", (chaincode_id,))
                return self._row_to_dict(cursor.fetchone())
    """

    def __init__(self, connection: ConnectionProtocol):
        """Initialize repository with database connection.

        Args:
            connection: Database connection (sqlite3.Connection or compatible)
        """
        self._conn = connection

    def _execute(self, sql: str, parameters: tuple = ()) -> sqlite3.Cursor:
        """Execute SQL query with parameters.

        Args:
            sql: SQL query string
            parameters: Query parameters (prevents SQL injection)

        Returns:
            sqlite3.Cursor with results
        """
        return self._conn.execute(sql, parameters)

    def _commit(self) -> None:
        """Commit current transaction."""
        self._conn.commit()

    def _rollback(self) -> None:
        """Discard current transaction."""
        self._conn.rollback()

    def _row_to_dict(self, row: sqlite3.Row | None) -> dict | None:
        """Convert sqlite3.Row to dictionary.

        Args:
            row: Database row or None

        Returns:
            Dictionary representation or None
        """
        return dict(row) if row else None

    @staticmethod
    def _dumps(document: dict) -> str:
        return json.dumps(document, default=str)

    def _row_to_document(self, row: sqlite3.Row | None, id_field: str | None = "id") -> dict | None:
        """Decode the JSON ``data`` column of a row.

        Args:
            row: Database row or None
            id_field: Key under which the row id is exposed (None to omit it)

        Returns:
            Document dict or None
        """
        if not row:
            return None
        document = json.loads(row["data"])
        if id_field:
            document = {id_field: row["id"], **document}
        return document
