"""
Local mirror of databases created at the provider.

Rows in ``user_cloud_databases`` are always scoped to their owner: every
read, update and delete filters on ``user_id`` in addition to the row
id or the provider ``database_uuid``.  Like the service mirror, datastore
errors are logged and reported through :class:`StoreResult` rather than
raised.

The one exception is :meth:`UserCloudDatabaseStore.next_public_port`.
A database cannot be created at the provider without a port, so a
failure to allocate one is raised to the caller.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Any, Dict, List

from cloud_relay_api.app.core.db import get_connection
from cloud_relay_api.app.services.results import StoreResult

logger = logging.getLogger(__name__)

FIRST_PUBLIC_PORT = 1000

JSON_COLUMNS = ("config", "response")
WRITABLE_COLUMNS = (
    "user_id",
    "database_uuid",
    "type",
    "public_port",
    "external_db_url",
    "internal_db_url",
    "config",
    "response",
)


class PortAllocationError(RuntimeError):
    """The public port counter could not be read or advanced."""


class UserCloudDatabaseStore:
    """Data access for ``user_cloud_databases`` rows."""

    def __init__(self, database_path: str) -> None:
        self.database_path = database_path

    async def insert(self, record: Dict[str, Any]) -> StoreResult[Dict[str, Any]]:
        values = self._prepare(record)
        columns = list(values)
        try:
            conn = get_connection(self.database_path)
            try:
                cursor = conn.cursor()
                cursor.execute(
                    f"INSERT INTO user_cloud_databases ({', '.join(columns)}) "
                    f"VALUES ({', '.join('?' for _ in columns)})",
                    [values[col] for col in columns],
                )
                row_id = cursor.lastrowid
                conn.commit()
                row = cursor.execute(
                    "SELECT * FROM user_cloud_databases WHERE id = ?", (row_id,)
                ).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            logger.error("Error saving user cloud database: %s", exc)
            return StoreResult.failure(str(exc))
        logger.info("Saved user cloud database %s (%s)", row_id, values.get("database_uuid"))
        return StoreResult.success(self._row_to_dict(row))

    async def list_by_owner(self, owner_id: str) -> StoreResult[List[Dict[str, Any]]]:
        """Return the owner's database records, newest first."""
        try:
            conn = get_connection(self.database_path)
            try:
                rows = conn.execute(
                    "SELECT * FROM user_cloud_databases WHERE user_id = ? "
                    "ORDER BY created_at DESC, id DESC",
                    (owner_id,),
                ).fetchall()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            logger.error("Error getting user cloud databases for %s: %s", owner_id, exc)
            return StoreResult.failure(str(exc))
        return StoreResult.success([self._row_to_dict(row) for row in rows])

    async def get(self, record_id: int, owner_id: str) -> StoreResult[Dict[str, Any]]:
        return await self._select_one("id", record_id, owner_id)

    async def get_by_uuid(self, database_uuid: str, owner_id: str) -> StoreResult[Dict[str, Any]]:
        return await self._select_one("database_uuid", database_uuid, owner_id)

    async def update(
        self, record_id: int, owner_id: str, fields: Dict[str, Any]
    ) -> StoreResult[Dict[str, Any]]:
        return await self._update("id", record_id, owner_id, fields)

    async def update_by_uuid(
        self, database_uuid: str, owner_id: str, fields: Dict[str, Any]
    ) -> StoreResult[Dict[str, Any]]:
        return await self._update("database_uuid", database_uuid, owner_id, fields)

    async def delete(self, record_id: int, owner_id: str) -> StoreResult[bool]:
        return await self._delete("id", record_id, owner_id)

    async def delete_by_uuid(self, database_uuid: str, owner_id: str) -> StoreResult[bool]:
        return await self._delete("database_uuid", database_uuid, owner_id)

    async def next_public_port(self) -> int:
        """Hand out the next public port.

        The first call seeds the counter and returns 1000; every later
        call returns the stored port and advances the counter by one.
        """
        try:
            conn = get_connection(self.database_path)
            try:
                # IMMEDIATE takes the write lock up front so two requests
                # cannot read the same counter value.
                conn.execute("BEGIN IMMEDIATE")
                row = conn.execute(
                    "SELECT id, port FROM public_port ORDER BY id DESC LIMIT 1"
                ).fetchone()
                if row is None:
                    port = FIRST_PUBLIC_PORT
                    conn.execute("INSERT INTO public_port (port) VALUES (?)", (port + 1,))
                else:
                    port = row["port"] or FIRST_PUBLIC_PORT
                    conn.execute(
                        "UPDATE public_port SET port = ? WHERE id = ?", (port + 1, row["id"])
                    )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            logger.error("Error allocating public port: %s", exc)
            raise PortAllocationError("Failed to allocate a public port") from exc
        return port

    async def _select_one(self, column: str, key: Any, owner_id: str) -> StoreResult[Dict[str, Any]]:
        try:
            conn = get_connection(self.database_path)
            try:
                row = conn.execute(
                    f"SELECT * FROM user_cloud_databases WHERE {column} = ? AND user_id = ?",
                    (key, owner_id),
                ).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            logger.error("Error getting user cloud database %s: %s", key, exc)
            return StoreResult.failure(str(exc))
        if row is None:
            return StoreResult.not_found()
        return StoreResult.success(self._row_to_dict(row))

    async def _update(
        self, column: str, key: Any, owner_id: str, fields: Dict[str, Any]
    ) -> StoreResult[Dict[str, Any]]:
        values = self._prepare(fields)
        values.pop("user_id", None)
        try:
            conn = get_connection(self.database_path)
            try:
                cursor = conn.cursor()
                if values:
                    assignments = ", ".join(f"{col} = ?" for col in values)
                    cursor.execute(
                        f"UPDATE user_cloud_databases SET {assignments} "
                        f"WHERE {column} = ? AND user_id = ?",
                        [*values.values(), key, owner_id],
                    )
                    conn.commit()
                # A uuid update may have changed the lookup key itself.
                lookup = values.get(column, key) if column == "database_uuid" else key
                row = cursor.execute(
                    f"SELECT * FROM user_cloud_databases WHERE {column} = ? AND user_id = ?",
                    (lookup, owner_id),
                ).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            logger.error("Error updating user cloud database %s: %s", key, exc)
            return StoreResult.failure(str(exc))
        if row is None:
            return StoreResult.not_found()
        return StoreResult.success(self._row_to_dict(row))

    async def _delete(self, column: str, key: Any, owner_id: str) -> StoreResult[bool]:
        try:
            conn = get_connection(self.database_path)
            try:
                cursor = conn.execute(
                    f"DELETE FROM user_cloud_databases WHERE {column} = ? AND user_id = ?",
                    (key, owner_id),
                )
                affected = cursor.rowcount
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            logger.error("Error deleting user cloud database %s: %s", key, exc)
            return StoreResult.failure(str(exc))
        if not affected:
            return StoreResult.not_found()
        logger.info("Deleted user cloud database %s of user %s", key, owner_id)
        return StoreResult.success(True)

    @staticmethod
    def _prepare(fields: Dict[str, Any]) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        for col in WRITABLE_COLUMNS:
            if col not in fields:
                continue
            value = fields[col]
            if col in JSON_COLUMNS and value is not None:
                value = json.dumps(value)
            values[col] = value
        return values

    @staticmethod
    def _row_to_dict(row: sqlite3.Row) -> Dict[str, Any]:
        data = dict(row)
        for col in JSON_COLUMNS:
            if data.get(col) is not None:
                try:
                    data[col] = json.loads(data[col])
                except (TypeError, json.JSONDecodeError):
                    pass
        return data
