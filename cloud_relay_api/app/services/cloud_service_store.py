"""
Local mirror of services created at the provider.

``user_cloud_services`` keeps one row per service a user created through
the relay: the provider-assigned ``service_id``, the payload that was sent
(``config``), the provider's reply (``response``) and optional
environment data (``env``).  Reads join the ``cloud_services`` catalog
row referenced by ``cloud_services_id`` under the key ``cloud_service``.

The provider stays the owner of the real service; nothing here is
reconciled with it.  Every operation catches datastore errors, logs them
and returns a failed :class:`StoreResult` so that a broken mirror never
fails the relay request that triggered it.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Any, Dict, List, Optional, Union

from cloud_relay_api.app.core.db import get_connection
from cloud_relay_api.app.services.results import StoreResult

logger = logging.getLogger(__name__)

JSON_COLUMNS = ("config", "response", "env")
WRITABLE_COLUMNS = (
    "user_id",
    "service_id",
    "domain",
    "type",
    "config",
    "response",
    "env",
    "cloud_services_id",
)
CATALOG_COLUMNS = (
    "id",
    "name",
    "type",
    "description",
    "category",
    "tags",
    "home_url",
    "logo",
    "created_at",
)

_SELECT_WITH_CATALOG = (
    "SELECT ucs.*, "
    + ", ".join(f"cs.{col} AS cs_{col}" for col in CATALOG_COLUMNS)
    + " FROM user_cloud_services ucs"
    " LEFT JOIN cloud_services cs ON cs.id = ucs.cloud_services_id"
)


class UserCloudServiceStore:
    """Data access for ``user_cloud_services`` rows."""

    def __init__(self, database_path: str) -> None:
        self.database_path = database_path

    async def insert(self, record: Dict[str, Any]) -> StoreResult[Dict[str, Any]]:
        """Insert a mirror record and return it with its catalog entry."""
        values = self._prepare(record)
        columns = list(values)
        try:
            conn = get_connection(self.database_path)
            try:
                cursor = conn.cursor()
                cursor.execute(
                    f"INSERT INTO user_cloud_services ({', '.join(columns)}) "
                    f"VALUES ({', '.join('?' for _ in columns)})",
                    [values[col] for col in columns],
                )
                row_id = cursor.lastrowid
                conn.commit()
                row = cursor.execute(
                    f"{_SELECT_WITH_CATALOG} WHERE ucs.id = ?", (row_id,)
                ).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            logger.error("Error saving user cloud service: %s", exc)
            return StoreResult.failure(str(exc))
        logger.info(
            "Saved user cloud service %s (service %s, user %s)",
            row_id,
            values.get("service_id"),
            values.get("user_id"),
        )
        return StoreResult.success(self._row_to_dict(row))

    async def update_by_id(
        self, record_id: Union[int, str], fields: Dict[str, Any]
    ) -> StoreResult[Dict[str, Any]]:
        """Patch the given columns of the row with internal id ``record_id``."""
        values = self._prepare(fields)
        try:
            conn = get_connection(self.database_path)
            try:
                cursor = conn.cursor()
                if values:
                    assignments = ", ".join(f"{col} = ?" for col in values)
                    cursor.execute(
                        f"UPDATE user_cloud_services SET {assignments} WHERE id = ?",
                        [*values.values(), record_id],
                    )
                    conn.commit()
                row = cursor.execute(
                    f"{_SELECT_WITH_CATALOG} WHERE ucs.id = ?", (record_id,)
                ).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            logger.error("Error updating user cloud service %s: %s", record_id, exc)
            return StoreResult.failure(str(exc))
        if row is None:
            return StoreResult.not_found()
        logger.info("Updated user cloud service %s", record_id)
        return StoreResult.success(self._row_to_dict(row))

    async def select_by_id(self, record_id: int) -> StoreResult[Dict[str, Any]]:
        try:
            conn = get_connection(self.database_path)
            try:
                row = conn.execute(
                    f"{_SELECT_WITH_CATALOG} WHERE ucs.id = ?", (record_id,)
                ).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            logger.error("Error getting user cloud service %s: %s", record_id, exc)
            return StoreResult.failure(str(exc))
        if row is None:
            return StoreResult.not_found()
        return StoreResult.success(self._row_to_dict(row))

    async def select_all_by_owner(self, owner_id: str) -> StoreResult[List[Dict[str, Any]]]:
        """Return every mirror record of ``owner_id``, newest first."""
        try:
            conn = get_connection(self.database_path)
            try:
                rows = conn.execute(
                    f"{_SELECT_WITH_CATALOG} WHERE ucs.user_id = ? "
                    "ORDER BY ucs.created_at DESC, ucs.id DESC",
                    (owner_id,),
                ).fetchall()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            logger.error("Error getting user cloud services for %s: %s", owner_id, exc)
            return StoreResult.failure(str(exc))
        return StoreResult.success([self._row_to_dict(row) for row in rows])

    async def delete_by_service_and_owner(
        self, service_id: str, owner_id: str
    ) -> StoreResult[bool]:
        """Delete the rows mirroring ``service_id`` that belong to ``owner_id``.

        Rows of other owners with the same ``service_id`` are left alone.
        Returns not-found when no row matched.
        """
        try:
            conn = get_connection(self.database_path)
            try:
                cursor = conn.execute(
                    "DELETE FROM user_cloud_services WHERE service_id = ? AND user_id = ?",
                    (service_id, owner_id),
                )
                affected = cursor.rowcount
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            logger.error("Error deleting user cloud service %s: %s", service_id, exc)
            return StoreResult.failure(str(exc))
        if not affected:
            return StoreResult.not_found()
        logger.info("Deleted user cloud service %s of user %s", service_id, owner_id)
        return StoreResult.success(True)

    @staticmethod
    def _prepare(fields: Dict[str, Any]) -> Dict[str, Any]:
        """Keep writable columns and serialise the JSON ones."""
        values: Dict[str, Any] = {}
        for col in WRITABLE_COLUMNS:
            if col not in fields:
                continue
            value = fields[col]
            if col in JSON_COLUMNS and value is not None:
                value = json.dumps(value)
            values[col] = value
        # An empty catalog reference means "none"; '' would break the FK.
        if "cloud_services_id" in values and not values["cloud_services_id"]:
            values["cloud_services_id"] = None
        return values

    @staticmethod
    def _row_to_dict(row: sqlite3.Row) -> Dict[str, Any]:
        data = {key: row[key] for key in row.keys() if not key.startswith("cs_")}
        for col in JSON_COLUMNS:
            data[col] = _loads(data.get(col))
        catalog: Optional[Dict[str, Any]] = None
        if row["cs_id"] is not None:
            catalog = {col: row[f"cs_{col}"] for col in CATALOG_COLUMNS}
            catalog["tags"] = _loads(catalog["tags"])
        data["cloud_service"] = catalog
        return data


def _loads(value: Optional[str]) -> Any:
    if value is None:
        return None
    try:
        return json.loads(value)
    except (TypeError, json.JSONDecodeError):
        return value
