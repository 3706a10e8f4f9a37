"""
Relay for provider-managed databases.

Creating a database goes through one endpoint per engine.  The relay
places every new database in the configured project, server and
environment, makes it public on a port taken from the local counter
and mirrors the result into ``user_cloud_databases`` for the owner.
Updates and deletes are mirrored by ``database_uuid`` and owner.
As with services, mirror failures are logged and reported as
``database_record: null`` / ``database_deleted: false``; they never fail
the request.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from cloud_relay_api.app.clients.coolify import CoolifyClient
from cloud_relay_api.app.core.config import Settings
from cloud_relay_api.app.core.errors import BadRequestError, RelayError, require_fields
from cloud_relay_api.app.services.cloud_database_store import (
    PortAllocationError,
    UserCloudDatabaseStore,
)
from cloud_relay_api.app.services.relay import ProviderRelay
from cloud_relay_api.app.services.results import StoreResult

logger = logging.getLogger(__name__)

# Engine path segment -> display name used in logs and messages.
DATABASE_ENGINES: Dict[str, str] = {
    "postgresql": "PostgreSQL",
    "mongodb": "MongoDB",
    "clickhouse": "ClickHouse",
    "dragonfly": "DragonFly",
    "redis": "Redis",
    "keydb": "KeyDB",
    "mariadb": "MariaDB",
    "mysql": "MySQL",
}

DELETE_FLAGS = (
    "delete_configurations",
    "delete_volumes",
    "docker_cleanup",
    "delete_connected_networks",
)


class DatabaseService(ProviderRelay):
    """Database handlers."""

    def __init__(
        self,
        client: CoolifyClient,
        store: UserCloudDatabaseStore,
        settings: Settings,
    ) -> None:
        super().__init__(client)
        self.store = store
        self.settings = settings

    async def list_databases(self) -> Any:
        return await self.call(
            "Coolify Databases API Error",
            "Failed to fetch databases from Coolify",
            "GET",
            "/databases",
        )

    async def get_database(self, database_id: str) -> Any:
        return await self.call(
            "Coolify Database API Error",
            "Failed to fetch database from Coolify",
            "GET",
            f"/databases/{database_id}",
        )

    async def create_database(
        self, engine: str, body: Dict[str, Any], owner_id: str
    ) -> Tuple[Any, StoreResult]:
        """Create a database of ``engine`` and mirror it for ``owner_id``."""
        if engine not in DATABASE_ENGINES:
            raise BadRequestError(f"Unsupported database type: {engine}")
        display = DATABASE_ENGINES[engine]
        require_fields(body, "name")
        label = f"Coolify Create {display} Database API Error"
        # Checked before allocation so no port is consumed for a call that cannot happen.
        self.ensure_configured(label)

        payload = {key: value for key, value in body.items() if key != "type"}
        payload["project_uuid"] = body.get("project_uuid") or self.settings.coolify_project_uuid
        payload["server_uuid"] = body.get("server_uuid") or self.settings.coolify_server_uuid
        payload["environment_name"] = (
            body.get("environment_name") or self.settings.coolify_environment_name
        )
        payload["instant_deploy"] = True
        payload["is_public"] = True
        try:
            payload["public_port"] = await self.store.next_public_port()
        except PortAllocationError as exc:
            raise RelayError(str(exc)) from exc

        data = await self.call(
            label,
            f"Failed to create {display} database in Coolify",
            "POST",
            f"/databases/{engine}",
            json_body=payload,
        )
        provider = data if isinstance(data, dict) else {}
        saved = await self.store.insert(
            {
                "user_id": owner_id,
                "database_uuid": provider.get("uuid"),
                "type": engine,
                "public_port": payload["public_port"],
                "external_db_url": provider.get("external_db_url"),
                "internal_db_url": provider.get("internal_db_url"),
                "config": payload,
                "response": data,
            }
        )
        if not saved.ok:
            logger.error("Failed to save %s database to user table: %s", display, saved.error)
        return data, saved

    async def run_action(self, database_id: str, action: str) -> Any:
        """Start, stop or restart a database (POST at the provider)."""
        return await self.call(
            f"Coolify {action.capitalize()} Database API Error",
            f"Failed to {action} database in Coolify",
            "POST",
            f"/databases/{database_id}/{action}",
        )

    async def update_database(
        self, database_uuid: str, body: Dict[str, Any], owner_id: str
    ) -> Tuple[Any, StoreResult]:
        if not body:
            raise BadRequestError("No update data provided")
        data = await self.call(
            "Coolify Update Database API Error",
            "Failed to update database in Coolify",
            "PATCH",
            f"/databases/{database_uuid}",
            json_body=body,
        )
        fields: Dict[str, Any] = {"config": body, "response": data}
        if body.get("public_port") is not None:
            fields["public_port"] = body["public_port"]
        updated = await self.store.update_by_uuid(database_uuid, owner_id, fields)
        if updated.failed:
            logger.error("Failed to update database in user table: %s", updated.error)
        return data, updated

    async def delete_database(
        self,
        database_uuid: str,
        owner_id: str,
        flags: Optional[Dict[str, str]] = None,
    ) -> Tuple[Any, StoreResult]:
        params = {flag: "true" for flag in DELETE_FLAGS}
        params.update({k: v for k, v in (flags or {}).items() if k in DELETE_FLAGS and v is not None})
        data = await self.call(
            "Coolify Delete Database API Error",
            "Failed to delete database in Coolify",
            "DELETE",
            f"/databases/{database_uuid}",
            params=params,
        )
        deleted = await self.store.delete_by_uuid(database_uuid, owner_id)
        if deleted.failed:
            logger.error("Failed to delete database from user table: %s", deleted.error)
        return data, deleted
