"""
Relay for provider services and their environment variables.

Service mutations are the only relay calls mirrored locally: a
successful create inserts a ``user_cloud_services`` row, an update
patches it and a delete removes the owner's row for that service.
Mirror writes happen after the provider call and never change the
outcome of the request; their result is reported next to the provider
data (``database_record`` / ``database_deleted``).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from cloud_relay_api.app.clients.coolify import CoolifyClient
from cloud_relay_api.app.core.config import Settings
from cloud_relay_api.app.core.errors import MissingFieldsError, require_fields
from cloud_relay_api.app.services.cloud_service_store import UserCloudServiceStore
from cloud_relay_api.app.services.relay import ProviderRelay
from cloud_relay_api.app.services.results import StoreResult

logger = logging.getLogger(__name__)

# Fields returned by ``get_service``; anything else the provider sends is dropped.
SERVICE_PUBLIC_FIELDS = (
    "uuid",
    "name",
    "applications",
    "server_status",
    "service_type",
    "status",
    "created_at",
    "updated_at",
)


def first_domain(provider_data: Any) -> Optional[str]:
    """Return the first domain the provider reported for a service, or ``None``."""
    if not isinstance(provider_data, dict):
        return None
    domains = provider_data.get("domains")
    if isinstance(domains, str):
        domains = [d.strip() for d in domains.split(",") if d.strip()]
    if isinstance(domains, list) and domains:
        return domains[0]
    return None


class CloudServiceService(ProviderRelay):
    """Service and environment-variable handlers."""

    def __init__(
        self,
        client: CoolifyClient,
        store: UserCloudServiceStore,
        settings: Settings,
    ) -> None:
        super().__init__(client)
        self.store = store
        self.settings = settings

    def build_create_payload(self, body: Dict[str, Any]) -> Dict[str, Any]:
        """Build the provider payload, filling placement from configuration."""
        instant_deploy = body.get("instant_deploy")
        payload: Dict[str, Any] = {
            "type": body["type"],
            "name": body["name"],
            "project_uuid": body.get("project_uuid") or self.settings.coolify_project_uuid,
            "server_uuid": body.get("server_uuid") or self.settings.coolify_server_uuid,
            "environment_name": body.get("environment_name")
            or self.settings.coolify_environment_name,
            "instant_deploy": True if instant_deploy is None else instant_deploy,
        }
        for optional in ("description", "environment_uuid", "destination_uuid", "docker_compose_raw"):
            if body.get(optional):
                payload[optional] = body[optional]
        return payload

    async def create_service(
        self, body: Dict[str, Any], owner_id: Optional[str]
    ) -> Tuple[Any, StoreResult]:
        """Create a service at the provider and mirror it for ``owner_id``."""
        require_fields(body, "type", "name")
        payload = self.build_create_payload(body)
        data = await self.call(
            "Coolify Create Service API Error",
            "Failed to create service in Coolify",
            "POST",
            "/services",
            json_body=payload,
        )
        record = {
            "user_id": owner_id or body.get("user_id"),
            "service_id": data.get("uuid") if isinstance(data, dict) else None,
            "type": payload["type"],
            "domain": first_domain(data),
            "config": payload,
            "response": data,
            "env": body.get("env"),
            "cloud_services_id": body.get("cloud_services_id"),
        }
        saved = await self.store.insert(record)
        if not saved.ok:
            logger.warning(
                "Service %s created at provider but not mirrored: %s",
                record["service_id"],
                saved.error,
            )
        return data, saved

    async def update_service(
        self, service_id: str, body: Dict[str, Any]
    ) -> Tuple[Any, StoreResult]:
        """Patch a service at the provider, then its mirror row by internal id."""
        data = await self.call(
            "Coolify Update Service API Error",
            "Failed to update service in Coolify",
            "PATCH",
            f"/services/{service_id}",
            json_body=body,
        )
        fields: Dict[str, Any] = {
            "config": body,
            "response": data,
            "env": body.get("env"),
        }
        if body.get("type"):
            fields["type"] = body["type"]
        updated = await self.store.update_by_id(service_id, fields)
        if not updated.ok:
            logger.info("Mirror row %s not updated (%s)", service_id, updated.status.value)
        return data, updated

    async def delete_service(self, service_id: str, owner_id: str) -> Tuple[Any, StoreResult]:
        """Delete a service at the provider, then the owner's mirror row."""
        data = await self.call(
            "Coolify Delete Service API Error",
            "Failed to delete service from Coolify",
            "DELETE",
            f"/services/{service_id}",
        )
        deleted = await self.store.delete_by_service_and_owner(service_id, owner_id)
        return data, deleted

    async def get_service(self, service_id: str) -> Dict[str, Any]:
        """Fetch a service and keep only :data:`SERVICE_PUBLIC_FIELDS`."""
        data = await self.call(
            "Get User Cloud Service Error",
            "Failed to get service from Coolify",
            "GET",
            f"/services/{service_id}",
        )
        if not isinstance(data, dict):
            return {}
        return {key: data[key] for key in SERVICE_PUBLIC_FIELDS if key in data}

    async def run_action(self, service_id: str, action: str) -> Any:
        """Start, stop or restart a service."""
        return await self.call(
            f"Coolify {action.capitalize()} Service API Error",
            f"Failed to {action} service in Coolify",
            "GET",
            f"/services/{service_id}/{action}",
        )

    # ------------------------------------------------------------------
    # Environment variables
    # ------------------------------------------------------------------
    async def list_envs(self, service_id: str) -> Any:
        return await self.call(
            "Coolify Service Envs API Error",
            "Failed to fetch service environment variables from Coolify",
            "GET",
            f"/services/{service_id}/envs",
        )

    async def create_env(self, service_id: str, body: Dict[str, Any]) -> Any:
        # ``value`` may be empty, falsy or null; it only has to be present.
        if not body.get("key") or "value" not in body:
            raise MissingFieldsError(("key", "value"))
        return await self.call(
            "Coolify Create Service Env API Error",
            "Failed to create service environment variable in Coolify",
            "POST",
            f"/services/{service_id}/envs",
            json_body=body,
        )

    async def update_env(self, service_id: str, env_id: str, body: Dict[str, Any]) -> Any:
        return await self.call(
            "Coolify Update Service Env API Error",
            "Failed to update service environment variable in Coolify",
            "PATCH",
            f"/services/{service_id}/envs/{env_id}",
            json_body=body,
        )

    async def update_envs_bulk(self, service_id: str, body: Any) -> Any:
        return await self.call(
            "Coolify Update Service Envs Bulk API Error",
            "Failed to update service environment variables in bulk in Coolify",
            "PATCH",
            f"/services/{service_id}/envs/bulk",
            json_body=body,
        )

    async def delete_env(self, service_id: str, env_id: str) -> Any:
        return await self.call(
            "Coolify Delete Service Env API Error",
            "Failed to delete service environment variable from Coolify",
            "DELETE",
            f"/services/{service_id}/envs/{env_id}",
        )
