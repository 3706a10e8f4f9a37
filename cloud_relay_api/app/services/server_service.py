"""Relay for provider servers."""

from typing import Any, Dict

from cloud_relay_api.app.core.errors import require_fields
from cloud_relay_api.app.services.relay import ProviderRelay

SERVER_REQUIRED_FIELDS = ("name", "ip", "port", "user", "private_key_uuid")


class ServerService(ProviderRelay):
    async def list_servers(self) -> Any:
        return await self.call(
            "Coolify Servers API Error",
            "Failed to fetch servers from Coolify",
            "GET",
            "/servers",
        )

    async def get_server(self, server_id: str) -> Any:
        return await self.call(
            "Coolify Server API Error",
            "Failed to fetch server from Coolify",
            "GET",
            f"/servers/{server_id}",
        )

    async def create_server(self, body: Dict[str, Any]) -> Any:
        require_fields(body, *SERVER_REQUIRED_FIELDS)
        return await self.call(
            "Coolify Create Server API Error",
            "Failed to create server in Coolify",
            "POST",
            "/servers",
            json_body=body,
        )

    async def update_server(self, server_id: str, body: Dict[str, Any]) -> Any:
        return await self.call(
            "Coolify Update Server API Error",
            "Failed to update server in Coolify",
            "PATCH",
            f"/servers/{server_id}",
            json_body=body,
        )

    async def delete_server(self, server_id: str) -> Any:
        return await self.call(
            "Coolify Delete Server API Error",
            "Failed to delete server from Coolify",
            "DELETE",
            f"/servers/{server_id}",
        )

    async def get_server_resources(self, server_id: str) -> Any:
        return await self.call(
            "Coolify Server Resources API Error",
            "Failed to fetch server resources from Coolify",
            "GET",
            f"/servers/{server_id}/resources",
        )

    async def get_server_domains(self, server_id: str) -> Any:
        return await self.call(
            "Coolify Server Domains API Error",
            "Failed to fetch server domains from Coolify",
            "GET",
            f"/servers/{server_id}/domains",
        )

    async def validate_server(self, server_id: str) -> Any:
        return await self.call(
            "Coolify Validate Server API Error",
            "Failed to validate server in Coolify",
            "GET",
            f"/servers/{server_id}/validate",
        )
