"""Relay for the provider's read-only resource listing."""

from typing import Any

from cloud_relay_api.app.services.relay import ProviderRelay


class ResourceService(ProviderRelay):
    async def list_resources(self) -> Any:
        return await self.call(
            "Coolify Resources API Error",
            "Failed to fetch resources from Coolify",
            "GET",
            "/resources",
        )

    async def get_resource(self, resource_id: str) -> Any:
        return await self.call(
            "Coolify Resource API Error",
            "Failed to fetch resource from Coolify",
            "GET",
            f"/resources/{resource_id}",
        )
