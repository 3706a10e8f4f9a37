"""
Relay for provider applications.

Applications are read and controlled only; the lifecycle actions map
to ``GET /applications/{id}/{action}`` at the provider, which is the
provider's own API shape.
"""

from typing import Any

from cloud_relay_api.app.services.relay import ProviderRelay


class ApplicationService(ProviderRelay):
    async def list_applications(self) -> Any:
        return await self.call(
            "Coolify Applications API Error",
            "Failed to fetch applications from Coolify",
            "GET",
            "/applications",
        )

    async def get_application(self, application_id: str) -> Any:
        return await self.call(
            "Coolify Application API Error",
            "Failed to fetch application from Coolify",
            "GET",
            f"/applications/{application_id}",
        )

    async def run_action(self, application_id: str, action: str) -> Any:
        """Start, stop or restart an application."""
        return await self.call(
            f"Coolify {action.capitalize()} Application API Error",
            f"Failed to {action} application in Coolify",
            "GET",
            f"/applications/{application_id}/{action}",
        )
