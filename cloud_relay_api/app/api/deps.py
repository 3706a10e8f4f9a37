"""
FastAPI dependencies shared by the v1 endpoints.

Everything a handler needs is built from the ``Settings`` object the
application was created with (``app.state.settings``): the provider
client for the current request, the mirror stores and the family
services.  Tests swap the provider transport through
``app.state.provider_transport`` or override these dependencies.
"""

from typing import AsyncIterator

from fastapi import Depends, Request

from cloud_relay_api.app.clients.coolify import CoolifyClient
from cloud_relay_api.app.core.config import Settings
from cloud_relay_api.app.services.application_service import ApplicationService
from cloud_relay_api.app.services.cloud_database_store import UserCloudDatabaseStore
from cloud_relay_api.app.services.cloud_service_service import CloudServiceService
from cloud_relay_api.app.services.cloud_service_store import UserCloudServiceStore
from cloud_relay_api.app.services.database_service import DatabaseService
from cloud_relay_api.app.services.resource_service import ResourceService
from cloud_relay_api.app.services.server_service import ServerService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_provider_client(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> AsyncIterator[CoolifyClient]:
    """Yield a provider client for the duration of one request."""
    client = CoolifyClient(
        base_url=settings.coolify_base_url,
        api_key=settings.coolify_api_key,
        transport=getattr(request.app.state, "provider_transport", None),
    )
    try:
        yield client
    finally:
        await client.aclose()


def get_service_store(request: Request) -> UserCloudServiceStore:
    return UserCloudServiceStore(request.app.state.database_path)


def get_database_store(request: Request) -> UserCloudDatabaseStore:
    return UserCloudDatabaseStore(request.app.state.database_path)


def get_resource_service(client: CoolifyClient = Depends(get_provider_client)) -> ResourceService:
    return ResourceService(client)


def get_application_service(
    client: CoolifyClient = Depends(get_provider_client),
) -> ApplicationService:
    return ApplicationService(client)


def get_server_service(client: CoolifyClient = Depends(get_provider_client)) -> ServerService:
    return ServerService(client)


def get_cloud_service_service(
    client: CoolifyClient = Depends(get_provider_client),
    store: UserCloudServiceStore = Depends(get_service_store),
    settings: Settings = Depends(get_settings),
) -> CloudServiceService:
    return CloudServiceService(client, store, settings)


def get_database_service(
    client: CoolifyClient = Depends(get_provider_client),
    store: UserCloudDatabaseStore = Depends(get_database_store),
    settings: Settings = Depends(get_settings),
) -> DatabaseService:
    return DatabaseService(client, store, settings)
