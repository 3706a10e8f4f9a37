"""
Server endpoints for API v1.

Plain relays of the provider's server API.  Creating a server requires
``name``, ``ip``, ``port``, ``user`` and ``private_key_uuid``.
"""

from fastapi import APIRouter, Depends, status

from cloud_relay_api.app.api.deps import get_server_service
from cloud_relay_api.app.schemas.envelope import Envelope
from cloud_relay_api.app.schemas.server import ServerCreate, ServerUpdate
from cloud_relay_api.app.services.server_service import ServerService

router = APIRouter()


@router.get("", response_model_exclude_unset=True)
async def list_servers(service: ServerService = Depends(get_server_service)) -> Envelope:
    return Envelope(success=True, data=await service.list_servers())


@router.post("", status_code=status.HTTP_201_CREATED, response_model_exclude_unset=True)
async def create_server(
    server_in: ServerCreate,
    service: ServerService = Depends(get_server_service),
) -> Envelope:
    data = await service.create_server(server_in.model_dump(exclude_unset=True))
    return Envelope(success=True, data=data)


@router.get("/{server_id}", response_model_exclude_unset=True)
async def get_server(
    server_id: str,
    service: ServerService = Depends(get_server_service),
) -> Envelope:
    return Envelope(success=True, data=await service.get_server(server_id))


@router.patch("/{server_id}", response_model_exclude_unset=True)
async def update_server(
    server_id: str,
    server_in: ServerUpdate,
    service: ServerService = Depends(get_server_service),
) -> Envelope:
    data = await service.update_server(server_id, server_in.model_dump(exclude_unset=True))
    return Envelope(success=True, data=data)


@router.delete("/{server_id}", response_model_exclude_unset=True)
async def delete_server(
    server_id: str,
    service: ServerService = Depends(get_server_service),
) -> Envelope:
    return Envelope(success=True, data=await service.delete_server(server_id))


@router.get("/{server_id}/resources", response_model_exclude_unset=True)
async def get_server_resources(
    server_id: str,
    service: ServerService = Depends(get_server_service),
) -> Envelope:
    return Envelope(success=True, data=await service.get_server_resources(server_id))


@router.get("/{server_id}/domains", response_model_exclude_unset=True)
async def get_server_domains(
    server_id: str,
    service: ServerService = Depends(get_server_service),
) -> Envelope:
    return Envelope(success=True, data=await service.get_server_domains(server_id))


@router.get("/{server_id}/validate", response_model_exclude_unset=True)
async def validate_server(
    server_id: str,
    service: ServerService = Depends(get_server_service),
) -> Envelope:
    """Ask the provider to validate the server's connection."""
    return Envelope(success=True, data=await service.validate_server(server_id))
