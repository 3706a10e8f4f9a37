"""
Resource endpoints for API v1.

Read-only relays of the provider's resource listing.
"""

from fastapi import APIRouter, Depends

from cloud_relay_api.app.api.deps import get_resource_service
from cloud_relay_api.app.schemas.envelope import Envelope
from cloud_relay_api.app.services.resource_service import ResourceService

router = APIRouter()


@router.get("", response_model_exclude_unset=True)
async def list_resources(
    service: ResourceService = Depends(get_resource_service),
) -> Envelope:
    """Return every resource known to the provider."""
    return Envelope(success=True, data=await service.list_resources())


@router.get("/{resource_id}", response_model_exclude_unset=True)
async def get_resource(
    resource_id: str,
    service: ResourceService = Depends(get_resource_service),
) -> Envelope:
    return Envelope(success=True, data=await service.get_resource(resource_id))
