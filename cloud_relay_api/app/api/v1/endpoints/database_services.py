"""
Mirror endpoints for services (API v1).

These routes read and edit the local ``user_cloud_services`` rows only;
none of them contacts the provider.  Listing is scoped to the caller.
The delete route removes the caller's row for a provider service id and
answers 404 when there was nothing to delete.
"""

from fastapi import APIRouter, Depends

from cloud_relay_api.app.api.deps import get_service_store
from cloud_relay_api.app.core.errors import NotFoundError, RelayError
from cloud_relay_api.app.core.security import CurrentUser, get_current_user
from cloud_relay_api.app.schemas.envelope import Envelope
from cloud_relay_api.app.schemas.service import UserCloudServiceUpdate
from cloud_relay_api.app.services.cloud_service_store import UserCloudServiceStore

router = APIRouter()


@router.get("", response_model_exclude_unset=True)
async def list_user_cloud_services(
    current_user: CurrentUser = Depends(get_current_user),
    store: UserCloudServiceStore = Depends(get_service_store),
) -> Envelope:
    """Return the caller's service records, newest first."""
    result = await store.select_all_by_owner(current_user.id)
    if result.failed:
        raise RelayError("Failed to get user cloud services")
    return Envelope(success=True, data=result.data or [])


@router.get("/{record_id}", response_model_exclude_unset=True)
async def get_user_cloud_service(
    record_id: int,
    store: UserCloudServiceStore = Depends(get_service_store),
) -> Envelope:
    result = await store.select_by_id(record_id)
    if result.failed:
        raise RelayError("Failed to get user cloud service")
    if not result.ok:
        raise NotFoundError("Service not found")
    return Envelope(success=True, data=result.data)


@router.patch("/{record_id}", response_model_exclude_unset=True)
async def update_user_cloud_service(
    record_id: int,
    updates: UserCloudServiceUpdate,
    store: UserCloudServiceStore = Depends(get_service_store),
) -> Envelope:
    result = await store.update_by_id(record_id, updates.model_dump(exclude_unset=True))
    if result.failed:
        raise RelayError("Failed to update user cloud service")
    if not result.ok:
        raise NotFoundError("Service not found or update failed")
    return Envelope(success=True, data=result.data)


@router.delete("/{service_id}", response_model_exclude_unset=True)
async def delete_user_cloud_service(
    service_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    store: UserCloudServiceStore = Depends(get_service_store),
) -> Envelope:
    """Delete the caller's record of a provider service, leaving the provider alone."""
    result = await store.delete_by_service_and_owner(service_id, current_user.id)
    if not result.ok:
        raise NotFoundError("Service not found or delete failed")
    return Envelope(success=True, message="Service deleted successfully")
