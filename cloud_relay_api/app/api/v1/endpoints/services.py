"""
Service endpoints for API v1.

Create, update and delete are relayed to the provider and mirrored in
the caller's ``user_cloud_services`` rows.  Reading a service returns a
fixed subset of the provider's fields.  The ``/envs`` routes manage the
service's environment variables at the provider without touching the
mirror.
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, status

from cloud_relay_api.app.api.deps import get_cloud_service_service
from cloud_relay_api.app.core.security import CurrentUser, get_current_user
from cloud_relay_api.app.schemas.envelope import Envelope
from cloud_relay_api.app.schemas.lifecycle import LifecycleAction
from cloud_relay_api.app.schemas.service import EnvCreate, EnvUpdate, ServiceCreate, ServiceUpdate
from cloud_relay_api.app.services.cloud_service_service import CloudServiceService

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED, response_model_exclude_unset=True)
async def create_service(
    service_in: ServiceCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: CloudServiceService = Depends(get_cloud_service_service),
) -> Envelope:
    """Create a service at the provider and record it for the caller.

    ``database_record`` is ``null`` when the provider call succeeded
    but the local record could not be written.
    """
    data, saved = await service.create_service(
        service_in.model_dump(exclude_unset=True), current_user.id
    )
    return Envelope(success=True, data=data, database_record=saved.value)


@router.patch("/{service_id}", response_model_exclude_unset=True)
async def update_service(
    service_id: str,
    service_in: ServiceUpdate,
    service: CloudServiceService = Depends(get_cloud_service_service),
) -> Envelope:
    data, updated = await service.update_service(
        service_id, service_in.model_dump(exclude_unset=True)
    )
    return Envelope(success=True, data=data, database_record=updated.value)


@router.delete("/{service_id}", response_model_exclude_unset=True)
async def delete_service(
    service_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: CloudServiceService = Depends(get_cloud_service_service),
) -> Envelope:
    """Delete a service at the provider and the caller's record of it."""
    data, deleted = await service.delete_service(service_id, current_user.id)
    return Envelope(success=True, data=data, database_deleted=deleted.ok)


@router.get("/{service_id}", response_model_exclude_unset=True)
async def get_service(
    service_id: str,
    service: CloudServiceService = Depends(get_cloud_service_service),
) -> Envelope:
    """Return the public fields of a provider service."""
    return Envelope(success=True, data=await service.get_service(service_id))


@router.get("/{service_id}/envs", response_model_exclude_unset=True)
async def list_service_envs(
    service_id: str,
    service: CloudServiceService = Depends(get_cloud_service_service),
) -> Envelope:
    return Envelope(success=True, data=await service.list_envs(service_id))


@router.post(
    "/{service_id}/envs",
    status_code=status.HTTP_201_CREATED,
    response_model_exclude_unset=True,
)
async def create_service_env(
    service_id: str,
    env_in: EnvCreate,
    service: CloudServiceService = Depends(get_cloud_service_service),
) -> Envelope:
    data = await service.create_env(service_id, env_in.model_dump(exclude_unset=True))
    return Envelope(success=True, data=data)


# Must stay above the ``{env_id}`` route or "bulk" would be taken for an id.
@router.patch("/{service_id}/envs/bulk", response_model_exclude_unset=True)
async def update_service_envs_bulk(
    service_id: str,
    envs_in: Dict[str, Any] = Body(...),
    service: CloudServiceService = Depends(get_cloud_service_service),
) -> Envelope:
    return Envelope(success=True, data=await service.update_envs_bulk(service_id, envs_in))


@router.patch("/{service_id}/envs/{env_id}", response_model_exclude_unset=True)
async def update_service_env(
    service_id: str,
    env_id: str,
    env_in: EnvUpdate,
    service: CloudServiceService = Depends(get_cloud_service_service),
) -> Envelope:
    data = await service.update_env(service_id, env_id, env_in.model_dump(exclude_unset=True))
    return Envelope(success=True, data=data)


@router.delete("/{service_id}/envs/{env_id}", response_model_exclude_unset=True)
async def delete_service_env(
    service_id: str,
    env_id: str,
    service: CloudServiceService = Depends(get_cloud_service_service),
) -> Envelope:
    return Envelope(success=True, data=await service.delete_env(service_id, env_id))


@router.get("/{service_id}/{action}", response_model_exclude_unset=True)
async def run_service_action(
    service_id: str,
    action: LifecycleAction,
    service: CloudServiceService = Depends(get_cloud_service_service),
) -> Envelope:
    """Start, stop or restart a service."""
    return Envelope(success=True, data=await service.run_action(service_id, action.value))
