"""
Database endpoints for API v1.

``POST /databases/{engine}`` creates a database of one of the supported
engines, allocates its public port and records it for the caller.
Lifecycle actions are POSTs here, unlike applications and services.
"""

from fastapi import APIRouter, Depends, Query, status

from cloud_relay_api.app.api.deps import get_database_service
from cloud_relay_api.app.core.security import CurrentUser, get_current_user
from cloud_relay_api.app.schemas.database import DatabaseCreate, DatabaseUpdate
from cloud_relay_api.app.schemas.envelope import Envelope
from cloud_relay_api.app.schemas.lifecycle import LifecycleAction
from cloud_relay_api.app.services.database_service import DatabaseService

router = APIRouter()


@router.get("", response_model_exclude_unset=True)
async def list_databases(service: DatabaseService = Depends(get_database_service)) -> Envelope:
    return Envelope(success=True, data=await service.list_databases())


@router.get("/{database_id}", response_model_exclude_unset=True)
async def get_database(
    database_id: str,
    service: DatabaseService = Depends(get_database_service),
) -> Envelope:
    return Envelope(success=True, data=await service.get_database(database_id))


@router.post("/{engine}", status_code=status.HTTP_201_CREATED, response_model_exclude_unset=True)
async def create_database(
    engine: str,
    database_in: DatabaseCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: DatabaseService = Depends(get_database_service),
) -> Envelope:
    """Create a database of ``engine`` and record it for the caller.

    Supported engines: postgresql, mongodb, clickhouse, dragonfly,
    redis, keydb, mariadb and mysql.
    """
    data, saved = await service.create_database(
        engine, database_in.model_dump(exclude_unset=True), current_user.id
    )
    return Envelope(success=True, data=data, database_record=saved.value)


@router.post("/{database_id}/{action}", response_model_exclude_unset=True)
async def run_database_action(
    database_id: str,
    action: LifecycleAction,
    service: DatabaseService = Depends(get_database_service),
) -> Envelope:
    return Envelope(success=True, data=await service.run_action(database_id, action.value))


@router.patch("/{database_uuid}", response_model_exclude_unset=True)
async def update_database(
    database_uuid: str,
    database_in: DatabaseUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: DatabaseService = Depends(get_database_service),
) -> Envelope:
    data, updated = await service.update_database(
        database_uuid, database_in.model_dump(exclude_unset=True), current_user.id
    )
    return Envelope(success=True, data=data, database_record=updated.value)


@router.delete("/{database_uuid}", response_model_exclude_unset=True)
async def delete_database(
    database_uuid: str,
    delete_configurations: str = Query("true"),
    delete_volumes: str = Query("true"),
    docker_cleanup: str = Query("true"),
    delete_connected_networks: str = Query("true"),
    current_user: CurrentUser = Depends(get_current_user),
    service: DatabaseService = Depends(get_database_service),
) -> Envelope:
    """Delete a database at the provider and the caller's record of it.

    The cleanup flags are forwarded as query parameters and all default
    to ``"true"``.
    """
    flags = {
        "delete_configurations": delete_configurations,
        "delete_volumes": delete_volumes,
        "docker_cleanup": docker_cleanup,
        "delete_connected_networks": delete_connected_networks,
    }
    data, deleted = await service.delete_database(database_uuid, current_user.id, flags)
    return Envelope(success=True, data=data, database_deleted=deleted.ok)
