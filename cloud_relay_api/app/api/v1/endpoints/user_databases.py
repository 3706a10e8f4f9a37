"""
Mirror endpoints for databases (API v1).

CRUD over the caller's ``user_cloud_databases`` rows.  Every route is
scoped to the authenticated owner; a row belonging to someone else is
reported as not found.
"""

from fastapi import APIRouter, Depends, status

from cloud_relay_api.app.api.deps import get_database_store
from cloud_relay_api.app.core.errors import NotFoundError, RelayError, require_fields
from cloud_relay_api.app.core.security import CurrentUser, get_current_user
from cloud_relay_api.app.schemas.database import UserCloudDatabaseCreate, UserCloudDatabaseUpdate
from cloud_relay_api.app.schemas.envelope import Envelope
from cloud_relay_api.app.services.cloud_database_store import UserCloudDatabaseStore
from cloud_relay_api.app.services.results import StoreResult

router = APIRouter()


def _unwrap(result: StoreResult, failure: str, missing: str = "Database not found"):
    if result.failed:
        raise RelayError(failure)
    if not result.ok:
        raise NotFoundError(missing)
    return result.data


@router.get("", response_model_exclude_unset=True)
async def list_user_databases(
    current_user: CurrentUser = Depends(get_current_user),
    store: UserCloudDatabaseStore = Depends(get_database_store),
) -> Envelope:
    result = await store.list_by_owner(current_user.id)
    if result.failed:
        raise RelayError("Failed to get user databases")
    return Envelope(success=True, data=result.data or [])


@router.post("", status_code=status.HTTP_201_CREATED, response_model_exclude_unset=True)
async def create_user_database(
    database_in: UserCloudDatabaseCreate,
    current_user: CurrentUser = Depends(get_current_user),
    store: UserCloudDatabaseStore = Depends(get_database_store),
) -> Envelope:
    record = database_in.model_dump(exclude_unset=True)
    require_fields(record, "database_uuid", "type")
    record["user_id"] = current_user.id
    saved = await store.insert(record)
    if not saved.ok:
        raise RelayError("Failed to create user database")
    return Envelope(success=True, data=saved.data)


# Declared before ``/{record_id}`` so "uuid" is never parsed as an id.
@router.get("/uuid/{database_uuid}", response_model_exclude_unset=True)
async def get_user_database_by_uuid(
    database_uuid: str,
    current_user: CurrentUser = Depends(get_current_user),
    store: UserCloudDatabaseStore = Depends(get_database_store),
) -> Envelope:
    result = await store.get_by_uuid(database_uuid, current_user.id)
    return Envelope(success=True, data=_unwrap(result, "Failed to get user database"))


@router.get("/{record_id}", response_model_exclude_unset=True)
async def get_user_database(
    record_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    store: UserCloudDatabaseStore = Depends(get_database_store),
) -> Envelope:
    result = await store.get(record_id, current_user.id)
    return Envelope(success=True, data=_unwrap(result, "Failed to get user database"))


@router.patch("/{record_id}", response_model_exclude_unset=True)
async def update_user_database(
    record_id: int,
    database_in: UserCloudDatabaseUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    store: UserCloudDatabaseStore = Depends(get_database_store),
) -> Envelope:
    result = await store.update(
        record_id, current_user.id, database_in.model_dump(exclude_unset=True)
    )
    data = _unwrap(
        result, "Failed to update user database", "Database not found or update failed"
    )
    return Envelope(success=True, data=data)


@router.delete("/{record_id}", response_model_exclude_unset=True)
async def delete_user_database(
    record_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    store: UserCloudDatabaseStore = Depends(get_database_store),
) -> Envelope:
    result = await store.delete(record_id, current_user.id)
    _unwrap(result, "Failed to delete user database", "Database not found or delete failed")
    return Envelope(success=True, message="Database deleted successfully")
