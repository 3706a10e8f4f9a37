"""
Application endpoints for API v1.

Applications can be listed, inspected and started, stopped or
restarted.  The lifecycle actions are ``GET`` requests both here and
at the provider.
"""

from fastapi import APIRouter, Depends

from cloud_relay_api.app.api.deps import get_application_service
from cloud_relay_api.app.schemas.envelope import Envelope
from cloud_relay_api.app.schemas.lifecycle import LifecycleAction
from cloud_relay_api.app.services.application_service import ApplicationService

router = APIRouter()


@router.get("", response_model_exclude_unset=True)
async def list_applications(
    service: ApplicationService = Depends(get_application_service),
) -> Envelope:
    return Envelope(success=True, data=await service.list_applications())


@router.get("/{application_id}", response_model_exclude_unset=True)
async def get_application(
    application_id: str,
    service: ApplicationService = Depends(get_application_service),
) -> Envelope:
    return Envelope(success=True, data=await service.get_application(application_id))


@router.get("/{application_id}/{action}", response_model_exclude_unset=True)
async def run_application_action(
    application_id: str,
    action: LifecycleAction,
    service: ApplicationService = Depends(get_application_service),
) -> Envelope:
    """Start, stop or restart an application."""
    return Envelope(success=True, data=await service.run_action(application_id, action.value))
