"""
Top-level router for version 1 of the API.

Every provider family and both mirror families require an
authenticated caller; the dependency is attached here once per family
rather than in each handler.  The health check stays public.
"""

from fastapi import APIRouter, Depends

from cloud_relay_api.app.core.security import get_current_user

from .endpoints import (
    applications,
    database_services,
    databases,
    health,
    resources,
    servers,
    services,
    user_databases,
)

router = APIRouter()

authenticated = [Depends(get_current_user)]

router.include_router(health.router, tags=["health"])
router.include_router(
    resources.router, prefix="/resources", tags=["resources"], dependencies=authenticated
)
router.include_router(
    applications.router, prefix="/applications", tags=["applications"], dependencies=authenticated
)
router.include_router(
    services.router, prefix="/services", tags=["services"], dependencies=authenticated
)
router.include_router(
    database_services.router,
    prefix="/database/services",
    tags=["database services"],
    dependencies=authenticated,
)
router.include_router(
    servers.router, prefix="/servers", tags=["servers"], dependencies=authenticated
)
router.include_router(
    databases.router, prefix="/databases", tags=["databases"], dependencies=authenticated
)
router.include_router(
    user_databases.router,
    prefix="/user-databases",
    tags=["user databases"],
    dependencies=authenticated,
)
