"""
Health endpoint for API v1.

Answers without authentication so load balancers and uptime monitors can
check the relay.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter

router = APIRouter()


@router.get("/healthcheck")
async def healthcheck() -> Dict[str, Any]:
    return {
        "success": True,
        "message": "API is online!",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
