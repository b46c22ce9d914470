"""Health check endpoint for the FloWorx team-context API."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter

from floworx.config import APP_VERSION, FLOWORX_ENV
from floworx.team.roles import get_role_registry

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict[str, Any]:
    """Liveness probe; also reports the loaded role catalog version."""
    registry = get_role_registry()
    return {
        "status": "healthy",
        "service": "FloWorx Team Context API",
        "version": APP_VERSION,
        "environment": FLOWORX_ENV,
        "timestamp": datetime.now(UTC).isoformat(),
        "roles": {"version": registry.version, "count": len(registry)},
    }
