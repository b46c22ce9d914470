"""FastAPI server for FloWorx team context"""

from __future__ import annotations

from typing import Any

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from floworx.api.routes.health import router as health_router
from floworx.api.routes.team import router as team_router
from floworx.config import (
    ALLOWED_ORIGINS,
    API_HOST,
    API_PORT,
    APP_VERSION,
    DEV_ORIGINS,
    FLOWORX_ENV,
)
from floworx.observability.logging import get_logger
from floworx.observability.telemetry import counter, log_event
from floworx.team.roles import RoleConfigError, get_role_registry
from floworx.utils.redaction import redact

# Load environment variables from .env file
load_dotenv()

app = FastAPI(title="FloWorx Team Context API", version=APP_VERSION)

logger = get_logger(__name__)


# Custom validation error handler to prevent information leakage
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Return a sanitized 422 that names the bad fields but not the rules.

    Side Effects:
        - Logs detailed validation errors (URL redacted)
        - Increments validation error counter
    """
    logger.warning("Validation error on %s: %s", redact(str(request.url)), exc.errors())
    counter("api.validation_errors")

    return JSONResponse(
        status_code=422,
        content={
            "detail": "Invalid request format. Please check your request and try again.",
            "error_count": len(exc.errors()),
            "invalid_fields": [str(err["loc"][-1]) for err in exc.errors()],
        },
    )


origins = list(ALLOWED_ORIGINS)
if FLOWORX_ENV == "development":
    origins.extend(DEV_ORIGINS)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
)

# Load the role catalog up front so a broken catalog fails the deploy, not a request
try:
    registry = get_role_registry()
except RoleConfigError as e:
    logger.critical("Role catalog could not be loaded: %s", e)
    raise RuntimeError(f"Role catalog initialization failed: {e}") from e

app.include_router(health_router)
app.include_router(team_router)

log_event("api.startup", service="floworx-team-context", version=APP_VERSION, roles=len(registry))


@app.get("/")
def root() -> dict[str, Any]:
    return {
        "service": "FloWorx Team Context API",
        "version": APP_VERSION,
        "status": "running",
        "endpoints": {
            "health": "/health",
            "roles": "/api/roles",
            "context": "/api/team/context",
            "config": "/api/team/config",
            "route": "/api/team/route",
            "forward": "/api/team/forward",
        },
    }


def main() -> None:
    """Console entry point: ``floworx-api``."""
    uvicorn.run("floworx.api.app:app", host=API_HOST, port=API_PORT)
