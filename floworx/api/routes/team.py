"""Team context endpoints.

- GET  /api/roles          - Role catalog
- POST /api/team/context   - Manager + supplier prompt sections
- POST /api/team/config    - Team payload and role scoring config for routing
- POST /api/team/route     - Pick the manager for a classified email
- POST /api/team/forward   - Forward subject/body for the routed manager
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from floworx.api.models import (
    ForwardRequest,
    ForwardResponse,
    RolesResponse,
    RouteRequest,
    TeamConfigResponse,
    TeamContextRequest,
    TeamContextResponse,
    TeamRequest,
)
from floworx.observability.telemetry import counter, log_event
from floworx.team.context import build_manager_info_for_ai, build_supplier_info_for_ai
from floworx.team.forwarding import (
    build_forward_email_body,
    generate_forward_subject,
    generate_role_config,
    generate_team_config,
    should_forward_to_manager,
)
from floworx.team.models import RoutingResult, StaffMember
from floworx.team.roles import get_role_registry
from floworx.team.routing import route_to_manager

router = APIRouter(prefix="/api", tags=["team"])


@router.get("/roles")
async def list_roles() -> RolesResponse:
    registry = get_role_registry()
    return RolesResponse(version=registry.version, roles=registry.all_roles())


@router.post("/team/context")
async def team_context(request: TeamContextRequest) -> TeamContextResponse:
    """Render the team sections of the classifier system prompt.

    Side Effects:
        - Logs telemetry events (counts only, no names or addresses)
    """
    unresolved: list[str] = []

    def _record(_member: StaffMember, role_id: str) -> None:
        if role_id not in unresolved:
            unresolved.append(role_id)

    try:
        manager_info = build_manager_info_for_ai(
            request.managers, request.department_scope, on_unresolved=_record
        )
        supplier_info = build_supplier_info_for_ai(request.suppliers)
    except Exception as e:
        log_event("api.team_context.error", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to build team context") from e

    log_event(
        "api.team_context.success",
        managers=len(request.managers),
        suppliers=len(request.suppliers),
        scope=request.department_scope,
        unresolved_roles=len(unresolved),
    )
    return TeamContextResponse(
        manager_info=manager_info,
        supplier_info=supplier_info,
        system_context=manager_info + supplier_info,
        unresolved_roles=unresolved,
    )


@router.post("/team/config")
async def team_config(request: TeamRequest) -> TeamConfigResponse:
    return TeamConfigResponse(
        team=generate_team_config(request.managers, request.suppliers),
        role_config=generate_role_config(),
    )


@router.post("/team/route")
async def route_email(request: RouteRequest) -> RoutingResult:
    """Route a classified email to a manager.

    Side Effects:
        - Increments routing counters
    """
    team = generate_team_config(request.managers, request.suppliers)
    result = route_to_manager(request.classification, request.email, team)
    counter("api.team_route.requests")
    log_event(
        "api.team_route.success",
        confidence=result.routing_decision.routing_confidence,
        team_size=len(team.managers),
    )
    return result


@router.post("/team/forward")
async def forward_email(request: ForwardRequest) -> ForwardResponse:
    return ForwardResponse(
        should_forward=should_forward_to_manager(request.manager),
        subject=generate_forward_subject(request.email, request.classification),
        body=build_forward_email_body(
            request.email, request.classification, request.manager, request.draft_text
        ),
    )
