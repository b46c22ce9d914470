"""Pydantic request/response models for the FloWorx team-context API."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from floworx.team.models import (
    Classification,
    EmailData,
    Role,
    RoleRoutingConfig,
    StaffMember,
    Supplier,
    TeamConfig,
    TeamManager,
)

# Limits keep a single prompt render bounded
MAX_MANAGERS = 50
MAX_SUPPLIERS = 200
KNOWN_DEPARTMENTS = {"sales", "support", "operations", "all"}


class StaffMemberIn(StaffMember):
    """API clients must send a name; the profile store may not."""

    name: str


class SupplierIn(Supplier):
    name: str


class TeamRequest(BaseModel):
    managers: list[StaffMemberIn] = Field(default_factory=list, max_length=MAX_MANAGERS)
    suppliers: list[SupplierIn] = Field(default_factory=list, max_length=MAX_SUPPLIERS)


class TeamContextRequest(TeamRequest):
    department_scope: list[str] = Field(default_factory=lambda: ["all"])

    @field_validator("department_scope")
    @classmethod
    def _known_departments(cls, value: list[str]) -> list[str]:
        unknown = [d for d in value if d not in KNOWN_DEPARTMENTS]
        if unknown:
            raise ValueError(f"Unknown departments: {', '.join(unknown)}")
        return value


class TeamContextResponse(BaseModel):
    manager_info: str
    supplier_info: str
    system_context: str
    unresolved_roles: list[str] = []


class TeamConfigResponse(BaseModel):
    team: TeamConfig
    role_config: dict[str, RoleRoutingConfig]


class RouteRequest(TeamRequest):
    classification: Classification
    email: EmailData


class ForwardRequest(BaseModel):
    classification: Classification
    email: EmailData
    manager: TeamManager | None = None
    draft_text: str | None = None


class ForwardResponse(BaseModel):
    should_forward: bool
    subject: str
    body: str


class RolesResponse(BaseModel):
    version: str
    roles: list[Role]
