"""Team roles, prompt context and manager routing."""

from __future__ import annotations

from floworx.team.context import (
    build_manager_info_for_ai,
    build_supplier_info_for_ai,
    build_team_context,
    filter_manager_info_by_department,
)
from floworx.team.models import Role, StaffMember, Supplier
from floworx.team.roles import (
    RoleConfigError,
    RoleRegistry,
    get_keywords_for_roles,
    get_role_by_id,
    get_role_registry,
    get_routes_for_roles,
)

__all__ = [
    "Role",
    "RoleConfigError",
    "RoleRegistry",
    "StaffMember",
    "Supplier",
    "build_manager_info_for_ai",
    "build_supplier_info_for_ai",
    "build_team_context",
    "filter_manager_info_by_department",
    "get_keywords_for_roles",
    "get_role_by_id",
    "get_role_registry",
    "get_routes_for_roles",
]
