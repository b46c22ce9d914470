"""
Team context sections for the email classifier system prompt.

Two sections are produced from the business profile:
- "Team Manager Information": who is on the team, what each role covers and
  the keywords that point at it
- "Known Suppliers": supplier names and their sending domains

Both builders return "" for an empty team so the caller can concatenate the
result unconditionally. Output is deterministic for identical input and is
embedded verbatim; nothing here escapes, truncates or validates addresses.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel

from floworx.observability.logging import get_logger
from floworx.observability.telemetry import counter
from floworx.team.models import Role, StaffMember, Supplier
from floworx.team.roles import RoleRegistry, get_role_registry
from floworx.utils.redaction import redact_email

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
UnresolvedRoleCallback = Callable[[StaffMember, str], None]

MANAGER_SECTION_HEADING = "### Team Manager Information"
SUPPLIER_SECTION_HEADING = "### Known Suppliers"

MANAGER_GUIDANCE = (
    "\n**Classification Guidance for Manager Routing:**\n"
    "- When an email mentions a manager by name, consider routing to that manager\n"
    "- When an email contains keywords matching a manager's role, "
    "consider categorizing accordingly\n"
    '- For emails addressed "Dear [Manager Name]" or "Hi [Manager Name]", '
    "prioritize that manager\n"
    "- Combine manager role keywords with email content to determine "
    "the appropriate category\n"
)

SUPPLIER_GUIDANCE = (
    "\n**Classification Guidance for Supplier Emails:**\n"
    "- Emails from supplier domains should typically be categorized as SUPPLIERS\n"
    "- Invoices and receipts from suppliers go to Banking > receipts > PaymentSent\n"
    "- Supplier promotional emails go to Promo category\n"
)


def coerce_records(
    model: type[ModelT], records: Iterable[ModelT | Mapping[str, Any]] | None
) -> list[ModelT]:
    """
    Accept model instances or raw profile rows and return model instances.

    Rows with a missing or null name come back with a blank name; the
    builders skip those.

    Raises:
        pydantic.ValidationError: a field has an unusable type
    """
    if not records:
        return []
    return [r if isinstance(r, model) else model.model_validate(r) for r in records]


def _scope_label(department_scope: Sequence[str]) -> str:
    return " + ".join(d[:1].upper() + d[1:] for d in department_scope)


def _visible_roles(
    member: StaffMember,
    registry: RoleRegistry,
    allowed_routes: set[str] | None,
    on_unresolved: UnresolvedRoleCallback | None,
) -> list[Role]:
    roles: list[Role] = []
    for role_id in member.roles:
        role = registry.get_role_by_id(role_id)
        if role is None:
            logger.debug(
                "Unknown role id %r on manager %s, skipping", role_id, redact_email(member.email)
            )
            counter("team_context.unresolved_role")
            if on_unresolved is not None:
                on_unresolved(member, role_id)
            continue
        if allowed_routes is not None and not allowed_routes.intersection(role.routes):
            continue
        roles.append(role)
    return roles


def _render_member(member: StaffMember, roles: list[Role], registry: RoleRegistry) -> str:
    text = f"**{member.name}**"
    if member.email:
        text += f" ({member.email})"
    text += "\n"

    if roles:
        text += "Roles:\n"
        for role in roles:
            text += f"  - {role.label}: {role.description}\n"
        keywords = registry.get_keywords_for_roles([role.id for role in roles])
        text += f"Keywords: {', '.join(keywords)}\n"
    return text


def build_manager_info_for_ai(
    staff: Iterable[StaffMember | Mapping[str, Any]] | None,
    department_scope: Sequence[str] | None = ("all",),
    on_unresolved: UnresolvedRoleCallback | None = None,
    registry: RoleRegistry | None = None,
) -> str:
    """
    Render the "Team Manager Information" prompt section.

    In hub mode (scope absent or containing "all") every named manager is
    listed. In department mode only managers holding a role routed to one
    of the scope's departments are listed, and only those roles are shown.

    Args:
        staff: managers from the business profile (models or raw rows)
        department_scope: e.g. ["sales", "support"] or ["all"]
        on_unresolved: called with (member, role_id) for every unknown role id
        registry: role catalog, defaults to the process-wide registry

    Returns:
        The section text, or "" when there is nobody to list
    """
    members = [m for m in coerce_records(StaffMember, staff) if m.name.strip()]
    if not members:
        return ""

    if registry is None:
        registry = get_role_registry()
    hub_mode = registry.is_hub_mode(department_scope)
    allowed_routes = None if hub_mode else registry.routes_for_departments(department_scope)

    rendered: list[str] = []
    for member in members:
        roles = _visible_roles(member, registry, allowed_routes, on_unresolved)
        if not hub_mode and not roles:
            continue
        rendered.append(_render_member(member, roles, registry))

    if not rendered:
        return ""

    info = f"\n\n{MANAGER_SECTION_HEADING}:\n\n"
    info += (
        "Use this information to identify emails intended for specific managers "
        "by name or by their role responsibilities.\n\n"
    )
    info += "\n".join(rendered)
    info += MANAGER_GUIDANCE

    if not hub_mode:
        info += (
            f"\n**Department Mode:** Only showing managers relevant to "
            f"{_scope_label(list(department_scope or ()))} department(s)\n"
        )
    return info


def build_supplier_info_for_ai(
    suppliers: Iterable[Supplier | Mapping[str, Any]] | None,
) -> str:
    """Render the "Known Suppliers" prompt section, or "" with no named suppliers."""
    records = [s for s in coerce_records(Supplier, suppliers) if s.name.strip()]
    if not records:
        return ""

    info = f"\n\n{SUPPLIER_SECTION_HEADING}:\n\n"
    info += "Use this information to identify emails from known suppliers and vendors.\n\n"

    for supplier in records:
        info += f"- **{supplier.name}**"
        if supplier.domains:
            info += f" (Domains: {', '.join(supplier.domains)})"
        info += "\n"

    info += SUPPLIER_GUIDANCE
    return info


def filter_manager_info_by_department(
    system_message: str,
    staff: Iterable[StaffMember | Mapping[str, Any]] | None,
    department_scope: Sequence[str] | None,
    registry: RoleRegistry | None = None,
) -> str:
    """
    Swap the manager section of an existing system message for a scoped one.

    Used once the department scope of a deployment is known, after the full
    hub-mode message was generated. The section runs from its heading to the
    next "\\n\\n###" heading or the end of the message.
    """
    members = coerce_records(StaffMember, staff)
    if not system_message or not members:
        return system_message

    if registry is None:
        registry = get_role_registry()
    if registry.is_hub_mode(department_scope):
        return system_message

    start = system_message.find(MANAGER_SECTION_HEADING)
    if start == -1:
        return system_message
    end = system_message.find("\n\n###", start + 1)

    before = system_message[:start].rstrip("\n")
    after = system_message[end:] if end > -1 else ""
    scoped = build_manager_info_for_ai(members, department_scope, registry=registry)
    return before + scoped + after


def build_team_context(
    staff: Iterable[StaffMember | Mapping[str, Any]] | None,
    suppliers: Iterable[Supplier | Mapping[str, Any]] | None,
    department_scope: Sequence[str] | None = ("all",),
    on_unresolved: UnresolvedRoleCallback | None = None,
) -> str:
    """Manager section followed by supplier section, ready to append to a prompt."""
    return build_manager_info_for_ai(
        staff, department_scope, on_unresolved=on_unresolved
    ) + build_supplier_info_for_ai(suppliers)
