"""
Forward-to-manager helpers.

Once an email has been classified and routed, the workflow forwards it to the
matched manager together with the AI draft (when one was produced). This
module builds the team payload the workflow routes against, the per-role
scoring config, and the forwarded email itself.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from floworx.config import DEFAULT_ROLE_WEIGHT
from floworx.team.context import coerce_records
from floworx.team.models import (
    Classification,
    EmailData,
    RoleRoutingConfig,
    StaffMember,
    Supplier,
    TeamConfig,
    TeamManager,
    TeamSupplier,
)
from floworx.team.roles import RoleRegistry, get_role_registry

RULE = "━" * 69
NO_DRAFT_MARKER = "No AI draft"


def generate_team_config(
    managers: Iterable[StaffMember | Mapping[str, Any]] | None,
    suppliers: Iterable[Supplier | Mapping[str, Any]] | None = None,
) -> TeamConfig:
    """
    Build the team payload for the "Route to Manager" step.

    Blank-named entries are dropped and names are trimmed. A manager without
    an explicit ``forward_enabled`` is forwarded to whenever it has an email.
    """
    team_managers = [
        TeamManager(
            name=m.name.strip(),
            email=m.email or None,
            roles=list(m.roles),
            forward_enabled=m.forward_enabled if m.forward_enabled is not None else bool(m.email),
        )
        for m in coerce_records(StaffMember, managers)
        if m.name.strip()
    ]
    team_suppliers = [
        TeamSupplier(name=s.name.strip(), email=s.email or None, domains=list(s.domains))
        for s in coerce_records(Supplier, suppliers)
        if s.name.strip()
    ]
    return TeamConfig(managers=team_managers, suppliers=team_suppliers)


def generate_role_config(registry: RoleRegistry | None = None) -> dict[str, RoleRoutingConfig]:
    """Category/keyword scoring config for every role in the catalog."""
    if registry is None:
        registry = get_role_registry()
    return {
        role.id: RoleRoutingConfig(
            categories=list(role.routes),
            keywords=list(role.keywords),
            weight=DEFAULT_ROLE_WEIGHT,
        )
        for role in registry.all_roles()
    }


def get_role_config(role_id: str, registry: RoleRegistry | None = None) -> RoleRoutingConfig:
    """Scoring config for one role; unknown roles score nothing."""
    return generate_role_config(registry).get(role_id) or RoleRoutingConfig()


def should_forward_to_manager(manager: TeamManager | StaffMember | None) -> bool:
    """Forward only to managers with an email, honouring an explicit opt-out."""
    if manager is None or not manager.email or not manager.email.strip():
        return False
    if manager.forward_enabled is None:
        return True
    return manager.forward_enabled is True


def generate_forward_subject(email: EmailData, classification: Classification) -> str:
    category = classification.primary_category or "Email"
    subject = email.subject or "No Subject"
    return f"[FloWorx {category}] {subject}"


def _format_confidence(confidence: float | None) -> str:
    if not confidence:
        return "N/A"
    return f"{confidence * 100:.1f}%"


def _format_timestamp(value: datetime) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S")


def _format_email_date(raw: str | None) -> str:
    if not raw:
        return "Unknown"
    try:
        return _format_timestamp(datetime.fromisoformat(raw.replace("Z", "+00:00")))
    except ValueError:
        return raw


def _has_draft(draft_text: str | None) -> bool:
    return bool(draft_text and draft_text.strip() and NO_DRAFT_MARKER not in draft_text)


def build_forward_email_body(
    email: EmailData,
    classification: Classification,
    manager: TeamManager | None,
    draft_text: str | None = None,
    now: datetime | None = None,
    registry: RoleRegistry | None = None,
) -> str:
    """
    Plain-text body of the email forwarded to the routed manager.

    Args:
        email: the original inbound email
        classification: classifier output, ideally with ``routing_decision``
        manager: the routed manager, None when unassigned
        draft_text: AI draft reply; blank or "No AI draft..." means none
        now: processing timestamp, defaults to the current time

    Returns:
        The body text; identical inputs (including ``now``) give identical text
    """
    if registry is None:
        registry = get_role_registry()
    now = now or datetime.now()
    has_draft = _has_draft(draft_text)
    decision = classification.routing_decision
    confidence = _format_confidence(classification.confidence)

    lines = [
        "",
        RULE,
        "📧 FloWorx AI Email Routing - Action Required",
        RULE,
        "",
        "🎯 CLASSIFICATION:",
        f"Category: {classification.primary_category or 'N/A'} > "
        f"{classification.secondary_category or 'General'}",
    ]
    if classification.tertiary_category:
        lines.append(f"Tertiary: {classification.tertiary_category}")
    lines += [
        f"Confidence: {confidence}",
        f"AI Can Reply: {'✅ Yes' if classification.ai_can_reply else '❌ No'}",
        f"Summary: {classification.summary or 'N/A'}",
        "",
        "👤 ROUTED TO YOU:",
        f"Name: {manager.name if manager else 'Unassigned'}",
        f"Email: {(manager.email if manager else None) or 'Not configured'}",
        f"Reason: {(decision.routing_reason if decision else '') or 'N/A'}",
        f"Routing Confidence: {decision.routing_confidence if decision else 0}%",
    ]
    if manager and manager.roles:
        labels = []
        for role_id in manager.roles:
            role = registry.get_role_by_id(role_id)
            labels.append(role.label if role else role_id)
        lines.append(f"Roles: {', '.join(labels)}")

    lines += [
        "",
        RULE,
        "📨 ORIGINAL EMAIL:",
        RULE,
        "",
        f"From: {email.from_name or email.sender} <{email.sender}>",
        f"To: {email.to}",
        f"Date: {_format_email_date(email.date)}",
        f"Subject: {email.subject}",
        "",
        email.body or "No content",
        "",
        RULE,
    ]

    if has_draft:
        lines += ["🤖 AI SUGGESTED DRAFT RESPONSE:", RULE, "", draft_text or "", "", RULE]
    else:
        reason = (
            "Draft generation failed"
            if classification.ai_can_reply
            else f"Low confidence ({confidence}) - requires human review"
        )
        lines += [
            "⚠️ NO AI DRAFT GENERATED",
            RULE,
            "",
            f"Reason: {reason}",
            "",
            "This email needs your personal attention and response.",
            "",
            RULE,
        ]

    if has_draft:
        steps = ["1. Review the AI draft above", "2. Edit if needed or approve as-is"]
    else:
        steps = ["1. Review the original email", "2. Write your response"]
    steps.append("3. Reply to customer")

    folder = classification.manager_folder or classification.primary_category or "N/A"
    lines += [
        "",
        "💡 NEXT STEPS:",
        *steps,
        "",
        f"📧 Reply to: {email.sender}",
        f"📂 Filed in: {folder}",
        "🤖 Processed by FloWorx AI",
        f"⏰ Timestamp: {_format_timestamp(now)}",
        "",
    ]
    return "\n".join(lines)
