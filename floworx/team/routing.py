"""
Manager routing for classified emails.

Picks the manager an email should be forwarded to. Signals are tried in a
fixed priority order and the first one that produces a match wins:

1. Name mentioned in subject/body            (confidence 100)
2. Classifier put it under MANAGER/<name>    (confidence 95)
3. Primary category handled by a role        (70 + score, max 95)
4. MANAGER category + role keyword hits      (50 + 2 * score, max 85)
5. Known supplier mentioned -> ops manager   (confidence 90)
6. Fallback to the first manager             (confidence 30)

With no managers configured the email is left Unassigned (confidence 0).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from floworx.config import (
    CATEGORY_MATCH_BASE,
    CATEGORY_MATCH_CAP,
    KEYWORD_MATCH_BASE,
    KEYWORD_MATCH_CAP,
    KEYWORD_MATCH_POINTS,
)
from floworx.observability.logging import get_logger
from floworx.observability.telemetry import counter
from floworx.team.forwarding import generate_role_config
from floworx.team.models import (
    Classification,
    EmailData,
    RoleRoutingConfig,
    RoutingDecision,
    RoutingResult,
    TeamConfig,
    TeamManager,
)
from floworx.team.roles import RoleRegistry

logger = get_logger(__name__)

OPERATIONS_ROLE = "operations_manager"
UNASSIGNED = TeamManager(name="Unassigned", email=None, roles=[])


@dataclass
class _Candidate:
    manager: TeamManager
    score: int
    reason: str


def _best(candidates: list[_Candidate]) -> _Candidate | None:
    # max() keeps the first of equal scores, i.e. team order breaks ties
    return max(candidates, key=lambda c: c.score) if candidates else None


def _match_by_name(managers: list[TeamManager], text: str) -> TeamManager | None:
    for manager in managers:
        full_name = manager.name.lower()
        first_name = full_name.split(" ")[0]
        if full_name in text or (first_name and first_name in text):
            return manager
    return None


def _match_by_secondary_category(
    managers: list[TeamManager], secondary_category: str | None
) -> TeamManager | None:
    if not secondary_category:
        return None
    wanted = secondary_category.lower()
    return next((m for m in managers if m.name.lower() == wanted), None)


def _score_by_category(
    managers: list[TeamManager], primary: str, configs: dict[str, RoleRoutingConfig]
) -> _Candidate | None:
    candidates = []
    for manager in managers:
        score = 0
        for role_id in manager.roles:
            config = configs.get(role_id) or RoleRoutingConfig()
            if primary in config.categories:
                score += config.weight
        if score > 0:
            candidates.append(_Candidate(manager, score, f"Category: {primary}"))
    return _best(candidates)


def _score_by_keywords(
    managers: list[TeamManager], text: str, configs: dict[str, RoleRoutingConfig]
) -> _Candidate | None:
    candidates = []
    for manager in managers:
        hits = [
            keyword
            for role_id in manager.roles
            for keyword in (configs.get(role_id) or RoleRoutingConfig()).keywords
            if keyword.lower() in text
        ]
        if hits:
            score = len(hits) * KEYWORD_MATCH_POINTS
            candidates.append(_Candidate(manager, score, f"Keywords: {', '.join(hits[:3])}"))
    return _best(candidates)


def _match_by_supplier(team: TeamConfig, text: str) -> tuple[TeamManager, str] | None:
    ops_manager = next((m for m in team.managers if OPERATIONS_ROLE in m.roles), None)
    if ops_manager is None:
        return None
    for supplier in team.suppliers:
        if supplier.name.lower() in text:
            return ops_manager, supplier.name
    return None


def _decide(
    classification: Classification,
    team: TeamConfig,
    text: str,
    primary: str,
    configs: dict[str, RoleRoutingConfig],
) -> tuple[TeamManager, str, int, str]:
    managers = team.managers

    manager = _match_by_name(managers, text)
    if manager is not None:
        return manager, f'Name mentioned: "{manager.name}"', 100, "name"

    manager = _match_by_secondary_category(managers, classification.secondary_category)
    if manager is not None:
        return manager, f"AI classified as MANAGER/{manager.name}", 95, "secondary_category"

    winner = _score_by_category(managers, primary, configs)
    if winner is not None:
        confidence = min(CATEGORY_MATCH_CAP, CATEGORY_MATCH_BASE + winner.score)
        return winner.manager, winner.reason, confidence, "category"

    if primary == "MANAGER":
        winner = _score_by_keywords(managers, text, configs)
        if winner is not None:
            confidence = min(
                KEYWORD_MATCH_CAP, KEYWORD_MATCH_BASE + winner.score * KEYWORD_MATCH_POINTS
            )
            return winner.manager, winner.reason, confidence, "keywords"

    hit = _match_by_supplier(team, text)
    if hit is not None:
        return hit[0], f"Supplier: {hit[1]}", 90, "supplier"

    if managers:
        return managers[0], "Default routing", 30, "fallback"
    return UNASSIGNED, "No managers configured", 0, "unassigned"


def route_to_manager(
    classification: Classification,
    email: EmailData,
    team: TeamConfig,
    registry: RoleRegistry | None = None,
) -> RoutingResult:
    """
    Decide which manager receives a classified email.

    Args:
        classification: classifier output (primary/secondary category)
        email: the inbound email; subject and body are searched
        team: managers and suppliers from ``generate_team_config``
        registry: role catalog, defaults to the process-wide registry

    Returns:
        RoutingResult with the matched manager, the decision and the
        ``MANAGER/<name>`` folder
    """
    configs = generate_role_config(registry)
    text = f"{email.subject.lower()} {email.body.lower()}"
    primary = (classification.primary_category or "").upper()

    matched, reason, confidence, priority = _decide(classification, team, text, primary, configs)

    logger.info("Manager routing: priority=%s confidence=%d", priority, confidence)
    counter(f"routing.{priority}")

    return RoutingResult(
        matched_manager=matched,
        routing_decision=RoutingDecision(
            manager_name=matched.name,
            manager_email=matched.email,
            matched_roles=list(matched.roles),
            routing_reason=reason,
            routing_confidence=confidence,
            timestamp=datetime.now(UTC).isoformat(),
        ),
        manager_folder=f"MANAGER/{matched.name}",
    )
