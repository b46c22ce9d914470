"""
Unit tests for manager routing.

Each priority level is exercised with an email that only triggers that level,
plus the fallback and unassigned paths.
"""

from __future__ import annotations

import pytest

from floworx.observability.telemetry import get_counter
from floworx.team.forwarding import generate_team_config
from floworx.team.models import Classification, EmailData, TeamConfig
from floworx.team.routing import route_to_manager


@pytest.fixture
def team(team_managers, team_suppliers) -> TeamConfig:
    return generate_team_config(team_managers, team_suppliers)


def _email(subject: str = "", body: str = "") -> EmailData:
    return EmailData(sender="someone@example.com", subject=subject, body=body)


class TestPriorityCascade:
    def test_name_mention_wins(self, team):
        result = route_to_manager(
            Classification(primary_category="SALES"),
            _email("Question for Jane", "Can you call me back?"),
            team,
        )

        assert result.matched_manager.name == "Jane Smith"
        assert result.routing_decision.routing_reason == 'Name mentioned: "Jane Smith"'
        assert result.routing_decision.routing_confidence == 100
        assert result.manager_folder == "MANAGER/Jane Smith"
        assert get_counter("routing.name") == 1

    def test_secondary_category_match(self, team):
        result = route_to_manager(
            Classification(primary_category="MANAGER", secondary_category="mike johnson"),
            _email("Weekly numbers", "See attached."),
            team,
        )

        assert result.matched_manager.name == "Mike Johnson"
        assert result.routing_decision.routing_confidence == 95
        assert result.routing_decision.routing_reason == "AI classified as MANAGER/Mike Johnson"

    def test_category_role_match(self, team):
        result = route_to_manager(
            Classification(primary_category="sales"),
            _email("Pool cover", "Looking for a cover."),
            team,
        )

        assert result.matched_manager.name == "John Doe"
        assert result.routing_decision.routing_reason == "Category: SALES"
        assert result.routing_decision.routing_confidence == 80

    def test_category_tie_keeps_team_order(self, team):
        # URGENT: John (owner) and Jane (service_manager) both score 10
        result = route_to_manager(
            Classification(primary_category="URGENT"), _email("Flooding", "Water everywhere"), team
        )

        assert result.matched_manager.name == "John Doe"

    def test_category_score_sums_roles(self):
        team = generate_team_config(
            [
                {"name": "Solo", "roles": ["support_lead"]},
                {"name": "Double", "roles": ["service_manager", "support_lead"]},
            ]
        )

        result = route_to_manager(
            Classification(primary_category="SUPPORT"), _email("Help", "x"), team
        )

        assert result.matched_manager.name == "Double"
        assert result.routing_decision.routing_confidence == 90

    def test_category_beats_keywords_for_manager_category(self):
        team = generate_team_config(
            [
                {"name": "Alex", "roles": ["operations_manager"]},
                {"name": "Bea", "roles": ["owner"]},
            ]
        )

        result = route_to_manager(
            Classification(primary_category="MANAGER"),
            _email("Legal review", "Please check the compliance and regulation details."),
            team,
        )

        # MANAGER is a category for both roles, so category scoring decides first
        assert result.routing_decision.routing_reason == "Category: MANAGER"

    def test_keyword_match_when_no_role_owns_category(self):
        team = generate_team_config(
            [
                {"name": "Alex", "roles": ["sales_manager"]},
                {"name": "Bea", "roles": ["service_manager"]},
            ]
        )

        result = route_to_manager(
            Classification(primary_category="MANAGER"),
            _email("Broken pump", "It is broken, need a repair appointment."),
            team,
        )

        assert result.matched_manager.name == "Bea"
        assert result.routing_decision.routing_reason == "Keywords: repair, broken, appointment"
        # 3 keyword hits -> score 6 -> 50 + 2 * 6
        assert result.routing_decision.routing_confidence == 62

    def test_supplier_mention_routes_to_operations(self, team):
        result = route_to_manager(
            Classification(primary_category="BANKING"),
            _email("Statement", "Your Aqua Chem Supply statement is ready."),
            team,
        )

        assert result.matched_manager.name == "Mike Johnson"
        assert result.routing_decision.routing_reason == "Supplier: Aqua Chem Supply"
        assert result.routing_decision.routing_confidence == 90

    def test_fallback_to_first_manager(self, team):
        result = route_to_manager(
            Classification(primary_category="PROMO"), _email("Sale", "Big discounts"), team
        )

        assert result.matched_manager.name == "John Doe"
        assert result.routing_decision.routing_reason == "Default routing"
        assert result.routing_decision.routing_confidence == 30

    def test_no_managers_unassigned(self):
        result = route_to_manager(
            Classification(primary_category="SALES"), _email("Quote"), TeamConfig()
        )

        assert result.matched_manager.name == "Unassigned"
        assert result.routing_decision.routing_reason == "No managers configured"
        assert result.routing_decision.routing_confidence == 0
        assert result.manager_folder == "MANAGER/Unassigned"


class TestRoutingDecision:
    def test_decision_carries_manager_details(self, team):
        result = route_to_manager(
            Classification(primary_category="SALES"), _email("Pricing", "x"), team
        )

        decision = result.routing_decision
        assert decision.manager_name == "John Doe"
        assert decision.manager_email == "john@hottubpros.com"
        assert decision.matched_roles == ["sales_manager", "owner"]
        assert decision.timestamp is not None

    def test_unknown_roles_do_not_score(self):
        team = generate_team_config([{"name": "Ghost", "roles": ["not_a_role"]}])

        result = route_to_manager(Classification(primary_category="SALES"), _email("x"), team)

        assert result.routing_decision.routing_reason == "Default routing"
