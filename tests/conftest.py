"""
Pytest configuration for FloWorx tests

Provides team fixtures shared across test files
"""

from __future__ import annotations

import pytest

from floworx.observability.telemetry import reset_counters
from floworx.team.roles import RoleRegistry


@pytest.fixture(autouse=True)
def _clean_counters():
    reset_counters()
    yield
    reset_counters()


@pytest.fixture
def team_managers() -> list[dict]:
    """Three managers covering all five catalog roles, as stored on a profile"""
    return [
        {"name": "John Doe", "email": "john@hottubpros.com", "roles": ["sales_manager", "owner"]},
        {"name": "Jane Smith", "email": "jane@hottubpros.com", "roles": ["service_manager"]},
        {
            "name": "Mike Johnson",
            "email": "mike@hottubpros.com",
            "roles": ["operations_manager", "support_lead"],
        },
    ]


@pytest.fixture
def team_suppliers() -> list[dict]:
    return [
        {"name": "Aqua Chem Supply", "domains": ["aquachem.com", "aquachem.ca"]},
        {"name": "Spa Parts Direct", "domains": "spapartsdirect.com"},
    ]


@pytest.fixture
def small_registry() -> RoleRegistry:
    """Two-role catalog with overlapping keywords, independent of the bundled YAML"""
    return RoleRegistry.from_dict(
        {
            "version": "test",
            "roles": [
                {
                    "id": "alpha",
                    "label": "Alpha Lead",
                    "description": "Handles alpha",
                    "routes": ["SALES", "URGENT"],
                    "keywords": ["a1", "shared"],
                },
                {
                    "id": "beta",
                    "label": "Beta Lead",
                    "description": "Handles beta",
                    "routes": ["SUPPORT", "URGENT"],
                    "keywords": ["shared", "b1"],
                },
            ],
            "departments": {"sales": ["SALES"], "support": ["SUPPORT", "URGENT"], "all": []},
        }
    )
