"""
Unit tests for the manager role registry.

Tests cover:
- Bundled catalog loading and singleton access
- Single-id lookup (known, unknown, non-string)
- Keyword/route unions (dedup, order, unknown ids)
- Department scope resolution
- Malformed catalog rejection
"""

from __future__ import annotations

from types import MappingProxyType

import pytest
from pydantic import ValidationError

from floworx.team.roles import (
    RoleConfigError,
    RoleRegistry,
    all_roles,
    get_keywords_for_roles,
    get_role_by_id,
    get_role_registry,
    get_routes_for_roles,
)


class TestBundledCatalog:
    def test_loads_five_roles_in_order(self):
        ids = [role.id for role in all_roles()]

        assert ids == [
            "sales_manager",
            "service_manager",
            "operations_manager",
            "support_lead",
            "owner",
        ]

    def test_singleton_get_role_registry(self):
        assert get_role_registry() is get_role_registry()

    def test_registry_mapping_is_read_only(self):
        registry = get_role_registry()

        assert isinstance(registry.roles, MappingProxyType)
        with pytest.raises(TypeError):
            registry.roles["intruder"] = registry.roles["owner"]  # type: ignore[index]

    def test_roles_are_frozen(self):
        role = get_role_by_id("owner")

        with pytest.raises(ValidationError):
            role.label = "Boss"  # type: ignore[misc]


class TestGetRoleById:
    def test_sales_manager_has_ordered_routes(self):
        role = get_role_by_id("sales_manager")

        assert role is not None
        assert role.label == "Sales Manager"
        assert role.routes == ("SALES",)

    def test_service_manager_routes_keep_order(self):
        assert get_role_by_id("service_manager").routes == ("SUPPORT", "URGENT")

    def test_missing_role_returns_none(self):
        assert get_role_by_id("__missing__") is None

    @pytest.mark.parametrize("bad_id", [None, 42, "", ["owner"]])
    def test_non_string_ids_return_none(self, bad_id):
        assert get_role_by_id(bad_id) is None


class TestKeywordAndRouteUnions:
    def test_keywords_union_for_two_roles(self):
        keywords = get_keywords_for_roles(["sales_manager", "service_manager"])
        sales = list(get_role_by_id("sales_manager").keywords)
        service = list(get_role_by_id("service_manager").keywords)

        assert keywords[: len(sales)] == sales
        assert set(keywords) == set(sales) | set(service)
        assert len(keywords) == len(set(keywords))

    def test_unknown_id_is_skipped(self):
        with_unknown = get_keywords_for_roles(["sales_manager", "not_a_role", "service_manager"])

        assert with_unknown == get_keywords_for_roles(["sales_manager", "service_manager"])

    def test_shared_keyword_kept_once_at_first_position(self):
        # "partnership" belongs to both operations_manager and owner
        keywords = get_keywords_for_roles(["operations_manager", "owner"])

        assert keywords.count("partnership") == 1
        assert keywords.index("partnership") < keywords.index("strategic")

    def test_routes_deduplicated_first_seen_order(self):
        routes = get_routes_for_roles(["service_manager", "owner", "support_lead"])

        assert routes == ["SUPPORT", "URGENT", "MANAGER"]

    @pytest.mark.parametrize("bad_input", [None, "sales_manager", 7])
    def test_non_sequence_input_returns_empty(self, bad_input):
        assert get_keywords_for_roles(bad_input) == []
        assert get_routes_for_roles(bad_input) == []

    def test_empty_input_returns_empty(self):
        assert get_keywords_for_roles([]) == []
        assert get_routes_for_roles([]) == []

    def test_repeated_ids_do_not_duplicate(self, small_registry):
        assert small_registry.get_keywords_for_roles(["alpha", "alpha", "beta"]) == [
            "a1",
            "shared",
            "b1",
        ]


class TestDepartmentScope:
    @pytest.mark.parametrize("scope", [None, [], ["all"], ["sales", "all"]])
    def test_hub_mode(self, scope):
        assert RoleRegistry.is_hub_mode(scope) is True

    def test_department_mode(self):
        assert RoleRegistry.is_hub_mode(["sales"]) is False

    def test_routes_for_departments(self):
        registry = get_role_registry()

        assert registry.routes_for_departments(["sales", "operations"]) == {
            "SALES",
            "MANAGER",
            "SUPPLIERS",
        }

    def test_unknown_department_adds_nothing(self):
        assert get_role_registry().routes_for_departments(["marketing"]) == set()

    def test_hub_mode_has_no_route_filter(self):
        assert get_role_registry().routes_for_departments(["all"]) == set()


class TestCatalogValidation:
    def test_duplicate_ids_rejected(self):
        role = {"id": "x", "label": "X", "routes": [], "keywords": []}

        with pytest.raises(RoleConfigError, match="Duplicate"):
            RoleRegistry.from_dict({"roles": [role, role]})

    def test_missing_label_rejected(self):
        with pytest.raises(RoleConfigError):
            RoleRegistry.from_dict({"roles": [{"id": "x"}]})

    def test_string_keywords_rejected(self):
        with pytest.raises(RoleConfigError):
            RoleRegistry.from_dict({"roles": [{"id": "x", "label": "X", "keywords": "a, b"}]})

    def test_missing_file(self, tmp_path):
        with pytest.raises(RoleConfigError, match="not found"):
            RoleRegistry.from_yaml(tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "roles.yaml"
        path.write_text("version: '2'\n")

        with pytest.raises(RoleConfigError, match="no roles"):
            RoleRegistry.from_yaml(path)

    def test_custom_yaml_file(self, tmp_path):
        path = tmp_path / "roles.yaml"
        path.write_text(
            "version: '9'\n"
            "roles:\n"
            "  - id: dispatcher\n"
            "    label: Dispatcher\n"
            "    routes: [URGENT]\n"
            "    keywords: [truck, route]\n"
        )

        registry = RoleRegistry.from_yaml(path)

        assert registry.version == "9"
        assert "dispatcher" in registry
        assert registry.get_routes_for_roles(["dispatcher"]) == ["URGENT"]
