"""
Manager role catalog.

Roles drive two things: the team section of the classifier system prompt and
the category/keyword scoring in manager routing. The catalog is versioned in
``manager_roles.yaml`` next to this module and loaded once per process.

Lookups are total: unknown ids resolve to ``None`` (single lookup) or are
skipped (set lookups), so a stale role id on a profile never breaks prompt
generation.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml
from pydantic import ValidationError

from floworx.config import ROLES_PATH
from floworx.observability.logging import get_logger
from floworx.team.models import Role

logger = get_logger(__name__)

HUB_SCOPE = "all"


class RoleConfigError(ValueError):
    """Raised when the role catalog file cannot be turned into a registry."""


def _unique_in_order(values: Iterable[str]) -> list[str]:
    seen: dict[str, None] = {}
    for value in values:
        seen.setdefault(value, None)
    return list(seen)


class RoleRegistry:
    """
    Immutable role catalog with the lookups used by prompt and routing code.

    Example:
        >>> registry = get_role_registry()
        >>> registry.get_role_by_id("sales_manager").routes
        ('SALES',)
        >>> registry.get_role_by_id("__missing__") is None
        True
    """

    def __init__(
        self,
        roles: Iterable[Role],
        departments: Mapping[str, Sequence[str]] | None = None,
        version: str = "unknown",
    ):
        by_id: dict[str, Role] = {}
        for role in roles:
            if role.id in by_id:
                raise RoleConfigError(f"Duplicate role id in catalog: {role.id}")
            by_id[role.id] = role

        self._roles: Mapping[str, Role] = MappingProxyType(by_id)
        self._departments: Mapping[str, tuple[str, ...]] = MappingProxyType(
            {name: tuple(routes or ()) for name, routes in (departments or {}).items()}
        )
        self.version = version

    @classmethod
    def from_yaml(cls, path: str | Path) -> RoleRegistry:
        """
        Build a registry from a YAML catalog.

        Raises:
            RoleConfigError: file missing, empty, or a role entry is malformed
        """
        try:
            with open(path, encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except FileNotFoundError as e:
            raise RoleConfigError(f"Role catalog not found: {path}") from e
        except yaml.YAMLError as e:
            raise RoleConfigError(f"Role catalog is not valid YAML: {e}") from e

        if not isinstance(config, dict) or not config.get("roles"):
            raise RoleConfigError(f"Role catalog has no roles: {path}")

        return cls.from_dict(config)

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> RoleRegistry:
        raw_roles = config.get("roles") or []
        if not isinstance(raw_roles, list):
            raise RoleConfigError("'roles' must be a list")

        try:
            roles = [Role.model_validate(entry) for entry in raw_roles]
        except ValidationError as e:
            raise RoleConfigError(f"Invalid role entry: {e}") from e

        departments = config.get("departments") or {}
        if not isinstance(departments, dict):
            raise RoleConfigError("'departments' must be a mapping")

        registry = cls(roles, departments, version=str(config.get("version", "unknown")))
        logger.info(
            "Role registry loaded: version %s, %d roles, %d departments",
            registry.version,
            len(registry),
            len(departments),
        )
        return registry

    def __len__(self) -> int:
        return len(self._roles)

    def __contains__(self, role_id: object) -> bool:
        return isinstance(role_id, str) and role_id in self._roles

    @property
    def roles(self) -> Mapping[str, Role]:
        return self._roles

    def all_roles(self) -> list[Role]:
        return list(self._roles.values())

    def get_role_by_id(self, role_id: Any) -> Role | None:
        if not isinstance(role_id, str):
            return None
        return self._roles.get(role_id)

    def resolve(self, role_ids: Iterable[Any]) -> list[Role]:
        """Roles for the given ids in input order, unknown ids dropped."""
        return [role for role in map(self.get_role_by_id, role_ids) if role is not None]

    def get_keywords_for_roles(self, role_ids: Any) -> list[str]:
        """Union of keywords for the roles, first-seen order, no duplicates."""
        if isinstance(role_ids, str) or not isinstance(role_ids, Iterable):
            return []
        return _unique_in_order(kw for role in self.resolve(role_ids) for kw in role.keywords)

    def get_routes_for_roles(self, role_ids: Any) -> list[str]:
        """Union of routes for the roles, first-seen order, no duplicates."""
        if isinstance(role_ids, str) or not isinstance(role_ids, Iterable):
            return []
        return _unique_in_order(route for role in self.resolve(role_ids) for route in role.routes)

    # -------------------------------------------------------------------------
    # Department scope
    # -------------------------------------------------------------------------

    @staticmethod
    def is_hub_mode(department_scope: Iterable[str] | None) -> bool:
        """No scope, an empty scope, or a scope containing "all" disables filtering."""
        if department_scope is None:
            return True
        scope = list(department_scope)
        return not scope or HUB_SCOPE in scope

    def routes_for_departments(self, department_scope: Iterable[str] | None) -> set[str]:
        """Routes visible to a department-mode classifier. Unknown departments add nothing."""
        if self.is_hub_mode(department_scope):
            return set()
        allowed: set[str] = set()
        for department in department_scope or ():
            allowed.update(self._departments.get(department, ()))
        return allowed


@lru_cache(maxsize=1)
def get_role_registry() -> RoleRegistry:
    """
    Process-wide registry, loaded from ``FLOWORX_ROLES_PATH`` on first call.

    Uses @lru_cache so concurrent first calls still share one instance.
    """
    return RoleRegistry.from_yaml(ROLES_PATH)


def get_role_by_id(role_id: Any) -> Role | None:
    return get_role_registry().get_role_by_id(role_id)


def get_keywords_for_roles(role_ids: Any) -> list[str]:
    return get_role_registry().get_keywords_for_roles(role_ids)


def get_routes_for_roles(role_ids: Any) -> list[str]:
    return get_role_registry().get_routes_for_roles(role_ids)


def all_roles() -> list[Role]:
    return get_role_registry().all_roles()
