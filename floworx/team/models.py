"""
Domain models (Pydantic v2) for team context.

Roles are catalog entries loaded once at startup. Staff members and suppliers
arrive per request from the profile store, so they tolerate extra columns and
normalize loosely-typed fields (string-or-list domains, null names and role lists) at
the boundary. Everything downstream sees a single canonical shape.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _as_str_tuple(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (set, frozenset)):
        return tuple(sorted(str(v) for v in value))
    if isinstance(value, Iterable):
        return tuple(str(v) for v in value)
    return (str(value),)


def _blank_if_none(value: Any) -> Any:
    # Profile rows may carry a null name; builders skip blank names
    return "" if value is None else value


class Role(BaseModel):
    """A manager role from the catalog."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    description: str = ""
    icon: str = ""
    routes: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()

    @field_validator("routes", "keywords", mode="before")
    @classmethod
    def _require_list(cls, value: Any) -> Any:
        if isinstance(value, str):
            raise ValueError("must be a list of strings, not a single string")
        return value


class StaffMember(BaseModel):
    """A manager/staff record as stored on the business profile."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = ""
    email: str | None = None
    roles: tuple[str, ...] = ()
    forward_enabled: bool | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _null_name_is_blank(cls, value: Any) -> Any:
        return _blank_if_none(value)

    @field_validator("roles", mode="before")
    @classmethod
    def _normalize_roles(cls, value: Any) -> tuple[str, ...]:
        return _as_str_tuple(value)


class Supplier(BaseModel):
    """A known supplier. ``domains`` may arrive as "a.com, b.com" or a list."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = ""
    email: str | None = None
    domains: tuple[str, ...] = ()

    @field_validator("name", mode="before")
    @classmethod
    def _null_name_is_blank(cls, value: Any) -> Any:
        return _blank_if_none(value)

    @field_validator("domains", mode="before")
    @classmethod
    def _normalize_domains(cls, value: Any) -> tuple[str, ...]:
        if isinstance(value, str):
            return tuple(part.strip() for part in value.split(",") if part.strip())
        return _as_str_tuple(value)


# =============================================================================
# n8n TEAM CONFIGURATION
# =============================================================================


class TeamManager(BaseModel):
    name: str
    email: str | None = None
    roles: list[str] = Field(default_factory=list)
    forward_enabled: bool | None = None


class TeamSupplier(BaseModel):
    name: str
    email: str | None = None
    domains: list[str] = Field(default_factory=list)


class TeamConfig(BaseModel):
    """Team payload consumed by the "Route to Manager" workflow step."""

    managers: list[TeamManager] = Field(default_factory=list)
    suppliers: list[TeamSupplier] = Field(default_factory=list)


class RoleRoutingConfig(BaseModel):
    categories: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    weight: int = 0


# =============================================================================
# CLASSIFIER OUTPUT / ROUTING
# =============================================================================


class EmailData(BaseModel):
    """The inbound email as prepared by the workflow."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    sender: str = Field(default="", alias="from")
    from_name: str | None = Field(default=None, alias="fromName")
    to: str = ""
    subject: str = ""
    body: str = ""
    date: str | None = None


class RoutingDecision(BaseModel):
    manager_name: str | None = None
    manager_email: str | None = None
    matched_roles: list[str] = Field(default_factory=list)
    routing_reason: str = ""
    routing_confidence: int = 0
    timestamp: str | None = None


class Classification(BaseModel):
    """Classifier JSON output, optionally already enriched with routing."""

    model_config = ConfigDict(extra="allow")

    primary_category: str | None = None
    secondary_category: str | None = None
    tertiary_category: str | None = None
    confidence: float | None = None
    ai_can_reply: bool = False
    summary: str | None = None
    routing_decision: RoutingDecision | None = None
    manager_folder: str | None = None


class RoutingResult(BaseModel):
    matched_manager: TeamManager
    routing_decision: RoutingDecision
    manager_folder: str
