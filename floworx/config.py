"""Centralized configuration for the FloWorx team-context service.

Typed module constants with environment overrides. Every value has a safe
default so the package imports and the API starts without a .env file.
"""

from __future__ import annotations

import os
from pathlib import Path

# --- App ---
APP_VERSION: str = "1.0.0"
FLOWORX_ENV: str = os.getenv("FLOWORX_ENV", "development")
LOG_LEVEL: str = os.getenv("FLOWORX_LOG_LEVEL", "INFO").upper()

# --- Role catalog ---
DEFAULT_ROLES_PATH: Path = Path(__file__).parent / "team" / "manager_roles.yaml"
ROLES_PATH: Path = Path(os.getenv("FLOWORX_ROLES_PATH", str(DEFAULT_ROLES_PATH)))

# --- Routing ---
DEFAULT_ROLE_WEIGHT: int = int(os.getenv("FLOWORX_DEFAULT_ROLE_WEIGHT", "10"))
# Priority 3 (category + role) and priority 4 (keyword) confidence ceilings
CATEGORY_MATCH_BASE: int = 70
CATEGORY_MATCH_CAP: int = 95
KEYWORD_MATCH_BASE: int = 50
KEYWORD_MATCH_CAP: int = 85
KEYWORD_MATCH_POINTS: int = 2

# --- API ---
ALLOWED_ORIGINS: list[str] = [
    origin.strip()
    for origin in os.getenv("FLOWORX_ALLOWED_ORIGINS", "https://app.floworx-iq.com").split(",")
    if origin.strip()
]
DEV_ORIGINS: list[str] = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]
API_HOST: str = os.getenv("FLOWORX_API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("PORT", "8000"))
