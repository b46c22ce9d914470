"""
Logging setup for FloWorx.

Every module asks ``get_logger(__name__)`` for its logger. The first call
installs one stream handler on the root logger at ``config.LOG_LEVEL``.
Manager and supplier rows carry real mailbox addresses, so that handler
hashes any address found in a formatted message via ``redact_email``.
"""

from __future__ import annotations

import logging
import re
from typing import Final

from floworx.config import LOG_LEVEL
from floworx.utils.redaction import redact_email

_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

# Already-redacted addresses ("hash:<hex>@domain") are left alone
EMAIL_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"(?<![\w.+-])(?<!hash:)[\w.+-]+@[\w-]+(?:\.[\w-]+)+"
)

_handler: logging.Handler | None = None


def resolve_level(level_name: str) -> int:
    """Map a level name to its logging constant, INFO for unknown names."""
    level = logging.getLevelName(level_name.upper())
    return level if isinstance(level, int) else logging.INFO


class EmailRedactingFilter(logging.Filter):
    """Rewrite a record's message with every email address hashed."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = EMAIL_PATTERN.sub(lambda m: redact_email(m.group(0)), message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def _install_handler() -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT))
    handler.addFilter(EmailRedactingFilter())

    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(resolve_level(LOG_LEVEL))
    return handler


def get_logger(name: str) -> logging.Logger:
    """Return a module logger; the root handler is installed on first use."""
    global _handler

    if _handler is None:
        _handler = _install_handler()
    return logging.getLogger(name)
