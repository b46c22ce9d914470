"""
Redaction helpers for anything that may end up in a log line.

Manager and supplier records carry real names and mailbox addresses, so
emails are hashed before logging; the hash stays stable for correlation.
"""

from __future__ import annotations

from hashlib import sha256


def redact(value: str | None) -> str:
    """
    Return a stable hash representation of a sensitive string.
    """
    if not value:
        return "hash:missing"
    digest = sha256(value.encode("utf-8")).hexdigest()[:12]
    return f"hash:{digest}"


def redact_email(address: str | None) -> str:
    """
    Hash the local part of an address but keep the domain readable.

    Example:
        "jane.doe@acme.com" -> "hash:1a2b3c4d5e6f@acme.com"
    """
    if not address:
        return "hash:missing"
    local, sep, domain = address.rpartition("@")
    if not sep:
        return redact(address)
    return f"{redact(local)}@{domain}"
