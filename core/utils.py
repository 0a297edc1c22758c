"""
Small shared helpers: deterministic ids and timestamp handling
"""

import hashlib
from datetime import datetime, timezone
from typing import Any, Optional

DERIVED_ID_LENGTH = 32


def derive_id(*parts: str) -> str:
    """
    Deterministic storage key for an upstream identity.

    Parts are joined with ":" and hashed with SHA-256; the first 32 hex
    characters are kept. The same input always yields the same id, which
    is what makes repeated ingestion runs idempotent.
    """
    value = ":".join(parts)
    return hashlib.sha256(value.encode("utf-8")).hexdigest()[:DERIVED_ID_LENGTH]


def utcnow() -> datetime:
    """Current time as an aware UTC datetime"""
    return datetime.now(timezone.utc)


def parse_datetime(value: Any) -> Optional[datetime]:
    """Safely parse an ISO-8601 value into an aware UTC datetime"""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        # Upstream timestamps without an offset are UTC
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Render a datetime as UTC ISO-8601 with milliseconds, e.g. 2026-01-27T12:00:00.000Z"""
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"
