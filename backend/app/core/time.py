from __future__ import annotations

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return a naive UTC timestamp, matching how the database columns are stored."""
    return datetime.now(UTC).replace(tzinfo=None)
