"""Input normalization shared by the task and project services.

Everything here raises `ValidationError` before any write is attempted.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from app.core.errors import ValidationError

MAX_HOURS = Decimal("99999999.99")
HOURS_QUANTUM = Decimal("0.01")


def require_text(value: Any, message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message)
    return value.strip()


def optional_text(value: Any, *, max_length: int | None = None, label: str = "Value") -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{label} must be text")
    cleaned = value.strip()
    if max_length is not None and len(cleaned) > max_length:
        raise ValidationError(f"{label} must be at most {max_length} characters")
    return cleaned or None


def coerce_hours(value: Any, label: str) -> Decimal:
    """Parse an hours value into a finite, non-negative `Decimal`."""
    message = f"{label} must be a non-negative number"
    if value is None or isinstance(value, bool):
        raise ValidationError(message)
    if isinstance(value, Decimal):
        parsed = value
    elif isinstance(value, (int, float, str)):
        try:
            parsed = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise ValidationError(message) from exc
    else:
        raise ValidationError(message)
    if not parsed.is_finite() or parsed < 0:
        raise ValidationError(message)
    if parsed > MAX_HOURS:
        raise ValidationError(f"{label} is too large")
    # Stored as NUMERIC(10, 2); anything finer would be rounded silently.
    if parsed != parsed.quantize(HOURS_QUANTUM):
        raise ValidationError(f"{label} must have at most 2 decimal places")
    return parsed
