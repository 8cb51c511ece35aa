"""Domain error taxonomy raised by the service layer.

Each error carries the HTTP status it maps to; `app.core.error_handling`
renders them as `{"error": message}` bodies.
"""

from __future__ import annotations

from fastapi import status


class TrackerError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(TrackerError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class UnauthorizedError(TrackerError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class ForbiddenError(TrackerError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(TrackerError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(TrackerError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class StoreError(TrackerError):
    """Persistence failure. Surfaced as a generic 500, never retried."""

    default_message = "Failed to save changes"
