"""Authorization predicates for task, review and project mutations.

Each operation has exactly one predicate taking the caller's role and identity
plus the resource owner and state. Predicates never touch the database.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from app.core.errors import ForbiddenError
from app.core.logging import get_logger
from app.models.tasks import (
    TASK_STATUS_APPROVED,
    TASK_STATUS_PENDING,
    TASK_STATUS_REJECTED,
    TASK_STATUSES,
)
from app.models.users import ROLE_PLATFORM_ADMIN

logger = get_logger(__name__)

# Employees keep the right to withdraw their own task after it was decided;
# only edits are locked once the task leaves `pending`.
EMPLOYEE_MAY_DELETE_DECIDED_TASKS = True

_REGULAR_TRANSITIONS: frozenset[tuple[str, str]] = frozenset(
    {
        (TASK_STATUS_PENDING, TASK_STATUS_APPROVED),
        (TASK_STATUS_PENDING, TASK_STATUS_REJECTED),
    }
)


@dataclass(frozen=True, slots=True)
class Decision:
    allowed: bool
    reason: str | None = None

    def enforce(self) -> None:
        if not self.allowed:
            logger.info("policy.denied reason=%s", self.reason)
            raise ForbiddenError(self.reason)


ALLOW = Decision(allowed=True)


def _deny(reason: str) -> Decision:
    return Decision(allowed=False, reason=reason)


def _is_admin(role: str) -> bool:
    return role == ROLE_PLATFORM_ADMIN


def can_edit_task(*, role: str, caller_id: UUID, owner_id: UUID, status: str) -> Decision:
    if _is_admin(role):
        return ALLOW
    if caller_id != owner_id:
        return _deny("Forbidden")
    if status != TASK_STATUS_PENDING:
        return _deny("Cannot edit approved/rejected tasks")
    return ALLOW


def can_delete_task(*, role: str, caller_id: UUID, owner_id: UUID, status: str) -> Decision:
    if _is_admin(role):
        return ALLOW
    if caller_id != owner_id:
        return _deny("Forbidden")
    if status != TASK_STATUS_PENDING and not EMPLOYEE_MAY_DELETE_DECIDED_TASKS:
        return _deny("Cannot delete approved/rejected tasks")
    return ALLOW


def can_change_task_status(*, role: str) -> Decision:
    if _is_admin(role):
        return ALLOW
    return _deny("Only administrators can change task status")


def is_transition_allowed(current: str, target: str, *, override: bool = False) -> bool:
    """Regular flow is pending -> approved|rejected; an override may land anywhere."""
    if target not in TASK_STATUSES:
        return False
    if override:
        return True
    return (current, target) in _REGULAR_TRANSITIONS


def can_manage_projects(*, role: str) -> Decision:
    if _is_admin(role):
        return ALLOW
    return _deny("Only administrators can manage projects")


def can_modify_review(*, caller_id: UUID, reviewer_id: UUID) -> Decision:
    if caller_id == reviewer_id:
        return ALLOW
    return _deny("Only the reviewer can change this review")


def can_reply_to_review(*, caller_id: UUID, task_owner_id: UUID) -> Decision:
    if caller_id == task_owner_id:
        return ALLOW
    return _deny("Only the task owner can reply to this review")
