"""Complaint state machine — who may move a complaint, and where to.

Every status may move to every other status, including backwards and onto
itself: staff routinely correct mis-set statuses. Customers create
complaints (always ``pending``) and never mutate them afterwards.
"""

import logging

from service_portal.domain.entities import (
    Complaint,
    ComplaintPatch,
    ComplaintStatus,
    UserRole,
)
from service_portal.domain.exceptions import PermissionDeniedError

logger = logging.getLogger(__name__)

INITIAL_STATUS = ComplaintStatus.PENDING

TRANSITIONS: dict[ComplaintStatus, frozenset[ComplaintStatus]] = {
    status: frozenset(ComplaintStatus) for status in ComplaintStatus
}


def can_transition(current: ComplaintStatus, target: ComplaintStatus) -> bool:
    return target in TRANSITIONS[current]


def require_staff(role: UserRole, action: str) -> None:
    """Raise PermissionDeniedError unless ``role`` is staff."""
    if role is not UserRole.STAFF:
        raise PermissionDeniedError(role.value, action)


def authorize_patch(patch: ComplaintPatch, actor_role: UserRole) -> None:
    """Raise PermissionDeniedError if ``actor_role`` may not apply ``patch``."""
    if patch.status is not None:
        require_staff(actor_role, "change complaint status")
    if patch.notes is not None:
        require_staff(actor_role, "edit staff notes")


def apply_patch(complaint: Complaint, patch: ComplaintPatch, actor_role: UserRole) -> Complaint:
    """Apply a staff patch to ``complaint`` in place and return it.

    Status is applied before notes; each applied field advances
    ``updated_at``. An empty patch is a no-op.
    """
    authorize_patch(patch, actor_role)
    if patch.is_empty:
        return complaint

    if patch.status is not None:
        if not can_transition(complaint.status, patch.status):
            raise PermissionDeniedError(
                actor_role.value,
                f"move complaint from {complaint.status.value} to {patch.status.value}",
            )
        previous = complaint.change_status(patch.status)
        logger.info(
            "Complaint %s status %s -> %s (actor=%s)",
            complaint.id,
            previous.value,
            patch.status.value,
            actor_role.value,
        )

    if patch.notes is not None:
        complaint.annotate(patch.notes)
        logger.info("Complaint %s notes updated (actor=%s)", complaint.id, actor_role.value)

    return complaint
