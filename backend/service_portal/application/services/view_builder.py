"""Role-scoped view builder — pure projection of a record set for one viewer."""

from collections.abc import Iterable
from datetime import datetime

from service_portal.domain.entities import (
    Complaint,
    ComplaintCounts,
    ComplaintStatus,
    ScopedView,
    StatusFilter,
    ViewerScope,
)


def count_by_status(complaints: Iterable[Complaint]) -> ComplaintCounts:
    """Aggregate counts per status. The four status counts always sum to ``total``."""
    tally = {status: 0 for status in ComplaintStatus}
    for complaint in complaints:
        tally[complaint.status] += 1
    return ComplaintCounts(
        total=sum(tally.values()),
        pending=tally[ComplaintStatus.PENDING],
        in_progress=tally[ComplaintStatus.IN_PROGRESS],
        completed=tally[ComplaintStatus.COMPLETED],
        cancelled=tally[ComplaintStatus.CANCELLED],
    )


def build_view(
    complaints: Iterable[Complaint],
    scope: ViewerScope,
    status_filter: "StatusFilter | str | None" = StatusFilter.ALL,
    *,
    loading: bool = False,
    error: str | None = None,
    last_refreshed_at: datetime | None = None,
    refresh_count: int = 0,
) -> ScopedView:
    """Derive the visible list and counts for ``scope``.

    Records outside the scope are dropped. Counts cover the whole scope;
    the filter only narrows the visible list. Customer scopes have no
    filter and always list everything they own, newest first.
    """
    in_scope = sorted(
        (c for c in complaints if scope.includes(c.owner_id)),
        key=lambda c: c.created_at,
        reverse=True,
    )
    effective = StatusFilter.parse(status_filter) if scope.is_staff else StatusFilter.ALL
    visible = tuple(c for c in in_scope if effective.matches(c.status))

    return ScopedView(
        complaints=visible,
        counts=count_by_status(in_scope),
        status_filter=effective,
        loading=loading,
        error=error,
        last_refreshed_at=last_refreshed_at,
        refresh_count=refresh_count,
    )
