"""Worker double-booking checks.

The storage layer supplies an :class:`AssignmentLookup`; this module only
decides which of the returned bookings actually collide.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional, Protocol

from shiftplan.core.errors import ConflictError
from shiftplan.scheduling.enums import AssignmentStatus
from shiftplan.scheduling.time_utils import intervals_overlap


@dataclass(frozen=True)
class BookedAssignment:
    """An existing assignment of a worker, with its shift's time range."""

    worker_id: object
    shift_id: object
    shift_title: str
    start: datetime
    end: datetime
    status: AssignmentStatus = AssignmentStatus.PENDING


class AssignmentLookup(Protocol):
    def bookings_for_workers(
        self, worker_ids: Iterable, start: datetime, end: datetime
    ) -> Iterable[BookedAssignment]:
        """Assignments of ``worker_ids`` whose shift may overlap ``[start, end]``.

        Implementations may over-return; the caller re-checks every row.
        """
        ...


def find_worker_conflict(
    lookup: AssignmentLookup,
    worker_ids: Iterable,
    start: datetime,
    end: datetime,
    exclude_shift_id=None,
    statuses: Optional[Iterable[AssignmentStatus]] = None,
) -> Optional[BookedAssignment]:
    ids = list(dict.fromkeys(worker_ids))
    if not ids:
        return None
    allowed = set(statuses) if statuses is not None else None
    for booking in lookup.bookings_for_workers(ids, start, end):
        if booking.worker_id not in ids:
            continue
        if exclude_shift_id is not None and booking.shift_id == exclude_shift_id:
            continue
        if allowed is not None and booking.status not in allowed:
            continue
        if intervals_overlap(booking.start, booking.end, start, end):
            return booking
    return None


def assert_no_worker_conflicts(
    lookup: AssignmentLookup,
    worker_ids: Iterable,
    start: datetime,
    end: datetime,
    exclude_shift_id=None,
    statuses: Optional[Iterable[AssignmentStatus]] = None,
) -> None:
    """Raise ConflictError if any worker already holds an overlapping assignment.

    Assignments of any status count unless ``statuses`` narrows them. The shift
    identified by ``exclude_shift_id`` is ignored so that moving a shift does not
    collide with itself.
    """
    conflict = find_worker_conflict(lookup, worker_ids, start, end, exclude_shift_id, statuses)
    if conflict is not None:
        raise ConflictError(f"Employee already assigned to overlapping shift {conflict.shift_title}")
