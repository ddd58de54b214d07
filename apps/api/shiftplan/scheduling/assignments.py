"""Shift status recompute and the assign / confirm / decline transitions.

Shift status is never tracked incrementally. Every transition produces a new
roster and the status is re-derived from the assignments that remain on it.
A declined assignment is removed from the roster in the same step, so the
recompute never sees a DECLINED row for it.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Iterable, Optional

from shiftplan.core.errors import ForbiddenError, NotFoundError, StateError
from shiftplan.scheduling.conflicts import AssignmentLookup, assert_no_worker_conflicts
from shiftplan.scheduling.enums import AssignmentStatus, Role, ShiftStatus, parse_assignment_status, parse_role

SCHEDULER_ROLES = frozenset({Role.ADMIN, Role.MANAGER})
WORKER_ROLES = frozenset({Role.EMPLOYEE, Role.MANAGER})
ADMIN_ROLES = frozenset({Role.ADMIN})


@dataclass(frozen=True)
class Actor:
    actor_id: object
    role: Role

    def __post_init__(self):
        object.__setattr__(self, "role", parse_role(self.role))


@dataclass(frozen=True)
class Assignment:
    worker_id: object
    status: AssignmentStatus = AssignmentStatus.PENDING
    assignment_id: object = None
    note: Optional[str] = None


@dataclass(frozen=True)
class ShiftRoster:
    shift_id: object
    title: str
    start: datetime
    end: datetime
    assignments: tuple[Assignment, ...] = ()
    status: ShiftStatus = ShiftStatus.PUBLISHED

    def assignment_for(self, worker_id) -> Optional[Assignment]:
        for a in self.assignments:
            if a.worker_id == worker_id:
                return a
        return None


@dataclass(frozen=True)
class AssignmentTransition:
    """Outcome of one action. ``current`` is DECLINED for a decline even
    though the row itself is gone from ``roster``."""

    action: str
    worker_id: object
    previous: Optional[AssignmentStatus]
    current: AssignmentStatus
    roster: ShiftRoster
    removed: bool = False
    note: Optional[str] = None


def recompute_shift_status(statuses: Iterable) -> ShiftStatus:
    statuses = [parse_assignment_status(s) for s in statuses]
    if not statuses:
        return ShiftStatus.PUBLISHED
    if all(s == AssignmentStatus.ACCEPTED for s in statuses):
        return ShiftStatus.CONFIRMED
    if any(s == AssignmentStatus.DECLINED for s in statuses):
        return ShiftStatus.NEED_REALLOCATION
    return ShiftStatus.PUBLISHED


def _with_assignments(roster: ShiftRoster, assignments) -> ShiftRoster:
    assignments = tuple(assignments)
    return replace(
        roster,
        assignments=assignments,
        status=recompute_shift_status(a.status for a in assignments),
    )


def require_role(actor: Actor, allowed: frozenset, action: str) -> None:
    if actor.role not in allowed:
        raise ForbiddenError(f"Role {actor.role.value} may not {action} shifts")


def _own_assignment(roster: ShiftRoster, actor: Actor) -> Assignment:
    assignment = roster.assignment_for(actor.actor_id)
    if assignment is None:
        raise NotFoundError("You are not assigned to this shift")
    return assignment


def assign_worker(roster: ShiftRoster, worker_id, actor: Actor, lookup: AssignmentLookup) -> AssignmentTransition:
    require_role(actor, SCHEDULER_ROLES, "assign")
    if roster.assignment_for(worker_id) is not None:
        raise StateError("Employee is already assigned to this shift")

    assert_no_worker_conflicts(lookup, [worker_id], roster.start, roster.end, exclude_shift_id=roster.shift_id)

    new = Assignment(worker_id=worker_id, status=AssignmentStatus.PENDING)
    return AssignmentTransition(
        action="assign",
        worker_id=worker_id,
        previous=None,
        current=AssignmentStatus.PENDING,
        roster=_with_assignments(roster, roster.assignments + (new,)),
    )


def confirm_assignment(
    roster: ShiftRoster,
    actor: Actor,
    lookup: Optional[AssignmentLookup] = None,
    note: Optional[str] = None,
) -> AssignmentTransition:
    """Accept the actor's own PENDING assignment.

    With a ``lookup``, also refuse when the worker already holds an ACCEPTED
    assignment on another overlapping shift.
    """
    require_role(actor, WORKER_ROLES, "confirm")
    assignment = _own_assignment(roster, actor)
    if assignment.status == AssignmentStatus.ACCEPTED:
        raise StateError("Shift is already confirmed")
    if assignment.status == AssignmentStatus.DECLINED:
        raise StateError("Cannot confirm a declined shift")

    if lookup is not None:
        assert_no_worker_conflicts(
            lookup,
            [actor.actor_id],
            roster.start,
            roster.end,
            exclude_shift_id=roster.shift_id,
            statuses=[AssignmentStatus.ACCEPTED],
        )

    accepted = replace(assignment, status=AssignmentStatus.ACCEPTED, note=note)
    assignments = [accepted if a is assignment else a for a in roster.assignments]
    return AssignmentTransition(
        action="confirm",
        worker_id=actor.actor_id,
        previous=assignment.status,
        current=AssignmentStatus.ACCEPTED,
        roster=_with_assignments(roster, assignments),
        note=note,
    )


def decline_assignment(roster: ShiftRoster, actor: Actor, reason: Optional[str] = None) -> AssignmentTransition:
    """Decline the actor's own assignment and drop it from the roster.

    An ACCEPTED assignment cannot be self-declined; an administrator has to
    change the roster instead.
    """
    require_role(actor, WORKER_ROLES, "decline")
    assignment = _own_assignment(roster, actor)
    if assignment.status == AssignmentStatus.ACCEPTED:
        raise StateError("Cannot decline a confirmed shift. Please contact an administrator.")

    remaining = [a for a in roster.assignments if a is not assignment]
    return AssignmentTransition(
        action="decline",
        worker_id=actor.actor_id,
        previous=assignment.status,
        current=AssignmentStatus.DECLINED,
        roster=_with_assignments(roster, remaining),
        removed=True,
        note=reason,
    )
