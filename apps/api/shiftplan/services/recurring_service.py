from __future__ import annotations

import logging
from datetime import timedelta
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from shiftplan.core.config import settings
from shiftplan.core.errors import NotFoundError, ValidationError
from shiftplan.models.recurring_template import RecurringShiftTemplate
from shiftplan.models.shift import Shift
from shiftplan.models.shift_assignment import ShiftAssignment
from shiftplan.scheduling.assignments import SCHEDULER_ROLES, Actor, require_role
from shiftplan.scheduling.enums import ShiftStatus
from shiftplan.scheduling.recurrence import RecurringTemplate, build_template, expand_occurrences
from shiftplan.scheduling.time_utils import ensure_utc, resolve_timezone, to_local

logger = logging.getLogger(__name__)


def _get_template(db: Session, template_id: UUID) -> RecurringShiftTemplate:
    row = db.get(RecurringShiftTemplate, template_id)
    if not row:
        raise NotFoundError("Template not found")
    return row


def to_template(row: RecurringShiftTemplate) -> RecurringTemplate:
    return build_template(
        rule=row.rule,
        start_date=row.start_date,
        shift_duration=row.shift_duration,
        base_start_time=row.base_start_time,
        interval=row.interval,
        by_weekday=row.by_weekday or [],
        end_date=row.end_date,
        timezone=row.timezone,
        name=row.name,
    )


def list_templates(db: Session) -> list[RecurringShiftTemplate]:
    return db.execute(select(RecurringShiftTemplate).order_by(RecurringShiftTemplate.created_at)).scalars().all()


def create_template(db: Session, actor: Actor, name: str, description: str | None = None, **fields) -> RecurringShiftTemplate:
    require_role(actor, SCHEDULER_ROLES, "create recurring")
    if not name or len(name.strip()) < 2:
        raise ValidationError("Template name must be at least 2 characters")

    template = build_template(name=name, **fields)

    row = RecurringShiftTemplate(
        name=name.strip(),
        description=description,
        rule=template.rule,
        interval=template.interval,
        by_weekday=[d.value for d in sorted(template.by_weekday, key=lambda d: d.ordinal)],
        start_date=template.start_date,
        end_date=template.end_date,
        shift_duration=template.shift_duration,
        base_start_time=template.base_start_time,
        timezone=template.timezone,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Created %s template %s (%s)", template.rule.value, row.template_id, row.name)
    return row


def expand_template(db: Session, actor: Actor, template_id: UUID, range_start, range_end) -> list[Shift]:
    """Persist one PUBLISHED shift per occurrence of the template in the range."""
    require_role(actor, SCHEDULER_ROLES, "expand recurring")
    row = _get_template(db, template_id)
    template = to_template(row)

    tz = resolve_timezone(template.timezone)
    start_local = to_local(range_start, tz)
    end_local = to_local(range_end, tz)
    if end_local < start_local:
        raise ValidationError("range_end must be >= range_start")
    if end_local - start_local > timedelta(days=settings.max_expansion_days):
        raise ValidationError(f"Expansion range may span at most {settings.max_expansion_days} days")

    occurrences = expand_occurrences(template, range_start, range_end)
    if not occurrences:
        return []

    created: list[Shift] = []
    for occ in occurrences:
        start = ensure_utc(occ.start)
        end = ensure_utc(occ.end)
        shift = Shift(
            title=row.name,
            description=row.description,
            start_time=start,
            end_time=end,
            shift_date=occ.start.date(),
            duration_minutes=row.shift_duration,
            is_recurring=True,
            recurring_rule=row.rule,
            recurring_template_id=row.template_id,
            status=ShiftStatus.PUBLISHED,
            created_by=actor.actor_id,
        )
        db.add(shift)
        created.append(shift)

    db.commit()
    for shift in created:
        db.refresh(shift)
    logger.info("Expanded template %s into %d shift(s)", template_id, len(created))
    return created


def delete_template(db: Session, actor: Actor, template_id: UUID, cascade_shifts: bool = True) -> None:
    """Delete a template, either with its generated shifts or leaving them standalone."""
    require_role(actor, SCHEDULER_ROLES, "delete recurring")
    row = _get_template(db, template_id)

    if cascade_shifts:
        shift_ids = select(Shift.shift_id).where(Shift.recurring_template_id == template_id)
        db.execute(delete(ShiftAssignment).where(ShiftAssignment.shift_id.in_(shift_ids)))
        db.execute(delete(Shift).where(Shift.recurring_template_id == template_id))
    else:
        db.execute(
            update(Shift)
            .where(Shift.recurring_template_id == template_id)
            .values(is_recurring=False, recurring_template_id=None)
        )

    db.delete(row)
    db.commit()
    logger.info("Deleted template %s (cascade_shifts=%s)", template_id, cascade_shifts)
