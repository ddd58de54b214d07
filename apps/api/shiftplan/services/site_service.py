from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from shiftplan.core.config import settings
from shiftplan.core.errors import NotFoundError, ValidationError
from shiftplan.models.shift import Shift
from shiftplan.models.work_site import WorkSite
from shiftplan.scheduling.assignments import ADMIN_ROLES, Actor, require_role
from shiftplan.scheduling.time_utils import resolve_timezone

logger = logging.getLogger(__name__)


def get_site(db: Session, site_id: UUID) -> WorkSite:
    site = db.get(WorkSite, site_id)
    if not site:
        raise NotFoundError("Work site not found")
    return site


def list_sites(db: Session) -> list[WorkSite]:
    return db.execute(select(WorkSite).order_by(WorkSite.created_at.desc(), WorkSite.name)).scalars().all()


def create_site(
    db: Session,
    actor: Actor,
    name: str,
    address: Optional[str] = None,
    timezone: Optional[str] = None,
) -> WorkSite:
    require_role(actor, ADMIN_ROLES, "create work sites for")
    if not name or len(name.strip()) < 2:
        raise ValidationError("Site name must be at least 2 characters")
    timezone = timezone or settings.default_timezone
    resolve_timezone(timezone)

    site = WorkSite(name=name.strip(), address=address, timezone=timezone)
    db.add(site)
    db.commit()
    db.refresh(site)
    logger.info("Created work site %s (%s)", site.site_id, site.name)
    return site


def delete_site(db: Session, actor: Actor, site_id: UUID) -> None:
    """Delete a site; its shifts stay and lose the site link."""
    require_role(actor, ADMIN_ROLES, "delete work sites for")
    site = get_site(db, site_id)
    db.execute(update(Shift).where(Shift.site_id == site_id).values(site_id=None))
    db.delete(site)
    db.commit()
    logger.info("Deleted work site %s", site_id)
