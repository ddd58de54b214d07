from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shiftplan.core.database import get_db
from shiftplan.routers.deps import get_actor
from shiftplan.scheduling.assignments import Actor
from shiftplan.schemas.sites import WorkSiteCreate, WorkSiteOut
from shiftplan.services import site_service

router = APIRouter()


@router.get("", response_model=list[WorkSiteOut])
def list_sites(db: Session = Depends(get_db)):
    return site_service.list_sites(db)


@router.post("", response_model=WorkSiteOut, status_code=201)
def create_site(req: WorkSiteCreate, actor: Actor = Depends(get_actor), db: Session = Depends(get_db)):
    return site_service.create_site(db, actor, **req.model_dump())


@router.get("/{site_id}", response_model=WorkSiteOut)
def get_site(site_id: UUID, db: Session = Depends(get_db)):
    return site_service.get_site(db, site_id)


@router.delete("/{site_id}")
def delete_site(site_id: UUID, actor: Actor = Depends(get_actor), db: Session = Depends(get_db)):
    site_service.delete_site(db, actor, site_id)
    return {"deleted": True}
