from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shiftplan.core.database import get_db
from shiftplan.schemas.dashboard import DashboardOut
from shiftplan.services.dashboard_service import dashboard_metrics

router = APIRouter()


@router.get("", response_model=DashboardOut)
def get_dashboard(db: Session = Depends(get_db)):
    return dashboard_metrics(db)
