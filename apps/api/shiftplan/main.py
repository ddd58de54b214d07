import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shiftplan.core.config import settings
from shiftplan.core.errors import SchedulingError
from shiftplan.routers.dashboard import router as dashboard_router
from shiftplan.routers.recurring import router as recurring_router
from shiftplan.routers.shifts import router as shifts_router
from shiftplan.routers.sites import router as sites_router
from shiftplan.routers.workers import router as workers_router

logging.basicConfig(
  level=settings.log_level.upper(),
  format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Shift Planning API")

# Comma-separated list, e.g.:
# CORS_ORIGINS="http://localhost:8081,http://127.0.0.1:8081"
allow_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]

# Safe fallback for local dev if env var not set
if not allow_origins:
  allow_origins = [
    "http://localhost:8081",
    "http://127.0.0.1:8081",
  ]

app.add_middleware(
  CORSMiddleware,
  allow_origins=allow_origins,
  allow_credentials=True,
  allow_methods=["*"],
  allow_headers=["*"],
)


@app.exception_handler(SchedulingError)
def scheduling_error_handler(request: Request, exc: SchedulingError):
  logger.info("%s %s -> %d: %s", request.method, request.url.path, exc.status_code, exc.detail)
  return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


app.include_router(shifts_router, prefix="/shifts", tags=["shifts"])
app.include_router(recurring_router, prefix="/recurring", tags=["recurring"])
app.include_router(workers_router, prefix="/workers", tags=["workers"])
app.include_router(sites_router, prefix="/sites", tags=["sites"])
app.include_router(dashboard_router, prefix="/dashboard", tags=["dashboard"])

@app.get("/health")
def health():
  return {"status": "ok"}
