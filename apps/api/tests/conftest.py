import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shiftplan.core.database import Base, get_db
from shiftplan.main import app
from shiftplan.models.availability import WorkerAvailability  # noqa: F401
from shiftplan.models.recurring_template import RecurringShiftTemplate  # noqa: F401
from shiftplan.models.shift import Shift  # noqa: F401
from shiftplan.models.shift_assignment import ShiftAssignment  # noqa: F401
from shiftplan.models.weekly_limit import WeeklyLimit  # noqa: F401
from shiftplan.models.work_site import WorkSite  # noqa: F401
from shiftplan.models.worker import Worker
from shiftplan.scheduling.assignments import Actor
from shiftplan.scheduling.enums import Role


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record):
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False, autocommit=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(engine):
    TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)

    def _get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def make_worker(db):
    def _make(name="Alex", role=Role.EMPLOYEE, is_active=True, email=None):
        worker = Worker(
            name=name,
            email=email or f"{name.lower()}-{uuid.uuid4().hex[:6]}@example.com",
            role=role,
            is_active=is_active,
        )
        db.add(worker)
        db.commit()
        db.refresh(worker)
        return worker

    return _make


@pytest.fixture()
def admin():
    return Actor(actor_id=uuid.uuid4(), role=Role.ADMIN)


@pytest.fixture()
def manager():
    return Actor(actor_id=uuid.uuid4(), role=Role.MANAGER)


@pytest.fixture()
def as_actor():
    """Actor acting as the given worker."""

    def _as(worker):
        return Actor(actor_id=worker.worker_id, role=worker.role)

    return _as


class InMemoryAssignmentLookup:
    """Assignment lookup over a fixed list of bookings; returns every booking of the requested workers."""

    def __init__(self, bookings=()):
        self.bookings = list(bookings)

    def bookings_for_workers(self, worker_ids, start, end):
        wanted = set(worker_ids)
        return [b for b in self.bookings if b.worker_id in wanted]


@pytest.fixture()
def memory_lookup():
    return InMemoryAssignmentLookup
