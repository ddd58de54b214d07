import uuid

import pytest

from shiftplan.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from shiftplan.scheduling.enums import Role, WeekDay
from shiftplan.services import availability_service, worker_service


class TestAvailabilityWindows:
    def test_create_and_list_in_week_order(self, db, make_worker, as_actor):
        worker = make_worker()
        me = as_actor(worker)
        availability_service.create_window(db, me, worker.worker_id, "FRI", "09:00", "17:00")
        availability_service.create_window(db, me, worker.worker_id, "MON", "13:00", "17:00")
        availability_service.create_window(db, me, worker.worker_id, "MON", "08:00", "13:00")

        rows = availability_service.list_availability(db, worker.worker_id)

        assert [(r.day, r.start_time.hour) for r in rows] == [
            (WeekDay.MON, 8),
            (WeekDay.MON, 13),
            (WeekDay.FRI, 9),
        ]

    def test_overlap_rejected(self, db, make_worker, as_actor):
        worker = make_worker()
        me = as_actor(worker)
        availability_service.create_window(db, me, worker.worker_id, "MON", "09:00", "12:00")
        with pytest.raises(ConflictError):
            availability_service.create_window(db, me, worker.worker_id, "MON", "11:00", "14:00")

    def test_update_excludes_itself(self, db, make_worker, as_actor):
        worker = make_worker()
        me = as_actor(worker)
        row = availability_service.create_window(db, me, worker.worker_id, "MON", "09:00", "12:00")
        updated = availability_service.update_window(
            db, me, worker.worker_id, row.availability_id, "MON", "10:00", "13:00"
        )
        assert updated.start_time.hour == 10

    def test_employee_cannot_edit_someone_else(self, db, make_worker, as_actor):
        owner, other = make_worker("Ana"), make_worker("Ben")
        with pytest.raises(ForbiddenError):
            availability_service.create_window(db, as_actor(other), owner.worker_id, "MON", "09:00", "12:00")

    def test_manager_can_edit_anyone(self, db, manager, make_worker):
        worker = make_worker()
        row = availability_service.create_window(db, manager, worker.worker_id, "TUE", "09:00", "12:00")
        availability_service.delete_window(db, manager, worker.worker_id, row.availability_id)
        assert availability_service.list_availability(db, worker.worker_id) == []

    def test_delete_unknown(self, db, manager, make_worker):
        with pytest.raises(NotFoundError):
            availability_service.delete_window(db, manager, make_worker().worker_id, uuid.uuid4())

    def test_replace_profile(self, db, make_worker, as_actor):
        worker = make_worker()
        me = as_actor(worker)
        availability_service.create_window(db, me, worker.worker_id, "MON", "09:00", "12:00")

        rows = availability_service.replace_profile(
            db,
            me,
            worker.worker_id,
            [
                {"day": "SUN"},
                {"day": "WED", "start_time": "09:00", "end_time": "12:00"},
                {"day": "THU", "start_time": "12:00", "end_time": "15:00"},
            ],
        )

        assert [r.day for r in rows] == [WeekDay.WED, WeekDay.THU, WeekDay.SUN]
        assert rows[2].start_time is None

    def test_replace_profile_rejects_two_slots_on_one_day(self, db, make_worker, as_actor):
        worker = make_worker()
        me = as_actor(worker)
        availability_service.create_window(db, me, worker.worker_id, "FRI", "09:00", "12:00")
        with pytest.raises(ValidationError):
            availability_service.replace_profile(
                db,
                me,
                worker.worker_id,
                [
                    {"day": "MON", "start_time": "09:00", "end_time": "12:00"},
                    {"day": "MON", "start_time": "13:00", "end_time": "17:00"},
                ],
            )
        assert [r.day for r in availability_service.list_availability(db, worker.worker_id)] == [WeekDay.FRI]

    def test_invalid_profile_keeps_old_windows(self, db, make_worker, as_actor):
        worker = make_worker()
        me = as_actor(worker)
        availability_service.create_window(db, me, worker.worker_id, "MON", "09:00", "12:00")
        with pytest.raises(ValidationError):
            availability_service.replace_profile(
                db, me, worker.worker_id, [{"day": "TUE", "start_time": "15:00", "end_time": "10:00"}]
            )
        assert len(availability_service.list_availability(db, worker.worker_id)) == 1


class TestWorkers:
    def test_duplicate_email(self, db, manager):
        worker_service.create_worker(db, manager, name="Ana", email="ana@example.com")
        with pytest.raises(ConflictError):
            worker_service.create_worker(db, manager, name="Ana 2", email="ana@example.com")

    def test_list_active_only(self, db, make_worker):
        make_worker("Ana")
        make_worker("Zed", is_active=False)
        assert [w.name for w in worker_service.list_workers(db)] == ["Ana", "Zed"]
        assert [w.name for w in worker_service.list_workers(db, active_only=True)] == ["Ana"]


class TestWeeklyLimit:
    def test_upsert(self, db, manager, make_worker):
        worker = make_worker()
        worker_service.set_weekly_limit(db, manager, worker.worker_id, 2400)
        limit = worker_service.set_weekly_limit(db, manager, worker.worker_id, 1200)
        assert limit.weekly_cap_minutes == 1200
        assert worker_service.get_weekly_limit(db, manager, worker.worker_id).weekly_cap_minutes == 1200

    def test_employee_cannot_set(self, db, make_worker, as_actor):
        worker = make_worker()
        with pytest.raises(ForbiddenError):
            worker_service.set_weekly_limit(db, as_actor(worker), worker.worker_id, 2400)

    def test_must_be_positive(self, db, manager, make_worker):
        with pytest.raises(ValidationError):
            worker_service.set_weekly_limit(db, manager, make_worker().worker_id, 0)

    def test_employee_reads_own_only(self, db, make_worker, as_actor):
        me, other = make_worker("Ana", role=Role.EMPLOYEE), make_worker("Ben")
        assert worker_service.get_weekly_limit(db, as_actor(me), me.worker_id) is None
        with pytest.raises(ForbiddenError):
            worker_service.get_weekly_limit(db, as_actor(me), other.worker_id)
