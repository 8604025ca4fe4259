"""Tests for ScheduleRunner."""

import pytest

from timetable_engine.scheduler.config import ConstraintsConfig
from timetable_engine.scheduler.models import Day, Lock, RunStatus
from timetable_engine.scheduler.runner import ScheduleRunner
from timetable_engine.storage import InMemoryStore


@pytest.fixture
def store(timeslots, rooms, make_event, session_id):
    store = InMemoryStore()
    store.set_timeslots(session_id, timeslots)
    store.set_rooms(session_id, rooms)
    store.replace_events(
        session_id,
        [
            make_event("O1:0", lecturer_id="L1"),
            make_event("O1:1", lecturer_id="L1"),
            make_event("O2:0", lecturer_id="L2", level=200),
        ],
    )
    return store


class TestScheduleRunner:
    """Tests for ScheduleRunner.generate."""

    def test_completed_run(self, store, session_id):
        run = ScheduleRunner(store).generate(session_id, seed=11)

        assert run.status == RunStatus.COMPLETED
        assert run.seed == 11
        assert run.scheduled_count == 3
        assert run.unscheduled_count == 0
        assert run.result is not None
        assert store.runs[run.id] is run
        assert len(store.run_scheduled[run.id]) == 3
        assert store.run_unscheduled[run.id] == []

    def test_default_constraints_saved(self, store, session_id):
        assert store.get_constraints(session_id) is None

        run = ScheduleRunner(store).generate(session_id)

        assert store.get_constraints(session_id) == ConstraintsConfig.default()
        assert run.candidate_limit == 25

    def test_existing_constraints_used(self, store, session_id):
        store.save_constraints(
            session_id,
            ConstraintsConfig.from_dict(
                {"allowed_days": ["FRI"], "defaults": {"candidate_limit_per_event": 4}}
            ),
        )

        run = ScheduleRunner(store).generate(session_id)

        assert run.candidate_limit == 4
        assert {s.day for s in run.result.scheduled} == {Day.FRI}

    def test_candidate_limit_override(self, store, session_id):
        run = ScheduleRunner(store).generate(session_id, candidate_limit=2)

        assert run.candidate_limit == 2
        assert run.result.candidate_limit == 2

    def test_lock_on_unknown_room_fails_run(self, store, session_id):
        store.set_locks(
            session_id,
            [Lock(event_id="O1:0", day=Day.MON, timeslot_id="ts1", room_id="R99")],
        )

        run = ScheduleRunner(store).generate(session_id)

        assert run.status == RunStatus.FAILED
        assert "R99" in run.error_message
        assert run.result is None
        assert store.runs[run.id].status == RunStatus.FAILED
        assert run.id not in store.run_scheduled
        assert run.id not in store.run_unscheduled

    def test_clashing_locks_fail_run(self, store, session_id):
        store.set_locks(
            session_id,
            [
                Lock(event_id="O1:0", day=Day.MON, timeslot_id="ts1", room_id="R1"),
                Lock(event_id="O2:0", day=Day.MON, timeslot_id="ts1", room_id="R1"),
            ],
        )

        run = ScheduleRunner(store).generate(session_id)

        assert run.status == RunStatus.FAILED
        assert "O1:0 and O2:0 clash" in run.error_message
        assert run.id not in store.run_scheduled

    def test_invalid_candidate_limit_fails_run(self, store, session_id):
        run = ScheduleRunner(store).generate(session_id, candidate_limit=0)

        assert run.status == RunStatus.FAILED
        assert "candidate_limit" in run.error_message

    def test_unexpected_error_is_reraised(self, store, session_id, monkeypatch):
        def broken(_session_id):
            raise RuntimeError("database unavailable")

        monkeypatch.setattr(store, "list_rooms", broken)

        with pytest.raises(RuntimeError, match="database unavailable"):
            ScheduleRunner(store).generate(session_id)

        (run,) = store.runs.values()
        assert run.status == RunStatus.FAILED
        assert run.error_message == "database unavailable"

    def test_each_run_is_recorded(self, store, session_id):
        runner = ScheduleRunner(store)

        first = runner.generate(session_id)
        second = runner.generate(session_id)

        assert first.id != second.id
        assert len(store.runs) == 2
        assert first.to_dict()["status"] == "completed"
