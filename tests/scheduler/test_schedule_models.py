"""Tests for scheduler data models."""

import pytest

from timetable_engine.scheduler.models import (
    BlockedTime,
    BlockScope,
    Candidate,
    Day,
    Event,
    Lock,
    Room,
    RoomType,
    RunStatus,
    ScheduledEvent,
    ScheduleResult,
    ScheduleRun,
    TimeSlot,
    UnscheduledReason,
    day_name_to_enum,
)


class TestCandidate:
    def test_single_slot(self):
        candidate = Candidate(day=Day.MON, timeslot_id="ts1", room_id="R1")
        assert candidate.timeslot_ids == ("ts1",)
        assert candidate.slot_keys() == ["MON:ts1"]

    def test_two_slots(self):
        candidate = Candidate(
            day=Day.TUE, timeslot_id="ts3", room_id="R1", second_timeslot_id="ts4"
        )
        assert candidate.slot_keys() == ["TUE:ts3", "TUE:ts4"]

    def test_hashable(self):
        first = Candidate(day=Day.MON, timeslot_id="ts1", room_id="R1")
        second = Candidate(day=Day.MON, timeslot_id="ts1", room_id="R1")
        assert len({first, second}) == 1


class TestFromDict:
    """Tests for building models from reference rows."""

    def test_timeslot(self):
        slot = TimeSlot.from_dict(
            {"id": "ts1", "label": "TS1", "start_time": "08:00", "end_time": "09:00",
             "sort_order": "1"}
        )
        assert slot.sort_order == 1

    def test_room_defaults(self):
        room = Room.from_dict({"id": "R1", "room_type": "lab"})
        assert room.name == "R1"
        assert room.room_type == RoomType.LAB
        assert room.capacity == 0

    def test_room_invalid_type(self):
        with pytest.raises(ValueError):
            Room.from_dict({"id": "R1", "room_type": "hall"})

    def test_blocked_time(self):
        block = BlockedTime.from_dict(
            {"scope": "lecturer", "scope_id": "L1", "day": "fri", "timeslot_id": "ts2",
             "reason": "Senate"}
        )
        assert block.scope == BlockScope.LECTURER
        assert block.day == Day.FRI
        assert block.to_dict()["reason"] == "Senate"

    def test_event_defaults(self):
        event = Event.from_dict({"id": "O1:0", "offering_id": "O1"})
        assert event.duration_slots == 1
        assert event.room_type_required == RoomType.LECTURE_ROOM
        assert event.lecturer_id is None
        assert event.level == 300

    def test_lock_candidate(self):
        lock = Lock.from_dict(
            {"event_id": "O1:0", "day": "MON", "timeslot_id": "ts3",
             "second_timeslot_id": "ts4", "room_id": "R1"}
        )
        assert lock.to_candidate() == Candidate(Day.MON, "ts3", "R1", "ts4")

    def test_lock_full_day_name(self):
        lock = Lock.from_dict(
            {"event_id": "O1:0", "day": "Wednesday", "timeslot_id": "ts1", "room_id": "R1"}
        )
        assert lock.day == Day.WED

    def test_lock_unknown_day(self):
        with pytest.raises(ValueError, match="unknown day"):
            Lock.from_dict(
                {"event_id": "O1:0", "day": "Funday", "timeslot_id": "ts1", "room_id": "R1"}
            )


class TestDayNameToEnum:
    def test_variants(self):
        assert day_name_to_enum("mon") == Day.MON
        assert day_name_to_enum("Tuesday") == Day.TUE
        assert day_name_to_enum(" FRI ") == Day.FRI

    def test_unknown(self):
        assert day_name_to_enum("Funday") is None
        assert day_name_to_enum("") is None


class TestScheduledEvent:
    def test_candidate_round_trip(self):
        candidate = Candidate(Day.WED, "ts5", "R2", "ts6")
        placement = ScheduledEvent.from_candidate("O1:0", candidate, locked=True)

        assert placement.to_candidate() == candidate
        assert placement.to_dict()["locked"] is True


class TestUnscheduledReason:
    def test_messages(self):
        assert UnscheduledReason.NO_VALID_SLOTS.message == "No valid time slots or rooms available"
        assert UnscheduledReason.NO_SUITABLE_ROOM_TYPE.message == "No suitable room type available"
        assert "conflict" in UnscheduledReason.CONFLICTS_WITH_SCHEDULE.message


class TestScheduleRun:
    def test_complete(self):
        run = ScheduleRun(id="r1", session_id="s1", seed=None, candidate_limit=25)
        result = ScheduleResult(
            scheduled=[ScheduledEvent("E1", Day.MON, "ts1", "R1", penalty=2.0)], soft_score=2.0
        )

        run.complete(result)

        assert run.status == RunStatus.COMPLETED
        assert run.scheduled_count == 1
        assert run.soft_score == 2.0

    def test_fail(self):
        run = ScheduleRun(id="r1", session_id="s1", seed=3, candidate_limit=25)

        run.fail("boom")

        assert run.status == RunStatus.FAILED
        assert run.to_dict()["error_message"] == "boom"
        assert run.result is None
