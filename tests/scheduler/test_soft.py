"""Tests for soft-constraint penalties."""

import pytest

from timetable_engine.scheduler.config import ConstraintsConfig
from timetable_engine.scheduler.models import Candidate, Day, ScheduledEvent
from timetable_engine.scheduler.soft import SoftScorer


@pytest.fixture
def scorer(timeslots):
    return SoftScorer(ConstraintsConfig.default(), timeslots)


def _placed(event, day=Day.MON, timeslot_id="ts4", room_id="R1"):
    placement = ScheduledEvent(
        event_id=event.id, day=day, timeslot_id=timeslot_id, room_id=room_id
    )
    return event, placement


class TestSoftScorer:
    """Tests for SoftScorer.compute_penalty."""

    def test_middle_slot_empty_schedule(self, scorer, make_event):
        candidate = Candidate(day=Day.MON, timeslot_id="ts4", room_id="R1")
        assert scorer.compute_penalty(candidate, make_event("E1"), []) == 0.0

    def test_first_and_last_slot(self, scorer, make_event):
        early = Candidate(day=Day.MON, timeslot_id="ts1", room_id="R1")
        late = Candidate(day=Day.MON, timeslot_id="ts8", room_id="R1")

        assert scorer.first_slot_id == "ts1"
        assert scorer.last_slot_id == "ts8"
        assert scorer.compute_penalty(early, make_event("E1"), []) == 2.0
        assert scorer.compute_penalty(late, make_event("E1"), []) == 2.0

    def test_pair_ending_in_last_slot(self, scorer, make_event):
        candidate = Candidate(
            day=Day.MON, timeslot_id="ts7", room_id="R1", second_timeslot_id="ts8"
        )
        assert scorer.compute_penalty(candidate, make_event("E1", duration_slots=2), []) == 2.0

    def test_same_offering_same_day(self, scorer, make_event):
        schedule = [
            _placed(make_event("O1:0", offering_id="O1")),
            _placed(make_event("O1:1", offering_id="O1"), timeslot_id="ts5"),
            _placed(make_event("O2:0", offering_id="O2"), timeslot_id="ts6"),
        ]
        event = make_event("O1:2", offering_id="O1")

        monday = Candidate(day=Day.MON, timeslot_id="ts3", room_id="R2")
        tuesday = Candidate(day=Day.TUE, timeslot_id="ts3", room_id="R2")

        assert scorer.compute_penalty(monday, event, schedule) == 6.0
        assert scorer.compute_penalty(tuesday, event, schedule) == 0.0

    def test_lecturer_overload(self, scorer, make_event):
        schedule = [
            _placed(make_event(f"O{i}:0", lecturer_id="L1"), timeslot_id=f"ts{i + 2}")
            for i in range(3)
        ]
        candidate = Candidate(day=Day.MON, timeslot_id="ts6", room_id="R1")

        same = make_event("O9:0", lecturer_id="L1")
        other = make_event("O9:0", lecturer_id="L2")
        assert scorer.compute_penalty(candidate, same, schedule) == 10.0
        assert scorer.compute_penalty(candidate, other, schedule) == 0.0

    def test_overload_grows_with_each_extra_session(self, scorer, make_event):
        schedule = [
            _placed(make_event(f"O{i}:0", lecturer_id="L1"), timeslot_id=f"ts{i + 2}")
            for i in range(4)
        ]
        candidate = Candidate(day=Day.MON, timeslot_id="ts7", room_id="R1")

        event = make_event("O9:0", lecturer_id="L1")
        assert scorer.compute_penalty(candidate, event, schedule) == 20.0

    def test_custom_weights(self, timeslots, make_event):
        config = ConstraintsConfig.from_dict({"soft_weights": {"avoid_early": 5}})
        scorer = SoftScorer(config, timeslots)
        candidate = Candidate(day=Day.MON, timeslot_id="ts1", room_id="R1")

        assert scorer.compute_penalty(candidate, make_event("E1"), []) == 5.0

    def test_total_score(self):
        scheduled = [
            ScheduledEvent("E1", Day.MON, "ts1", "R1", penalty=2.0),
            ScheduledEvent("E2", Day.MON, "ts2", "R1", penalty=3.0),
            ScheduledEvent("E3", Day.MON, "ts3", "R1", locked=True),
        ]
        assert SoftScorer.total_score(scheduled) == 5.0
        assert SoftScorer.total_score([]) == 0.0
