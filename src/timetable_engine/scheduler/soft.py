"""Soft-constraint penalties used to rank candidate placements."""

from collections.abc import Iterable

from .config.constraints import ConstraintsConfig
from .models import Candidate, Event, ScheduledEvent, TimeSlot
from .utils import sort_timeslots


class SoftScorer:
    """Scores placements against the session's soft weights.

    A penalty never makes a placement infeasible; it only orders the
    feasible candidates of an event.
    """

    def __init__(self, config: ConstraintsConfig, timeslots: list[TimeSlot]) -> None:
        self.weights = config.soft_weights
        self.max_per_day = config.limits.max_sessions_per_lecturer_per_day

        ordered = sort_timeslots(timeslots)
        self.first_slot_id = ordered[0].id if ordered else None
        self.last_slot_id = ordered[-1].id if ordered else None

    def compute_penalty(
        self,
        candidate: Candidate,
        event: Event,
        schedule: Iterable[tuple[Event, ScheduledEvent]],
    ) -> float:
        """Penalty of placing an event at a candidate.

        Args:
            candidate: Placement to score
            event: Event being placed
            schedule: Placements already made, with their events

        Returns:
            Weighted sum of the soft violations the placement would add
        """
        same_offering = 0
        lecturer_today = 0
        for placed_event, placement in schedule:
            if placement.day != candidate.day:
                continue
            if placed_event.offering_id == event.offering_id:
                same_offering += 1
            if event.lecturer_id and placed_event.lecturer_id == event.lecturer_id:
                lecturer_today += 1

        penalty = 0.0
        if same_offering:
            penalty += self.weights.spread_course_sessions * same_offering

        slot_ids = candidate.timeslot_ids
        if slot_ids[0] == self.first_slot_id:
            penalty += self.weights.avoid_early
        if slot_ids[-1] == self.last_slot_id:
            penalty += self.weights.avoid_late

        if event.lecturer_id and lecturer_today >= self.max_per_day:
            penalty += self.weights.lecturer_overload * (lecturer_today - self.max_per_day + 1)

        return penalty

    @staticmethod
    def total_score(scheduled: Iterable[ScheduledEvent]) -> float:
        """Sum of the penalties recorded when each placement was committed."""
        return sum((s.penalty for s in scheduled), 0.0)
