"""Greedy timetable allocation with bounded repair."""

import logging
from collections import defaultdict
from dataclasses import dataclass
from enum import Enum

from ..exceptions import ConfigError, UpstreamDataError
from .candidates import CandidateGenerator
from .config.constraints import ConstraintsConfig
from .conflicts import OccupancyTracker
from .difficulty import sort_by_difficulty
from .models import (
    BlockedTime,
    Candidate,
    Event,
    Lock,
    Room,
    ScheduledEvent,
    ScheduleResult,
    ScheduleStatistics,
    TimeSlot,
    UnscheduledEvent,
    UnscheduledReason,
)
from .soft import SoftScorer
from .utils import sort_timeslots

logger = logging.getLogger(__name__)


class PlacementAction(str, Enum):
    PLACE = "place"
    REMOVE = "remove"


@dataclass
class PlacementDecision:
    """One entry of the allocation log."""

    action: PlacementAction
    event_id: str
    candidate: Candidate
    locked: bool = False
    penalty: float = 0.0


class Allocator:
    """Places events into (day, slot(s), room) combinations.

    Algorithm:
    1. Reserve every lock; locked events are emitted as scheduled
    2. Generate candidates for the remaining events and order them by
       difficulty, hardest first
    3. For each event, rank its feasible candidates by soft penalty and
       place the first of the top K that still fits
    4. If none fits, try one repair: move a single blocking placement to
       another of its candidates. Displacements never chain
    5. Events that still do not fit are reported with a reason
    """

    def __init__(
        self,
        timeslots: list[TimeSlot],
        rooms: list[Room],
        blocked_times: list[BlockedTime],
        config: ConstraintsConfig,
    ) -> None:
        """Initialize the allocator for one session.

        Args:
            timeslots: Session time slots
            rooms: Session rooms
            blocked_times: Session blocked times
            config: Session constraints
        """
        self.timeslots = sort_timeslots(timeslots)
        self.rooms = rooms
        self.config = config
        self.generator = CandidateGenerator(self.timeslots, rooms, blocked_times, config)
        self.soft_scorer = SoftScorer(config, self.timeslots)

        self.tracker = OccupancyTracker()
        self.decisions: list[PlacementDecision] = []
        self._placements: dict[str, ScheduledEvent] = {}
        self._events: dict[str, Event] = {}
        self._candidates: dict[str, list[Candidate]] = {}

    def allocate(
        self,
        events: list[Event],
        locks: list[Lock] | None = None,
        seed: int | None = None,
        candidate_limit: int | None = None,
    ) -> ScheduleResult:
        """Generate a schedule for the given events.

        Args:
            events: Events to place
            locks: Pinned placements
            seed: Recorded on the result; ordering is fully deterministic
            candidate_limit: Top-K cut-off, defaults to the session limit

        Returns:
            ScheduleResult with scheduled and unscheduled events

        Raises:
            ConfigError: If candidate_limit is not positive
            UpstreamDataError: If a lock references an unknown slot or room,
                names slots that do not fit its event, or clashes with another lock
        """
        if candidate_limit is None:
            candidate_limit = self.config.limits.candidate_limit_per_event
        if candidate_limit < 1:
            raise ConfigError(
                f"candidate_limit must be a positive integer, got {candidate_limit}"
            )

        self.tracker = OccupancyTracker()
        self.decisions = []
        self._placements = {}
        self._events = {e.id: e for e in events}
        self._candidates = {}

        logger.info(
            f"Allocating {len(events)} events into {len(self.timeslots)} slots, "
            f"{len(self.rooms)} rooms (candidate limit {candidate_limit})"
        )

        # 1. Locks
        locked_ids = self._place_locks(locks or [])

        # 2. Candidates and difficulty
        to_schedule = [e for e in events if e.id not in locked_ids]
        for event in to_schedule:
            self._candidates[event.id] = self.generator.generate(event)
        ordered = sort_by_difficulty(
            to_schedule, {event_id: len(c) for event_id, c in self._candidates.items()}
        )

        # 3-5. Greedy placement with repair
        unscheduled: list[UnscheduledEvent] = []
        repaired = 0
        for event, _ in ordered:
            candidates = self._candidates[event.id]

            if not candidates:
                if self.generator.has_room_type(event.room_type_required):
                    reason = UnscheduledReason.NO_VALID_SLOTS
                else:
                    reason = UnscheduledReason.NO_SUITABLE_ROOM_TYPE
                unscheduled.append(self._unscheduled(event, reason))
                continue

            if self._place_best(event, candidates, candidate_limit):
                continue

            if self._repair(event, candidates, candidate_limit):
                repaired += 1
                continue

            unscheduled.append(
                self._unscheduled(event, UnscheduledReason.CONFLICTS_WITH_SCHEDULE)
            )

        scheduled = list(self._placements.values())
        soft_score = self.soft_scorer.total_score(scheduled)
        statistics = self._compute_statistics(
            len(events), len(locked_ids), repaired, scheduled, unscheduled
        )

        logger.info(
            f"Allocation finished: {len(scheduled)} scheduled, {len(unscheduled)} unscheduled, "
            f"{repaired} repaired, soft score {soft_score}"
        )

        return ScheduleResult(
            scheduled=scheduled,
            unscheduled=unscheduled,
            soft_score=soft_score,
            seed=seed,
            candidate_limit=candidate_limit,
            statistics=statistics,
        )

    def validate_locks(self, locks: list[Lock]) -> None:
        """Check that every lock points at known slots and room and fits its event.

        A lock on a 2-slot event must name one of the configured consecutive
        pairs; a lock on a 1-slot event must not name a second slot.

        Raises:
            UpstreamDataError: On the first invalid lock
        """
        slot_ids = {ts.id for ts in self.timeslots}
        room_ids = {r.id for r in self.rooms}
        pair_ids = {(first.id, second.id) for first, second in self.generator.pairs}
        for lock in locks:
            referenced_by = f"lock on event {lock.event_id}"
            for timeslot_id in (lock.timeslot_id, lock.second_timeslot_id):
                if timeslot_id is not None and timeslot_id not in slot_ids:
                    raise UpstreamDataError("Time slot", timeslot_id, referenced_by)
            if lock.room_id not in room_ids:
                raise UpstreamDataError("Room", lock.room_id, referenced_by)

            event = self._events.get(lock.event_id)
            if event is None:
                continue
            if event.duration_slots == 2:
                if (lock.timeslot_id, lock.second_timeslot_id) not in pair_ids:
                    pair = f"{lock.timeslot_id}+{lock.second_timeslot_id or '?'}"
                    raise UpstreamDataError(
                        "Consecutive pair",
                        pair,
                        referenced_by,
                        message=f"Slots '{pair}' are not a configured consecutive pair",
                    )
            elif lock.second_timeslot_id is not None:
                raise UpstreamDataError(
                    "Time slot",
                    lock.second_timeslot_id,
                    referenced_by,
                    message=f"Event {event.id} takes 1 slot but its lock names a second one",
                )

    def _place_locks(self, locks: list[Lock]) -> set[str]:
        """Reserve locks and emit them as scheduled.

        Locks on events that are not being allocated are stale and ignored.

        Returns:
            Ids of the locked events

        Raises:
            UpstreamDataError: If a lock is invalid or clashes with another lock
        """
        active: list[Lock] = []
        seen: set[str] = set()
        for lock in locks:
            if lock.event_id not in self._events:
                logger.warning(f"Ignoring stale lock on unknown event {lock.event_id}")
                continue
            if lock.event_id in seen:
                logger.warning(f"Ignoring duplicate lock on event {lock.event_id}")
                continue
            seen.add(lock.event_id)
            active.append(lock)

        self.validate_locks(active)

        for lock in active:
            event = self._events[lock.event_id]
            candidate = lock.to_candidate()
            if not self.tracker.can_place(candidate, event):
                holders = ", ".join(self.tracker.blocking_events(candidate, event))
                clashes = ", ".join(self.tracker.conflicting_keys(candidate, event))
                raise UpstreamDataError(
                    "Lock",
                    event.id,
                    message=f"Locks on events {holders} and {event.id} clash: {clashes}",
                )
            self._commit(event, candidate, penalty=0.0, locked=True)

        return seen

    def _schedule_view(self) -> list[tuple[Event, ScheduledEvent]]:
        return [(self._events[event_id], s) for event_id, s in self._placements.items()]

    def _rank(
        self, event: Event, candidates: list[Candidate], limit: int
    ) -> list[tuple[Candidate, float]]:
        """Top-K candidates by ascending soft penalty (stable)."""
        schedule = self._schedule_view()
        ranked = sorted(
            (
                (candidate, self.soft_scorer.compute_penalty(candidate, event, schedule))
                for candidate in candidates
            ),
            key=lambda item: item[1],
        )
        return ranked[:limit]

    def _place_best(self, event: Event, candidates: list[Candidate], limit: int) -> bool:
        feasible = [c for c in candidates if self.tracker.is_feasible(c, event)]
        if not feasible:
            logger.debug(f"Event {event.id}: none of {len(candidates)} candidates is feasible")
            return False

        for candidate, penalty in self._rank(event, feasible, limit):
            if self.tracker.can_place(candidate, event):
                self._commit(event, candidate, penalty)
                logger.debug(
                    f"Event {event.id} placed at {candidate.day.value} "
                    f"{'+'.join(candidate.timeslot_ids)} in {candidate.room_id} "
                    f"(penalty {penalty})"
                )
                return True
        return False

    def _repair(self, event: Event, candidates: list[Candidate], limit: int) -> bool:
        """One bounded repair attempt.

        For each of the event's top-K candidates held by exactly one movable
        placement, move that placement to another of its own top-K candidates
        and take its place. The first success wins; failures are rolled back.
        """
        for candidate, _ in self._rank(event, candidates, limit):
            blockers = self.tracker.blocking_events(candidate, event)
            if len(blockers) != 1:
                continue

            blocker_id = blockers[0]
            original = self._placements.get(blocker_id)
            if original is None or original.locked:
                continue
            blocker = self._events[blocker_id]

            self._remove(blocker)
            if not self.tracker.can_place(candidate, event):
                self._commit(blocker, original.to_candidate(), original.penalty)
                continue

            penalty = self.soft_scorer.compute_penalty(candidate, event, self._schedule_view())
            self._commit(event, candidate, penalty)

            original_candidate = original.to_candidate()
            alternatives = [c for c in self._candidates[blocker_id] if c != original_candidate]
            for alternative, alt_penalty in self._rank(blocker, alternatives, limit):
                if self.tracker.can_place(alternative, blocker):
                    self._commit(blocker, alternative, alt_penalty)
                    logger.debug(
                        f"Repair: moved {blocker_id} to {alternative.day.value} "
                        f"{'+'.join(alternative.timeslot_ids)} in {alternative.room_id} "
                        f"to make room for {event.id}"
                    )
                    return True

            self._remove(event)
            self._commit(blocker, original_candidate, original.penalty)

        logger.debug(f"Event {event.id}: repair found no movable blocker")
        return False

    def _commit(
        self, event: Event, candidate: Candidate, penalty: float, locked: bool = False
    ) -> None:
        self.tracker.place(candidate, event)
        self._placements[event.id] = ScheduledEvent.from_candidate(
            event.id, candidate, locked=locked, penalty=penalty
        )
        self.decisions.append(
            PlacementDecision(PlacementAction.PLACE, event.id, candidate, locked, penalty)
        )

    def _remove(self, event: Event) -> None:
        placement = self._placements.pop(event.id)
        candidate = placement.to_candidate()
        self.tracker.unplace(candidate, event)
        self.decisions.append(PlacementDecision(PlacementAction.REMOVE, event.id, candidate))

    def _unscheduled(self, event: Event, reason: UnscheduledReason) -> UnscheduledEvent:
        logger.debug(f"Event {event.id} unscheduled: {reason.value}")
        return UnscheduledEvent(event_id=event.id, reason=reason, details=reason.message)

    def _compute_statistics(
        self,
        total: int,
        locked: int,
        repaired: int,
        scheduled: list[ScheduledEvent],
        unscheduled: list[UnscheduledEvent],
    ) -> ScheduleStatistics:
        """Compute statistics for the generated schedule."""
        by_day: dict[str, int] = defaultdict(int)
        by_room: dict[str, int] = defaultdict(int)
        by_reason: dict[str, int] = defaultdict(int)

        for placement in scheduled:
            by_day[placement.day.value] += 1
            by_room[placement.room_id] += 1

        for item in unscheduled:
            by_reason[item.reason.value] += 1

        return ScheduleStatistics(
            total_events=total,
            locked_events=locked,
            repaired_events=repaired,
            by_day=dict(by_day),
            by_room=dict(by_room),
            by_reason=dict(by_reason),
        )
