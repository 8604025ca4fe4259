"""Enumeration of hard-feasible placements for an event."""

import logging

from .config.constraints import ConstraintsConfig
from .models import BlockedTime, BlockScope, Candidate, Day, Event, Room, RoomType, TimeSlot
from .utils import resolve_consecutive_pairs, slot_key, sort_timeslots

logger = logging.getLogger(__name__)


class CandidateGenerator:
    """Lists every (day, slot(s), room) an event may use.

    A placement is excluded when a blocked time covers it: global blocks,
    blocks on the event's level or lecturer, and blocks on the room itself.
    Only existence is decided here; ranking happens in the allocator.
    """

    def __init__(
        self,
        timeslots: list[TimeSlot],
        rooms: list[Room],
        blocked_times: list[BlockedTime],
        config: ConstraintsConfig,
    ) -> None:
        """Initialize the generator.

        Args:
            timeslots: Session time slots
            rooms: Session rooms
            blocked_times: Session blocked times
            config: Session constraints (allowed days, consecutive pairs)
        """
        self.timeslots = sort_timeslots(timeslots)
        self.rooms = rooms
        self.days = config.allowed_days

        self.pairs = resolve_consecutive_pairs(config.consecutive_pairs, self.timeslots)
        if len(self.pairs) < len(config.consecutive_pairs):
            logger.warning(
                f"{len(config.consecutive_pairs) - len(self.pairs)} consecutive pairs "
                "do not resolve to session time slots and are skipped"
            )

        # (scope, scope_id) -> blocked "DAY:timeslot_id" keys
        self._blocked: dict[tuple[BlockScope, str | None], set[str]] = {}
        for block in blocked_times:
            scope_id = None if block.scope == BlockScope.GLOBAL else block.scope_id
            self._blocked.setdefault((block.scope, scope_id), set()).add(
                slot_key(block.day, block.timeslot_id)
            )

    def rooms_of_type(self, room_type: RoomType) -> list[Room]:
        return [r for r in self.rooms if r.room_type == room_type]

    def has_room_type(self, room_type: RoomType) -> bool:
        """True if the session has at least one room of this type."""
        return any(r.room_type == room_type for r in self.rooms)

    def _is_blocked_for(self, scope: BlockScope, scope_id: str | None, key: str) -> bool:
        return key in self._blocked.get((scope, scope_id), ())

    def is_event_blocked(self, event: Event, day: Day, timeslot_id: str) -> bool:
        """Whether a global, level or lecturer block covers this (day, slot)."""
        key = slot_key(day, timeslot_id)
        for scope in BlockScope:
            match scope:
                case BlockScope.GLOBAL:
                    blocked = self._is_blocked_for(scope, None, key)
                case BlockScope.LEVEL:
                    blocked = self._is_blocked_for(scope, str(event.level), key)
                case BlockScope.LECTURER:
                    blocked = event.lecturer_id is not None and self._is_blocked_for(
                        scope, event.lecturer_id, key
                    )
                case BlockScope.ROOM:
                    blocked = False
            if blocked:
                return True
        return False

    def is_room_blocked(self, room_id: str, day: Day, timeslot_id: str) -> bool:
        return self._is_blocked_for(BlockScope.ROOM, room_id, slot_key(day, timeslot_id))

    def generate(self, event: Event) -> list[Candidate]:
        """All unblocked placements for an event.

        Single-slot events: day x slot x room. Two-slot events: only the
        configured consecutive pairs, pair x day x room, with both slots
        unblocked for the event and the room.

        Returns:
            Candidates in generation order
        """
        rooms = self.rooms_of_type(event.room_type_required)
        candidates: list[Candidate] = []

        if event.duration_slots == 1:
            for day in self.days:
                for slot in self.timeslots:
                    if self.is_event_blocked(event, day, slot.id):
                        continue
                    for room in rooms:
                        if self.is_room_blocked(room.id, day, slot.id):
                            continue
                        candidates.append(
                            Candidate(day=day, timeslot_id=slot.id, room_id=room.id)
                        )
            return candidates

        for first, second in self.pairs:
            for day in self.days:
                if self.is_event_blocked(event, day, first.id) or self.is_event_blocked(
                    event, day, second.id
                ):
                    continue
                for room in rooms:
                    if self.is_room_blocked(room.id, day, first.id) or self.is_room_blocked(
                        room.id, day, second.id
                    ):
                        continue
                    candidates.append(
                        Candidate(
                            day=day,
                            timeslot_id=first.id,
                            room_id=room.id,
                            second_timeslot_id=second.id,
                        )
                    )
        return candidates
