"""Hard-constraint occupancy tracking for schedule generation."""

from collections import defaultdict

from .models import Candidate, Event, Lock

LECTURER = "lecturer"
LEVEL = "level"
ROOM = "room"


class OccupancyTracker:
    """Tracks which (day, slot) keys each lecturer, level and room holds.

    This class maintains three separate occupancy maps:
    - lecturer_slots: lecturer id -> occupied "DAY:timeslot_id" keys
    - level_slots: study level -> occupied keys
    - room_slots: room id -> occupied keys

    It also remembers which event holds each key so the allocator can find
    the placements blocking a candidate. A tracker belongs to a single
    allocation run.
    """

    def __init__(self) -> None:
        self.lecturer_slots: dict[str, set[str]] = defaultdict(set)
        self.level_slots: dict[int, set[str]] = defaultdict(set)
        self.room_slots: dict[str, set[str]] = defaultdict(set)
        # (dimension, resource id, key) -> event id holding it
        self._holders: dict[tuple[str, str, str], str] = {}

    def _claims(self, candidate: Candidate, event: Event) -> list[tuple[str, str, str]]:
        """Every (dimension, resource id, key) a placement would occupy."""
        claims = []
        for key in candidate.slot_keys():
            if event.lecturer_id:
                claims.append((LECTURER, event.lecturer_id, key))
            claims.append((LEVEL, str(event.level), key))
            claims.append((ROOM, candidate.room_id, key))
        return claims

    def _slots(self, dimension: str, resource_id: str) -> set[str]:
        if dimension == LECTURER:
            return self.lecturer_slots[resource_id]
        if dimension == LEVEL:
            return self.level_slots[int(resource_id)]
        return self.room_slots[resource_id]

    def _is_taken(self, dimension: str, resource_id: str, key: str) -> bool:
        if dimension == LECTURER:
            slots = self.lecturer_slots.get(resource_id)
        elif dimension == LEVEL:
            slots = self.level_slots.get(int(resource_id))
        else:
            slots = self.room_slots.get(resource_id)
        return bool(slots) and key in slots

    def can_place(self, candidate: Candidate, event: Event) -> bool:
        """Check that no lecturer, level or room key of the candidate is taken.

        Args:
            candidate: Placement to check
            event: Event being placed

        Returns:
            True if the placement clashes with nothing already placed
        """
        return not any(self._is_taken(*claim) for claim in self._claims(candidate, event))

    def is_feasible(self, candidate: Candidate, event: Event) -> bool:
        return self.can_place(candidate, event)

    def place(self, candidate: Candidate, event: Event) -> None:
        """Mark every slot of the candidate as held by the event."""
        for dimension, resource_id, key in self._claims(candidate, event):
            self._slots(dimension, resource_id).add(key)
            self._holders[(dimension, resource_id, key)] = event.id

    def unplace(self, candidate: Candidate, event: Event) -> None:
        """Exact inverse of place()."""
        for dimension, resource_id, key in self._claims(candidate, event):
            self._slots(dimension, resource_id).discard(key)
            self._holders.pop((dimension, resource_id, key), None)

    def reserve_lock(self, lock: Lock, event: Event) -> None:
        """Pre-mark the slots of a locked event."""
        self.place(lock.to_candidate(), event)

    def blocking_events(self, candidate: Candidate, event: Event) -> list[str]:
        """Ids of the events holding any key the candidate needs.

        Returns:
            Event ids in the order their clashes are found, without duplicates
        """
        blockers: dict[str, None] = {}
        for claim in self._claims(candidate, event):
            holder = self._holders.get(claim)
            if holder is not None and holder != event.id:
                blockers[holder] = None
        return list(blockers)

    def conflicting_keys(self, candidate: Candidate, event: Event) -> list[str]:
        """Human-readable list of clashes, e.g. "room R1 at MON:ts1"."""
        return [
            f"{dimension} {resource_id} at {key}"
            for dimension, resource_id, key in self._claims(candidate, event)
            if self._is_taken(dimension, resource_id, key)
        ]
