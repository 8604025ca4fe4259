"""Expansion of matched course offerings into schedulable events."""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..models import CourseOffering, LecturerAssignment, OfferingType
from .config.constraints import ConstraintsConfig, UnitSegment
from .constants import DEFAULT_LEVEL
from .models import Event, RoomType

if TYPE_CHECKING:
    from ..storage import SessionStore

logger = logging.getLogger(__name__)


@dataclass
class ExpansionResult:
    """Events generated for a session and the locks they orphaned."""

    events: list[Event] = field(default_factory=list)
    stale_lock_ids: list[str] = field(default_factory=list)


def primary_lecturer(assignments: list[LecturerAssignment]) -> str | None:
    """Lecturer with the highest share; the first one wins on ties."""
    best: LecturerAssignment | None = None
    for assignment in assignments:
        if best is None or assignment.share > best.share:
            best = assignment
    return best.lecturer_id if best else None


class EventExpander:
    """Turns offerings into events using the session's unit mapping."""

    def __init__(self, config: ConstraintsConfig) -> None:
        self.config = config

    def segments_for(self, offering: CourseOffering) -> list[UnitSegment]:
        """Unit mapping entry for an offering.

        Falls back to the type's "default" entry, then to one 1-slot segment
        per credit unit.
        """
        segments = self.config.segments_for(offering.type.value, offering.credit_units)
        if segments:
            return segments
        return [UnitSegment(duration_slots=1) for _ in range(max(offering.credit_units, 0))]

    def expand_offering(
        self, offering: CourseOffering, assignments: list[LecturerAssignment]
    ) -> list[Event]:
        """Create one event per unit mapping segment."""
        lecturer_id = primary_lecturer(assignments)
        if offering.type == OfferingType.LAB:
            room_type = RoomType.LAB
        else:
            room_type = RoomType.LECTURE_ROOM

        return [
            Event(
                id=f"{offering.id}:{index}",
                offering_id=offering.id,
                event_index=index,
                duration_slots=segment.duration_slots,
                room_type_required=room_type,
                lecturer_id=lecturer_id,
                level=offering.level or DEFAULT_LEVEL,
                session_id=offering.session_id,
            )
            for index, segment in enumerate(self.segments_for(offering))
        ]

    def expand_session(self, session_id: str, store: "SessionStore") -> ExpansionResult:
        """Regenerate all events of a session from its matched offerings.

        Existing events are replaced. Locks pointing at events that no longer
        exist are reported as stale; they are not deleted here.
        """
        offerings = [o for o in store.list_offerings(session_id) if o.is_matched]

        events: list[Event] = []
        for offering in offerings:
            events.extend(self.expand_offering(offering, store.list_assignments(offering.id)))

        store.replace_events(session_id, events)

        event_ids = {e.id for e in events}
        stale = [
            lock.event_id
            for lock in store.list_locks(session_id)
            if lock.event_id not in event_ids
        ]
        for event_id in stale:
            logger.warning(f"Lock on event {event_id} is stale after expansion")

        logger.info(
            f"Expanded {len(offerings)} matched offerings into {len(events)} events "
            f"for session {session_id}"
        )
        return ExpansionResult(events=events, stale_lock_ids=stale)
