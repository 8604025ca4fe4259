"""Data models for the timetable allocator."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Self

from .constants import DEFAULT_LEVEL


class Day(str, Enum):
    """Days of the academic week."""

    MON = "MON"
    TUE = "TUE"
    WED = "WED"
    THU = "THU"
    FRI = "FRI"
    SAT = "SAT"
    SUN = "SUN"


def day_name_to_enum(day_name: str) -> Day | None:
    """Convert a day name ("mon", "Monday", "MON") to the Day enum.

    Args:
        day_name: Day name in any case, abbreviated or full

    Returns:
        Day enum, or None if the name is not recognized
    """
    if not day_name:
        return None
    key = str(day_name).strip().upper()[:3]
    try:
        return Day(key)
    except ValueError:
        return None


def parse_day(value: Any) -> Day:
    """Like day_name_to_enum, but raise ValueError for unknown names."""
    day = day_name_to_enum(value)
    if day is None:
        raise ValueError(f"unknown day '{value}'")
    return day


class RoomType(str, Enum):
    """Kind of room an event needs."""

    LECTURE_ROOM = "lecture_room"
    LAB = "lab"


class BlockScope(str, Enum):
    """What a blocked time applies to."""

    GLOBAL = "global"
    LEVEL = "level"
    LECTURER = "lecturer"
    ROOM = "room"


class UnscheduledReason(str, Enum):
    """Reasons why an event could not be placed."""

    NO_VALID_SLOTS = "no_valid_slots"
    NO_SUITABLE_ROOM_TYPE = "no_suitable_room_type"
    CONFLICTS_WITH_SCHEDULE = "conflicts_with_schedule"

    @property
    def message(self) -> str:
        return UNSCHEDULED_MESSAGES[self]


UNSCHEDULED_MESSAGES = {
    UnscheduledReason.NO_VALID_SLOTS: "No valid time slots or rooms available",
    UnscheduledReason.NO_SUITABLE_ROOM_TYPE: "No suitable room type available",
    UnscheduledReason.CONFLICTS_WITH_SCHEDULE: (
        "All candidate placements conflict with existing schedule"
    ),
}


class RunStatus(str, Enum):
    """Lifecycle of a schedule run."""

    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class TimeSlot:
    """A named interval within a day."""

    id: str
    label: str
    start_time: str
    end_time: str
    sort_order: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            id=str(data["id"]),
            label=str(data.get("label", "")),
            start_time=str(data.get("start_time", "")),
            end_time=str(data.get("end_time", "")),
            sort_order=int(data["sort_order"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "sort_order": self.sort_order,
        }


@dataclass
class Room:
    """A physical room for scheduling."""

    id: str
    name: str
    room_type: RoomType
    capacity: int = 0
    location: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", data["id"])),
            room_type=RoomType(str(data.get("room_type", "lecture_room")).strip()),
            capacity=int(data.get("capacity") or 0),
            location=str(data.get("location") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "room_type": self.room_type.value,
            "capacity": self.capacity,
            "location": self.location,
        }


@dataclass
class BlockedTime:
    """An exclusion rule for one (day, time slot).

    Attributes:
        scope: global/level/lecturer/room
        scope_id: Level number, lecturer id or room id (None for global)
        day: Blocked day
        timeslot_id: Blocked time slot
        reason: Free-text note (e.g. "SPORT (300 level)")
    """

    scope: BlockScope
    day: Day
    timeslot_id: str
    scope_id: str | None = None
    reason: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        scope_id = data.get("scope_id")
        return cls(
            scope=BlockScope(data["scope"]),
            day=parse_day(data["day"]),
            timeslot_id=str(data["timeslot_id"]),
            scope_id=str(scope_id) if scope_id not in (None, "") else None,
            reason=str(data.get("reason") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "scope": self.scope.value,
            "scope_id": self.scope_id,
            "day": self.day.value,
            "timeslot_id": self.timeslot_id,
            "reason": self.reason,
        }


@dataclass
class Lock:
    """An administrator-pinned placement for one event."""

    event_id: str
    day: Day
    timeslot_id: str
    room_id: str
    second_timeslot_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            event_id=str(data["event_id"]),
            day=parse_day(data["day"]),
            timeslot_id=str(data["timeslot_id"]),
            room_id=str(data["room_id"]),
            second_timeslot_id=data.get("second_timeslot_id") or None,
        )

    def to_candidate(self) -> "Candidate":
        return Candidate(
            day=self.day,
            timeslot_id=self.timeslot_id,
            room_id=self.room_id,
            second_timeslot_id=self.second_timeslot_id,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_id": self.event_id,
            "day": self.day.value,
            "timeslot_id": self.timeslot_id,
            "second_timeslot_id": self.second_timeslot_id,
            "room_id": self.room_id,
        }


@dataclass
class Event:
    """An atomic schedulable unit derived from a matched course offering."""

    id: str
    offering_id: str
    event_index: int
    duration_slots: int
    room_type_required: RoomType
    lecturer_id: str | None = None
    level: int = DEFAULT_LEVEL
    session_id: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            id=str(data["id"]),
            offering_id=str(data["offering_id"]),
            event_index=int(data.get("event_index", 0)),
            duration_slots=int(data.get("duration_slots", 1)),
            room_type_required=RoomType(data.get("room_type_required", "lecture_room")),
            lecturer_id=data.get("lecturer_id") or None,
            level=int(data.get("level") or DEFAULT_LEVEL),
            session_id=str(data.get("session_id", "")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "session_id": self.session_id,
            "offering_id": self.offering_id,
            "lecturer_id": self.lecturer_id,
            "event_index": self.event_index,
            "duration_slots": self.duration_slots,
            "room_type_required": self.room_type_required.value,
            "level": self.level,
        }


@dataclass(frozen=True)
class Candidate:
    """One concrete (day, slot(s), room) placement for an event."""

    day: Day
    timeslot_id: str
    room_id: str
    second_timeslot_id: str | None = None

    @property
    def timeslot_ids(self) -> tuple[str, ...]:
        if self.second_timeslot_id:
            return (self.timeslot_id, self.second_timeslot_id)
        return (self.timeslot_id,)

    def slot_keys(self) -> list[str]:
        """Occupancy keys ("DAY:timeslot_id") this placement consumes."""
        return [f"{self.day.value}:{slot_id}" for slot_id in self.timeslot_ids]


@dataclass
class ScheduledEvent:
    """A placed event."""

    event_id: str
    day: Day
    timeslot_id: str
    room_id: str
    second_timeslot_id: str | None = None
    locked: bool = False
    penalty: float = 0.0

    @classmethod
    def from_candidate(
        cls, event_id: str, candidate: Candidate, locked: bool = False, penalty: float = 0.0
    ) -> Self:
        return cls(
            event_id=event_id,
            day=candidate.day,
            timeslot_id=candidate.timeslot_id,
            room_id=candidate.room_id,
            second_timeslot_id=candidate.second_timeslot_id,
            locked=locked,
            penalty=penalty,
        )

    def to_candidate(self) -> Candidate:
        return Candidate(
            day=self.day,
            timeslot_id=self.timeslot_id,
            room_id=self.room_id,
            second_timeslot_id=self.second_timeslot_id,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_id": self.event_id,
            "day": self.day.value,
            "timeslot_id": self.timeslot_id,
            "second_timeslot_id": self.second_timeslot_id,
            "room_id": self.room_id,
            "locked": self.locked,
            "penalty": self.penalty,
        }


@dataclass
class UnscheduledEvent:
    """An event that could not be placed."""

    event_id: str
    reason: UnscheduledReason
    details: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_id": self.event_id,
            "reason": self.reason.value,
            "details": self.details,
        }


@dataclass
class ScheduleStatistics:
    """Statistics about the generated schedule."""

    total_events: int = 0
    locked_events: int = 0
    repaired_events: int = 0
    by_day: dict[str, int] = field(default_factory=dict)
    by_room: dict[str, int] = field(default_factory=dict)
    by_reason: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_events": self.total_events,
            "locked_events": self.locked_events,
            "repaired_events": self.repaired_events,
            "by_day": self.by_day,
            "by_room": self.by_room,
            "by_reason": self.by_reason,
        }


@dataclass
class ScheduleResult:
    """Result of one allocation."""

    scheduled: list[ScheduledEvent] = field(default_factory=list)
    unscheduled: list[UnscheduledEvent] = field(default_factory=list)
    soft_score: float = 0.0
    seed: int | None = None
    candidate_limit: int = 0
    statistics: ScheduleStatistics = field(default_factory=ScheduleStatistics)
    generation_date: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def scheduled_count(self) -> int:
        return len(self.scheduled)

    @property
    def unscheduled_count(self) -> int:
        return len(self.unscheduled)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "generation_date": self.generation_date,
            "seed": self.seed,
            "candidate_limit": self.candidate_limit,
            "scheduled_count": self.scheduled_count,
            "unscheduled_count": self.unscheduled_count,
            "soft_score": self.soft_score,
            "scheduled": [s.to_dict() for s in self.scheduled],
            "unscheduled": [u.to_dict() for u in self.unscheduled],
            "statistics": self.statistics.to_dict(),
        }


@dataclass
class ScheduleRun:
    """One invocation of the allocator for a session."""

    id: str
    session_id: str
    seed: int | None
    candidate_limit: int
    status: RunStatus = RunStatus.RUNNING
    scheduled_count: int = 0
    unscheduled_count: int = 0
    soft_score: float = 0.0
    error_message: str | None = None
    result: ScheduleResult | None = None

    def complete(self, result: ScheduleResult) -> None:
        self.status = RunStatus.COMPLETED
        self.result = result
        self.scheduled_count = result.scheduled_count
        self.unscheduled_count = result.unscheduled_count
        self.soft_score = result.soft_score

    def fail(self, message: str) -> None:
        self.status = RunStatus.FAILED
        self.error_message = message
        self.result = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "session_id": self.session_id,
            "seed": self.seed,
            "candidate_limit": self.candidate_limit,
            "status": self.status.value,
            "scheduled_count": self.scheduled_count,
            "unscheduled_count": self.unscheduled_count,
            "soft_score": self.soft_score,
            "error_message": self.error_message,
        }
