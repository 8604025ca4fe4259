"""Storage interfaces for catalog and session data.

Persistence is owned by the host application. The matcher, expander and
run orchestration only talk to the abstract stores below; InMemoryStore is
the implementation used by the CLI (filled from a reference directory) and
by the tests.
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from .models import (
    CanonicalCourse,
    CourseAlias,
    CourseOffering,
    LecturerAssignment,
    MatchingSuggestion,
    MatchStatus,
)

if TYPE_CHECKING:
    from .scheduler.config.constraints import ConstraintsConfig
    from .scheduler.models import (
        BlockedTime,
        Event,
        Lock,
        Room,
        ScheduledEvent,
        ScheduleRun,
        TimeSlot,
        UnscheduledEvent,
    )


class CatalogStore(ABC):
    """Access to course offerings, the canonical catalog and learned aliases."""

    @abstractmethod
    def get_offering(self, offering_id: str) -> CourseOffering | None:
        pass

    @abstractmethod
    def list_offerings(
        self, session_id: str, status: MatchStatus | None = None
    ) -> list[CourseOffering]:
        pass

    @abstractmethod
    def update_offering(self, offering: CourseOffering) -> None:
        pass

    @abstractmethod
    def get_canonical(self, canonical_id: str) -> CanonicalCourse | None:
        pass

    @abstractmethod
    def list_canonical_courses(self) -> list[CanonicalCourse]:
        pass

    @abstractmethod
    def find_canonical_by_title(self, normalized_title: str) -> CanonicalCourse | None:
        pass

    @abstractmethod
    def find_alias_by_code(self, normalized_code: str) -> str | None:
        """Return the canonical course id aliased to a normalized code."""
        pass

    @abstractmethod
    def find_alias_by_title(self, normalized_title: str) -> str | None:
        """Return the canonical course id aliased to a normalized title."""
        pass

    @abstractmethod
    def upsert_alias(self, alias: CourseAlias) -> None:
        """Create an alias, or refresh the one for the same course and title."""
        pass

    @abstractmethod
    def replace_suggestions(
        self, offering_id: str, suggestions: list[MatchingSuggestion]
    ) -> None:
        pass

    @abstractmethod
    def list_suggestions(self, offering_id: str) -> list[MatchingSuggestion]:
        pass

    @abstractmethod
    def delete_suggestions(self, offering_id: str) -> None:
        pass


class SessionStore(ABC):
    """Access to one session's scheduling inputs and run results."""

    @abstractmethod
    def list_offerings(
        self, session_id: str, status: MatchStatus | None = None
    ) -> list[CourseOffering]:
        pass

    @abstractmethod
    def list_assignments(self, offering_id: str) -> list[LecturerAssignment]:
        pass

    @abstractmethod
    def list_events(self, session_id: str) -> list[Event]:
        pass

    @abstractmethod
    def replace_events(self, session_id: str, events: list[Event]) -> None:
        """Delete all events of the session and store the new ones."""
        pass

    @abstractmethod
    def list_timeslots(self, session_id: str) -> list[TimeSlot]:
        pass

    @abstractmethod
    def list_rooms(self, session_id: str) -> list[Room]:
        pass

    @abstractmethod
    def list_blocked_times(self, session_id: str) -> list[BlockedTime]:
        pass

    @abstractmethod
    def list_locks(self, session_id: str) -> list[Lock]:
        pass

    @abstractmethod
    def get_constraints(self, session_id: str) -> ConstraintsConfig | None:
        pass

    @abstractmethod
    def save_constraints(self, session_id: str, config: ConstraintsConfig) -> None:
        pass

    @abstractmethod
    def save_run(self, run: ScheduleRun) -> None:
        """Create or update a run record."""
        pass

    @abstractmethod
    def save_run_results(
        self,
        run_id: str,
        scheduled: list[ScheduledEvent],
        unscheduled: list[UnscheduledEvent],
    ) -> None:
        pass


class InMemoryStore(CatalogStore, SessionStore):
    """Dictionary-backed store for a single process.

    Collections keep insertion order so every listing is deterministic.
    """

    def __init__(self) -> None:
        self.offerings: dict[str, CourseOffering] = {}
        self.canonical_courses: dict[str, CanonicalCourse] = {}
        self.aliases: list[CourseAlias] = []
        self.suggestions: dict[str, list[MatchingSuggestion]] = {}
        self.assignments: list[LecturerAssignment] = []
        self.events: dict[str, list[Event]] = {}
        self.timeslots: dict[str, list[TimeSlot]] = {}
        self.rooms: dict[str, list[Room]] = {}
        self.blocked_times: dict[str, list[BlockedTime]] = {}
        self.locks: dict[str, list[Lock]] = {}
        self.constraints: dict[str, ConstraintsConfig] = {}
        self.runs: dict[str, ScheduleRun] = {}
        self.run_scheduled: dict[str, list[ScheduledEvent]] = {}
        self.run_unscheduled: dict[str, list[UnscheduledEvent]] = {}

    # Loading helpers

    def add_offerings(self, offerings: list[CourseOffering]) -> None:
        for offering in offerings:
            self.offerings[offering.id] = offering

    def add_canonical_courses(self, courses: list[CanonicalCourse]) -> None:
        for course in courses:
            self.canonical_courses[course.id] = course

    def add_aliases(self, aliases: list[CourseAlias]) -> None:
        for alias in aliases:
            self.upsert_alias(alias)

    def add_assignments(self, assignments: list[LecturerAssignment]) -> None:
        self.assignments.extend(assignments)

    def set_timeslots(self, session_id: str, timeslots: list[TimeSlot]) -> None:
        self.timeslots[session_id] = list(timeslots)

    def set_rooms(self, session_id: str, rooms: list[Room]) -> None:
        self.rooms[session_id] = list(rooms)

    def set_blocked_times(self, session_id: str, blocked: list[BlockedTime]) -> None:
        self.blocked_times[session_id] = list(blocked)

    def set_locks(self, session_id: str, locks: list[Lock]) -> None:
        self.locks[session_id] = list(locks)

    # CatalogStore

    def get_offering(self, offering_id: str) -> CourseOffering | None:
        return self.offerings.get(offering_id)

    def list_offerings(
        self, session_id: str, status: MatchStatus | None = None
    ) -> list[CourseOffering]:
        return [
            o
            for o in self.offerings.values()
            if o.session_id == session_id and (status is None or o.match_status == status)
        ]

    def update_offering(self, offering: CourseOffering) -> None:
        self.offerings[offering.id] = offering

    def get_canonical(self, canonical_id: str) -> CanonicalCourse | None:
        return self.canonical_courses.get(canonical_id)

    def list_canonical_courses(self) -> list[CanonicalCourse]:
        return list(self.canonical_courses.values())

    def find_canonical_by_title(self, normalized_title: str) -> CanonicalCourse | None:
        for course in self.canonical_courses.values():
            if course.normalized_title == normalized_title:
                return course
        return None

    def find_alias_by_code(self, normalized_code: str) -> str | None:
        if not normalized_code:
            return None
        for alias in self.aliases:
            if alias.normalized_code == normalized_code:
                return alias.canonical_course_id
        return None

    def find_alias_by_title(self, normalized_title: str) -> str | None:
        if not normalized_title:
            return None
        for alias in self.aliases:
            if alias.normalized_title == normalized_title:
                return alias.canonical_course_id
        return None

    def upsert_alias(self, alias: CourseAlias) -> None:
        for i, existing in enumerate(self.aliases):
            if (
                existing.canonical_course_id == alias.canonical_course_id
                and existing.normalized_title == alias.normalized_title
            ):
                self.aliases[i] = alias
                return
        self.aliases.append(alias)

    def replace_suggestions(
        self, offering_id: str, suggestions: list[MatchingSuggestion]
    ) -> None:
        self.suggestions[offering_id] = list(suggestions)

    def list_suggestions(self, offering_id: str) -> list[MatchingSuggestion]:
        return list(self.suggestions.get(offering_id, []))

    def delete_suggestions(self, offering_id: str) -> None:
        self.suggestions.pop(offering_id, None)

    # SessionStore

    def list_assignments(self, offering_id: str) -> list[LecturerAssignment]:
        return [a for a in self.assignments if a.offering_id == offering_id]

    def list_events(self, session_id: str) -> list[Event]:
        return list(self.events.get(session_id, []))

    def replace_events(self, session_id: str, events: list[Event]) -> None:
        self.events[session_id] = list(events)

    def list_timeslots(self, session_id: str) -> list[TimeSlot]:
        return sorted(self.timeslots.get(session_id, []), key=lambda ts: ts.sort_order)

    def list_rooms(self, session_id: str) -> list[Room]:
        return list(self.rooms.get(session_id, []))

    def list_blocked_times(self, session_id: str) -> list[BlockedTime]:
        return list(self.blocked_times.get(session_id, []))

    def list_locks(self, session_id: str) -> list[Lock]:
        return list(self.locks.get(session_id, []))

    def get_constraints(self, session_id: str) -> ConstraintsConfig | None:
        return self.constraints.get(session_id)

    def save_constraints(self, session_id: str, config: ConstraintsConfig) -> None:
        self.constraints[session_id] = copy.deepcopy(config)

    def save_run(self, run: ScheduleRun) -> None:
        self.runs[run.id] = run

    def save_run_results(
        self,
        run_id: str,
        scheduled: list[ScheduledEvent],
        unscheduled: list[UnscheduledEvent],
    ) -> None:
        self.run_scheduled[run_id] = list(scheduled)
        self.run_unscheduled[run_id] = list(unscheduled)
