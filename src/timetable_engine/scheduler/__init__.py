"""Greedy timetable allocation for university course sessions.

Matched course offerings are expanded into events, and each event is given
a day, time slot(s) and room without lecturer, level or room clashes.
Events with the fewest options go first, the cheapest placement by soft
penalty wins, and a single bounded repair is tried before an event is
reported as unscheduled.

Main classes:
- EventExpander: Turns matched offerings into events
- Allocator: Places events for one session
- ScheduleRunner: Runs the allocator against a session store
- ConfigLoader: Loads a session from a reference/ directory

Usage:
    from timetable_engine.scheduler import ConfigLoader, ScheduleRunner

    loader = ConfigLoader(Path("reference"))
    store = loader.load_store()
    run = ScheduleRunner(store).generate(loader.session_id)
"""

from .algorithm import Allocator, PlacementAction, PlacementDecision
from .candidates import CandidateGenerator
from .config import ConfigLoader, ConstraintsConfig
from .conflicts import OccupancyTracker
from .difficulty import compute_difficulty, sort_by_difficulty
from .expander import EventExpander, ExpansionResult
from .models import (
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
    ScheduleStatistics,
    TimeSlot,
    UnscheduledEvent,
    UnscheduledReason,
)
from .runner import ScheduleRunner
from .soft import SoftScorer

__all__ = [
    # Allocation
    "Allocator",
    "PlacementAction",
    "PlacementDecision",
    "CandidateGenerator",
    "OccupancyTracker",
    "SoftScorer",
    "compute_difficulty",
    "sort_by_difficulty",
    # Expansion and runs
    "EventExpander",
    "ExpansionResult",
    "ScheduleRunner",
    # Configuration
    "ConfigLoader",
    "ConstraintsConfig",
    # Models
    "BlockedTime",
    "BlockScope",
    "Candidate",
    "Day",
    "Event",
    "Lock",
    "Room",
    "RoomType",
    "RunStatus",
    "ScheduledEvent",
    "ScheduleResult",
    "ScheduleRun",
    "ScheduleStatistics",
    "TimeSlot",
    "UnscheduledEvent",
    "UnscheduledReason",
]
