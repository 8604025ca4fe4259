"""Timetable Engine - course matching and timetable generation for universities.

This module reconciles free-text course offerings against a canonical course
catalog and allocates the resulting events to days, time slots and rooms
without lecturer, level or room clashes.

Example usage:
    from pathlib import Path

    from timetable_engine import (
        ConfigLoader,
        ConstraintsConfig,
        EventExpander,
        Matcher,
        ScheduleRunner,
    )

    loader = ConfigLoader(Path("reference"))
    store = loader.load_store()

    summary = Matcher(store).run_matching(loader.session_id)
    print(f"Auto-matched: {summary.auto_matched}, review: {summary.needs_review}")

    config = store.get_constraints(loader.session_id) or ConstraintsConfig.default()
    EventExpander(config).expand_session(loader.session_id, store)

    run = ScheduleRunner(store).generate(loader.session_id)
    print(f"{run.status.value}: {run.scheduled_count} scheduled")

    # Export to JSON
    from timetable_engine.exporters import JSONExporter
    JSONExporter().export(run.result, "schedule.json")
"""

from .exceptions import ConfigError, NotFoundError, TimetableError, UpstreamDataError
from .exporters import CSVExporter, ExcelExporter, JSONExporter, ScheduleLookup, get_exporter
from .matching import Matcher, compute_similarity
from .models import (
    CanonicalCourse,
    CourseAlias,
    CourseOffering,
    LecturerAssignment,
    MatchingSuggestion,
    MatchMethod,
    MatchStatus,
    MatchSummary,
    OfferingType,
)
from .normalization import normalize_code, normalize_title
from .scheduler import (
    Allocator,
    ConfigLoader,
    ConstraintsConfig,
    EventExpander,
    ScheduleResult,
    ScheduleRunner,
)
from .storage import CatalogStore, InMemoryStore, SessionStore

__version__ = "0.1.0"

__all__ = [
    # Matching
    "Matcher",
    "compute_similarity",
    "normalize_code",
    "normalize_title",
    # Scheduling
    "Allocator",
    "ConfigLoader",
    "ConstraintsConfig",
    "EventExpander",
    "ScheduleResult",
    "ScheduleRunner",
    # Models
    "CanonicalCourse",
    "CourseAlias",
    "CourseOffering",
    "LecturerAssignment",
    "MatchingSuggestion",
    "MatchMethod",
    "MatchStatus",
    "MatchSummary",
    "OfferingType",
    # Storage
    "CatalogStore",
    "InMemoryStore",
    "SessionStore",
    # Exporters
    "JSONExporter",
    "CSVExporter",
    "ExcelExporter",
    "ScheduleLookup",
    "get_exporter",
    # Exceptions
    "TimetableError",
    "ConfigError",
    "UpstreamDataError",
    "NotFoundError",
]
