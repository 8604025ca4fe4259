"""Reference directory loader."""

import csv
import json
import logging
from pathlib import Path
from typing import Any

from ...exceptions import ConfigError
from ...models import CanonicalCourse, CourseAlias, CourseOffering, LecturerAssignment
from ...storage import InMemoryStore
from ..models import BlockedTime, Event, Lock, Room, TimeSlot
from .constraints import ConstraintsConfig

logger = logging.getLogger(__name__)

DEFAULT_SESSION_ID = "default"


class ConfigLoader:
    """Unified loader for a session's reference files."""

    REQUIRED_FILES = ["timeslots.csv", "rooms.csv", "offerings.csv", "canonical-courses.csv"]

    def __init__(self, config_dir: Path | None = None, session_id: str = DEFAULT_SESSION_ID):
        """
        Initialize configuration loader.

        Args:
            config_dir: Path to directory containing reference files.
                       Expected files:
                       - timeslots.csv
                       - rooms.csv
                       - offerings.csv
                       - canonical-courses.csv
                       - aliases.json (optional)
                       - lecturer-assignments.csv (optional)
                       - blocked-times.json (optional)
                       - locks.json (optional)
                       - constraints.json (optional)
                       - events.json (optional)
            session_id: Session the loaded records belong to
        """
        if config_dir is None:
            config_dir = Path("reference")

        self.config_dir = Path(config_dir)
        self.session_id = session_id

    def _get_path(self, filename: str) -> Path | None:
        """Get path to config file if it exists."""
        path = self.config_dir / filename
        return path if path.exists() else None

    def missing_files(self) -> list[str]:
        """Required files absent from the directory."""
        return [name for name in self.REQUIRED_FILES if self._get_path(name) is None]

    def read_csv(self, filename: str) -> list[dict[str, str]]:
        """Rows of a CSV file with stripped keys and values ([] if absent)."""
        path = self._get_path(filename)
        if path is None:
            return []
        with open(path, encoding="utf-8") as f:
            return [
                {k.strip(): (v or "").strip() for k, v in row.items() if k}
                for row in csv.DictReader(f)
            ]

    def _read_json(self, filename: str) -> Any:
        path = self._get_path(filename)
        if path is None:
            return None
        with open(path, encoding="utf-8") as f:
            try:
                return json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigError(f"not valid JSON ({e})", filename) from e

    def _build(self, filename: str, rows: list[dict[str, Any]], factory) -> list:
        """Convert rows with a from_dict factory, reporting the failing row."""
        records = []
        for index, row in enumerate(rows):
            try:
                records.append(factory(row))
            except (KeyError, ValueError, TypeError) as e:
                raise ConfigError(f"row {index + 1}: {e!r}", filename) from e
        return records

    def load_timeslots(self) -> list[TimeSlot]:
        return self._build("timeslots.csv", self.read_csv("timeslots.csv"), TimeSlot.from_dict)

    def load_rooms(self) -> list[Room]:
        return self._build("rooms.csv", self.read_csv("rooms.csv"), Room.from_dict)

    def load_offerings(self) -> list[CourseOffering]:
        rows = [
            {**row, "session_id": row.get("session_id") or self.session_id}
            for row in self.read_csv("offerings.csv")
        ]
        return self._build("offerings.csv", rows, CourseOffering.from_dict)

    def load_canonical_courses(self) -> list[CanonicalCourse]:
        return self._build(
            "canonical-courses.csv",
            self.read_csv("canonical-courses.csv"),
            CanonicalCourse.from_dict,
        )

    def load_aliases(self) -> list[CourseAlias]:
        return self._build(
            "aliases.json", self._read_json("aliases.json") or [], CourseAlias.from_dict
        )

    def load_assignments(self) -> list[LecturerAssignment]:
        return self._build(
            "lecturer-assignments.csv",
            self.read_csv("lecturer-assignments.csv"),
            LecturerAssignment.from_dict,
        )

    def load_blocked_times(self) -> list[BlockedTime]:
        return self._build(
            "blocked-times.json",
            self._read_json("blocked-times.json") or [],
            BlockedTime.from_dict,
        )

    def load_locks(self) -> list[Lock]:
        return self._build("locks.json", self._read_json("locks.json") or [], Lock.from_dict)

    def load_events(self) -> list[Event] | None:
        """Previously expanded events, or None if events.json is absent."""
        data = self._read_json("events.json")
        if data is None:
            return None
        rows = [{**row, "session_id": row.get("session_id") or self.session_id} for row in data]
        return self._build("events.json", rows, Event.from_dict)

    def load_constraints(self) -> ConstraintsConfig | None:
        """Constraints from constraints.json, or None if the file is absent."""
        data = self._read_json("constraints.json")
        if data is None:
            return None
        if not isinstance(data, dict):
            raise ConfigError("expected a JSON object", "constraints.json")
        try:
            return ConstraintsConfig.from_dict(data, source="constraints.json")
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            raise ConfigError(repr(e), "constraints.json") from e

    def load_store(self) -> InMemoryStore:
        """Load every reference file into an in-memory store.

        Raises:
            ConfigError: If a required file is missing or a row is invalid
        """
        missing = self.missing_files()
        if missing:
            raise ConfigError(
                f"missing required files: {', '.join(missing)}", str(self.config_dir)
            )

        store = InMemoryStore()
        store.set_timeslots(self.session_id, self.load_timeslots())
        store.set_rooms(self.session_id, self.load_rooms())
        store.add_offerings(self.load_offerings())
        store.add_canonical_courses(self.load_canonical_courses())
        store.add_aliases(self.load_aliases())
        store.add_assignments(self.load_assignments())
        store.set_blocked_times(self.session_id, self.load_blocked_times())
        store.set_locks(self.session_id, self.load_locks())

        events = self.load_events()
        if events is not None:
            store.replace_events(self.session_id, events)

        constraints = self.load_constraints()
        if constraints is not None:
            store.save_constraints(self.session_id, constraints)

        logger.info(
            f"Loaded {len(store.offerings)} offerings, {len(store.canonical_courses)} canonical "
            f"courses, {len(store.list_rooms(self.session_id))} rooms from {self.config_dir}"
        )
        return store
