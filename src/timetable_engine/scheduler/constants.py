"""Constants for schedule generation."""

# Level used when an event's offering level is unknown
DEFAULT_LEVEL = 300

# Difficulty heuristic
DIFFICULTY_CANDIDATE_BASE = 100
DIFFICULTY_LAB_BONUS = 50
DIFFICULTY_DOUBLE_SLOT_BONUS = 30

# Valid event durations (in slots)
VALID_DURATIONS = (1, 2)

# Key used in the unit mapping for the per-type fallback entry
UNIT_MAPPING_DEFAULT_KEY = "default"

# Prefix used by slot references in consecutive pairs ("TS3" -> sort_order 3)
SLOT_REFERENCE_PREFIX = "TS"

# Default constraints, substituted (and persisted) when a session has none
DEFAULT_ALLOWED_DAYS = ["MON", "TUE", "WED", "THU", "FRI"]

DEFAULT_CONSECUTIVE_PAIRS = [
    ["TS3", "TS4"],
    ["TS4", "TS5"],
    ["TS5", "TS6"],
    ["TS6", "TS7"],
    ["TS7", "TS8"],
]

DEFAULT_UNIT_MAPPING = {
    "lecture": {
        "1": [{"duration_slots": 1}],
        "2": [{"duration_slots": 1}, {"duration_slots": 1}],
        "3": [{"duration_slots": 2}, {"duration_slots": 1}],
    },
    "lab": {
        "default": [{"duration_slots": 2, "preferred_pair": ["TS7", "TS8"]}],
    },
}

DEFAULT_LIMITS = {
    "max_sessions_per_lecturer_per_day": 3,
    "max_consecutive_sessions_per_lecturer": 2,
    "candidate_limit_per_event": 25,
}

SOFT_CONSTRAINT_WEIGHTS = {
    "spread_course_sessions": 3,
    "avoid_early": 2,
    "avoid_late": 2,
    "lecturer_overload": 10,
    "level_gaps": 2,
    "room_preference": 1,
}
