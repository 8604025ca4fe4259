"""Per-session constraints configuration."""

import copy
from dataclasses import dataclass, field
from typing import Any, Self

from ...exceptions import ConfigError
from ..constants import (
    DEFAULT_ALLOWED_DAYS,
    DEFAULT_CONSECUTIVE_PAIRS,
    DEFAULT_LIMITS,
    DEFAULT_UNIT_MAPPING,
    SOFT_CONSTRAINT_WEIGHTS,
    UNIT_MAPPING_DEFAULT_KEY,
    VALID_DURATIONS,
)
from ..models import Day, day_name_to_enum


@dataclass
class UnitSegment:
    """One event produced by the unit mapping."""

    duration_slots: int
    preferred_pair: tuple[str, str] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"duration_slots": self.duration_slots}
        if self.preferred_pair:
            data["preferred_pair"] = list(self.preferred_pair)
        return data


@dataclass
class SchedulingLimits:
    """Default caps used by the allocator and soft scorer."""

    max_sessions_per_lecturer_per_day: int = DEFAULT_LIMITS["max_sessions_per_lecturer_per_day"]
    max_consecutive_sessions_per_lecturer: int = DEFAULT_LIMITS[
        "max_consecutive_sessions_per_lecturer"
    ]
    candidate_limit_per_event: int = DEFAULT_LIMITS["candidate_limit_per_event"]

    def to_dict(self) -> dict[str, int]:
        return {
            "max_sessions_per_lecturer_per_day": self.max_sessions_per_lecturer_per_day,
            "max_consecutive_sessions_per_lecturer": self.max_consecutive_sessions_per_lecturer,
            "candidate_limit_per_event": self.candidate_limit_per_event,
        }


@dataclass
class SoftWeights:
    """Penalty weights for soft constraints.

    level_gaps and room_preference are carried for compatibility with stored
    configurations; the soft scorer does not use them yet.
    """

    spread_course_sessions: float = SOFT_CONSTRAINT_WEIGHTS["spread_course_sessions"]
    avoid_early: float = SOFT_CONSTRAINT_WEIGHTS["avoid_early"]
    avoid_late: float = SOFT_CONSTRAINT_WEIGHTS["avoid_late"]
    lecturer_overload: float = SOFT_CONSTRAINT_WEIGHTS["lecturer_overload"]
    level_gaps: float = SOFT_CONSTRAINT_WEIGHTS["level_gaps"]
    room_preference: float = SOFT_CONSTRAINT_WEIGHTS["room_preference"]

    def to_dict(self) -> dict[str, float]:
        return {
            "spread_course_sessions": self.spread_course_sessions,
            "avoid_early": self.avoid_early,
            "avoid_late": self.avoid_late,
            "lecturer_overload": self.lecturer_overload,
            "level_gaps": self.level_gaps,
            "room_preference": self.room_preference,
        }


@dataclass
class ConstraintsConfig:
    """Scheduling configuration for one session.

    Attributes:
        allowed_days: Days events may be placed on, in search order
        consecutive_pairs: Slot references allowed for 2-slot events
        unit_mapping: type -> credit units (or "default") -> event segments
        limits: Default caps
        soft_weights: Soft penalty weights
    """

    allowed_days: list[Day] = field(default_factory=list)
    consecutive_pairs: list[tuple[str, str]] = field(default_factory=list)
    unit_mapping: dict[str, dict[str, list[UnitSegment]]] = field(default_factory=dict)
    limits: SchedulingLimits = field(default_factory=SchedulingLimits)
    soft_weights: SoftWeights = field(default_factory=SoftWeights)

    @classmethod
    def default(cls) -> Self:
        """Configuration substituted when a session has none."""
        return cls.from_dict(
            {
                "allowed_days": DEFAULT_ALLOWED_DAYS,
                "consecutive_pairs": DEFAULT_CONSECUTIVE_PAIRS,
                "unit_mapping": copy.deepcopy(DEFAULT_UNIT_MAPPING),
                "defaults": dict(DEFAULT_LIMITS),
                "soft_weights": dict(SOFT_CONSTRAINT_WEIGHTS),
            }
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: str | None = None) -> Self:
        """Build and validate a configuration from its stored form.

        Missing sections fall back to the defaults section by section.

        Raises:
            ConfigError: If a day, duration or cap is invalid
        """
        days = [_parse_day(d, source) for d in data.get("allowed_days", DEFAULT_ALLOWED_DAYS)]
        if not days:
            raise ConfigError("allowed_days must not be empty", source)

        pairs = []
        for pair in data.get("consecutive_pairs", DEFAULT_CONSECUTIVE_PAIRS):
            if len(pair) != 2:
                raise ConfigError(f"consecutive pair must have two slots: {pair!r}", source)
            pairs.append((str(pair[0]), str(pair[1])))

        raw_mapping = data.get("unit_mapping")
        if raw_mapping is None:
            raw_mapping = DEFAULT_UNIT_MAPPING
        unit_mapping: dict[str, dict[str, list[UnitSegment]]] = {}
        for offering_type, entries in raw_mapping.items():
            unit_mapping[str(offering_type)] = {
                str(key): [_parse_segment(seg, source) for seg in segments]
                for key, segments in entries.items()
            }

        limits_data = {**DEFAULT_LIMITS, **data.get("defaults", {})}
        limits = SchedulingLimits(
            **{k: int(v) for k, v in limits_data.items() if k in DEFAULT_LIMITS}
        )
        for name, value in limits.to_dict().items():
            if value < 1:
                raise ConfigError(f"{name} must be a positive integer, got {value}", source)

        weights_data = {**SOFT_CONSTRAINT_WEIGHTS, **data.get("soft_weights", {})}
        weights = SoftWeights(
            **{k: float(v) for k, v in weights_data.items() if k in SOFT_CONSTRAINT_WEIGHTS}
        )

        return cls(
            allowed_days=days,
            consecutive_pairs=pairs,
            unit_mapping=unit_mapping,
            limits=limits,
            soft_weights=weights,
        )

    def segments_for(self, offering_type: str, credit_units: int) -> list[UnitSegment] | None:
        """Look up the unit mapping entry for an offering.

        Returns:
            The (type, credit units) entry, else the type's "default" entry,
            else None
        """
        entries = self.unit_mapping.get(offering_type, {})
        segments = entries.get(str(credit_units))
        if not segments:
            segments = entries.get(UNIT_MAPPING_DEFAULT_KEY)
        return segments or None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the stored form."""
        return {
            "allowed_days": [d.value for d in self.allowed_days],
            "consecutive_pairs": [list(p) for p in self.consecutive_pairs],
            "unit_mapping": {
                offering_type: {
                    key: [seg.to_dict() for seg in segments]
                    for key, segments in entries.items()
                }
                for offering_type, entries in self.unit_mapping.items()
            },
            "defaults": self.limits.to_dict(),
            "soft_weights": self.soft_weights.to_dict(),
        }


def _parse_day(value: Any, source: str | None) -> Day:
    day = day_name_to_enum(value)
    if day is None:
        raise ConfigError(f"unknown day '{value}'", source)
    return day


def _parse_segment(data: dict[str, Any], source: str | None) -> UnitSegment:
    duration = int(data.get("duration_slots", 1))
    if duration not in VALID_DURATIONS:
        raise ConfigError(
            f"duration_slots must be one of {VALID_DURATIONS}, got {duration}", source
        )
    pair = data.get("preferred_pair")
    return UnitSegment(
        duration_slots=duration,
        preferred_pair=(str(pair[0]), str(pair[1])) if pair else None,
    )
