"""Data models for course offerings and the canonical course catalog."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Self

from .constants import AUTO_ALIAS_CONFIDENCE, MANUAL_ALIAS_CONFIDENCE
from .normalization import normalize_code, normalize_title


class OfferingType(str, Enum):
    """Type of course offering."""

    LECTURE = "lecture"
    LAB = "lab"
    TUTORIAL = "tutorial"


class MatchStatus(str, Enum):
    """Matching state of a course offering."""

    UNRESOLVED = "unresolved"
    AUTO_MATCHED = "auto_matched"
    NEEDS_REVIEW = "needs_review"
    MANUAL_MATCHED = "manual_matched"
    REJECTED = "rejected"


class MatchMethod(str, Enum):
    """Rule that produced a match."""

    EXACT_CODE = "exact_code"
    EXACT_TITLE = "exact_title"
    SIMILARITY = "similarity"
    MANUAL_REVIEW = "manual_review"


class AliasSource(str, Enum):
    """How a course alias was learned."""

    AUTO = "auto"
    MANUAL_CONFIRM = "manual_confirm"

    @property
    def confidence(self) -> float:
        if self == AliasSource.MANUAL_CONFIRM:
            return MANUAL_ALIAS_CONFIDENCE
        return AUTO_ALIAS_CONFIDENCE


@dataclass
class CourseOffering:
    """A course listing as imported for one session.

    Attributes:
        id: Unique identifier
        session_id: Session the offering was imported into
        course_code: Code as written in the source file (e.g. "CSC 101")
        original_title: Title as written in the source file
        level: Numeric study level (100, 200, ...)
        credit_units: Credit units, drives event expansion
        type: lecture/lab/tutorial
        department: Owning department (may be empty)
        match_status: Current matching state
        canonical_course_id: Linked canonical course, if matched
        match_method: Rule that produced the link
        match_score: Score of the link (1.0 for exact rules)
        matched_by: User that ran matching or approved the link
        matched_at: ISO timestamp of the last link change
    """

    id: str
    session_id: str
    course_code: str
    original_title: str
    level: int
    credit_units: int
    type: OfferingType = OfferingType.LECTURE
    department: str = ""
    match_status: MatchStatus = MatchStatus.UNRESOLVED
    canonical_course_id: str | None = None
    match_method: MatchMethod | None = None
    match_score: float | None = None
    matched_by: str | None = None
    matched_at: str | None = None

    @property
    def normalized_code(self) -> str:
        return normalize_code(self.course_code)

    @property
    def normalized_title(self) -> str:
        return normalize_title(self.original_title)

    @property
    def is_matched(self) -> bool:
        """True if the offering is linked and may be expanded into events."""
        return self.match_status in (MatchStatus.AUTO_MATCHED, MatchStatus.MANUAL_MATCHED)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create a CourseOffering from a dictionary (JSON or CSV row)."""
        method = data.get("match_method") or None
        score = data.get("match_score")
        return cls(
            id=str(data["id"]),
            session_id=str(data.get("session_id", "")),
            course_code=str(data.get("course_code", "")),
            original_title=str(data.get("original_title") or data.get("title", "")),
            level=int(data.get("level", 0)),
            credit_units=int(data.get("credit_units", 0)),
            type=OfferingType(str(data.get("type", "lecture")).strip().lower()),
            department=str(data.get("department") or ""),
            match_status=MatchStatus(data.get("match_status") or "unresolved"),
            canonical_course_id=data.get("canonical_course_id") or None,
            match_method=MatchMethod(method) if method else None,
            match_score=float(score) if score not in (None, "") else None,
            matched_by=data.get("matched_by") or None,
            matched_at=data.get("matched_at") or None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "session_id": self.session_id,
            "course_code": self.course_code,
            "normalized_code": self.normalized_code,
            "original_title": self.original_title,
            "level": self.level,
            "credit_units": self.credit_units,
            "type": self.type.value,
            "department": self.department,
            "match_status": self.match_status.value,
            "canonical_course_id": self.canonical_course_id,
            "match_method": self.match_method.value if self.match_method else None,
            "match_score": self.match_score,
            "matched_by": self.matched_by,
            "matched_at": self.matched_at,
        }


@dataclass
class CanonicalCourse:
    """The deduplicated identity of a course."""

    id: str
    title: str
    department: str = ""
    normalized_title: str = ""

    def __post_init__(self) -> None:
        if not self.normalized_title:
            self.normalized_title = normalize_title(self.title)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            id=str(data["id"]),
            title=str(data.get("title", "")),
            department=str(data.get("department") or ""),
            normalized_title=str(data.get("normalized_title") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "normalized_title": self.normalized_title,
            "department": self.department,
        }


@dataclass
class CourseAlias:
    """A learned mapping from a normalized code/title to a canonical course."""

    canonical_course_id: str
    course_code: str
    normalized_code: str
    original_title: str
    normalized_title: str
    source: AliasSource = AliasSource.AUTO
    confidence: float = AUTO_ALIAS_CONFIDENCE

    @classmethod
    def from_offering(
        cls, offering: CourseOffering, canonical_course_id: str, source: AliasSource
    ) -> Self:
        """Build the alias recorded when an offering is linked."""
        return cls(
            canonical_course_id=canonical_course_id,
            course_code=offering.course_code,
            normalized_code=offering.normalized_code,
            original_title=offering.original_title,
            normalized_title=offering.normalized_title,
            source=source,
            confidence=source.confidence,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        source = AliasSource(data.get("source", "auto"))
        course_code = str(data.get("course_code", ""))
        original_title = str(data.get("original_title", ""))
        return cls(
            canonical_course_id=str(data["canonical_course_id"]),
            course_code=course_code,
            normalized_code=data.get("normalized_code") or normalize_code(course_code),
            original_title=original_title,
            normalized_title=data.get("normalized_title") or normalize_title(original_title),
            source=source,
            confidence=float(data.get("confidence", source.confidence)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "canonical_course_id": self.canonical_course_id,
            "course_code": self.course_code,
            "normalized_code": self.normalized_code,
            "original_title": self.original_title,
            "normalized_title": self.normalized_title,
            "source": self.source.value,
            "confidence": self.confidence,
        }


@dataclass
class MatchingSuggestion:
    """A candidate canonical course shown to a reviewer."""

    offering_id: str
    canonical_course_id: str
    score: float
    token_overlap: str
    method: MatchMethod = MatchMethod.SIMILARITY

    def to_dict(self) -> dict[str, Any]:
        return {
            "offering_id": self.offering_id,
            "canonical_course_id": self.canonical_course_id,
            "score": self.score,
            "token_overlap": self.token_overlap,
            "method": self.method.value,
        }


@dataclass
class LecturerAssignment:
    """A lecturer's share of an offering's teaching."""

    offering_id: str
    lecturer_id: str
    share: float = 1.0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            offering_id=str(data["offering_id"]),
            lecturer_id=str(data["lecturer_id"]),
            share=float(data.get("share", 1.0)),
        )


@dataclass
class MatchResult:
    """Outcome of matching a single offering."""

    status: MatchStatus
    canonical_id: str | None = None
    method: MatchMethod | None = None
    score: float | None = None
    suggestions: list[MatchingSuggestion] = field(default_factory=list)


@dataclass
class MatchSummary:
    """Counts per outcome for a batch matching run."""

    auto_matched: int = 0
    needs_review: int = 0
    unresolved: int = 0

    @property
    def total(self) -> int:
        return self.auto_matched + self.needs_review + self.unresolved

    def record(self, status: MatchStatus) -> None:
        if status == MatchStatus.AUTO_MATCHED:
            self.auto_matched += 1
        elif status == MatchStatus.NEEDS_REVIEW:
            self.needs_review += 1
        else:
            self.unresolved += 1

    def to_dict(self) -> dict[str, int]:
        return {
            "auto_matched": self.auto_matched,
            "needs_review": self.needs_review,
            "unresolved": self.unresolved,
        }
