"""Rule cascade linking course offerings to canonical courses."""

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from ..constants import AUTO_MATCH_THRESHOLD, MAX_SUGGESTIONS, REVIEW_THRESHOLD
from ..exceptions import NotFoundError
from ..models import (
    AliasSource,
    CanonicalCourse,
    CourseAlias,
    CourseOffering,
    MatchingSuggestion,
    MatchMethod,
    MatchResult,
    MatchStatus,
    MatchSummary,
)
from ..normalization import expand_abbreviations
from .scorer import compute_similarity, get_token_overlap

if TYPE_CHECKING:
    from ..storage import CatalogStore

logger = logging.getLogger(__name__)


class Matcher:
    """Links offerings to canonical courses.

    Rules are evaluated in order and the first one that applies wins:

    1. Exact code: the normalized code has an alias, or another offering of
       the session with the same normalized code is already linked.
    2. Exact title: the normalized title equals a canonical course's
       normalized title, or an alias's.
    3. Best similarity >= 0.92: auto-matched.
    4. Best similarity in [0.80, 0.92): queued for review with the top five
       suggestions.
    5. Otherwise: left unresolved.
    """

    def __init__(self, catalog: "CatalogStore", expand_abbreviations: bool = True) -> None:
        """Initialize the matcher.

        Args:
            catalog: Store holding offerings, canonical courses and aliases
            expand_abbreviations: Expand INTRO, MGT, ... before similarity scoring
        """
        self.catalog = catalog
        self.expand_abbreviations = expand_abbreviations

    def match_by_code(self, offering: CourseOffering) -> str | None:
        """Rule 1: exact normalized code."""
        normalized_code = offering.normalized_code
        if not normalized_code:
            return None

        canonical_id = self.catalog.find_alias_by_code(normalized_code)
        if canonical_id:
            return canonical_id

        for other in self.catalog.list_offerings(offering.session_id):
            if other.id == offering.id or not other.canonical_course_id:
                continue
            if other.normalized_code == normalized_code:
                return other.canonical_course_id

        return None

    def match_by_title(self, offering: CourseOffering) -> str | None:
        """Rule 2: exact normalized title."""
        normalized_title = offering.normalized_title
        if not normalized_title:
            return None

        canonical = self.catalog.find_canonical_by_title(normalized_title)
        if canonical:
            return canonical.id

        return self.catalog.find_alias_by_title(normalized_title)

    def rank_canonical_courses(self, offering: CourseOffering) -> list[MatchingSuggestion]:
        """Score the offering against every canonical course.

        Returns:
            Suggestions sorted by descending score; equal scores keep catalog order
        """
        offering_title = self._comparable(offering.normalized_title)
        suggestions = []
        for canonical in self.catalog.list_canonical_courses():
            canonical_title = self._comparable(canonical.normalized_title)
            suggestions.append(
                MatchingSuggestion(
                    offering_id=offering.id,
                    canonical_course_id=canonical.id,
                    score=compute_similarity(
                        offering_title,
                        canonical_title,
                        _same_department(offering, canonical),
                    ),
                    token_overlap=get_token_overlap(offering_title, canonical_title),
                    method=MatchMethod.SIMILARITY,
                )
            )
        return sorted(suggestions, key=lambda s: -s.score)

    def match_offering(self, offering: CourseOffering) -> MatchResult:
        """Apply the rule cascade to one offering without persisting anything."""
        code_match = self.match_by_code(offering)
        if code_match:
            return MatchResult(
                status=MatchStatus.AUTO_MATCHED,
                canonical_id=code_match,
                method=MatchMethod.EXACT_CODE,
                score=1.0,
            )

        title_match = self.match_by_title(offering)
        if title_match:
            return MatchResult(
                status=MatchStatus.AUTO_MATCHED,
                canonical_id=title_match,
                method=MatchMethod.EXACT_TITLE,
                score=1.0,
            )

        ranked = self.rank_canonical_courses(offering)
        if not ranked:
            return MatchResult(status=MatchStatus.UNRESOLVED)

        best = ranked[0]
        if best.score >= AUTO_MATCH_THRESHOLD:
            return MatchResult(
                status=MatchStatus.AUTO_MATCHED,
                canonical_id=best.canonical_course_id,
                method=MatchMethod.SIMILARITY,
                score=best.score,
            )

        if best.score >= REVIEW_THRESHOLD:
            return MatchResult(
                status=MatchStatus.NEEDS_REVIEW,
                method=MatchMethod.SIMILARITY,
                score=best.score,
                suggestions=ranked[:MAX_SUGGESTIONS],
            )

        return MatchResult(status=MatchStatus.UNRESOLVED)

    def apply_result(
        self, offering: CourseOffering, result: MatchResult, user_id: str | None = None
    ) -> CourseOffering:
        """Persist a match result for one offering.

        Updates the offering, learns an alias for auto matches and replaces the
        review suggestions for offerings sent to review.
        """
        offering.match_status = result.status
        offering.canonical_course_id = result.canonical_id
        offering.match_method = result.method
        offering.match_score = result.score

        if result.status in (MatchStatus.AUTO_MATCHED, MatchStatus.NEEDS_REVIEW):
            offering.matched_by = user_id
            offering.matched_at = datetime.now().isoformat()

        self.catalog.update_offering(offering)

        if result.status == MatchStatus.AUTO_MATCHED and result.canonical_id:
            self.catalog.upsert_alias(
                CourseAlias.from_offering(offering, result.canonical_id, AliasSource.AUTO)
            )
        elif result.status == MatchStatus.NEEDS_REVIEW:
            self.catalog.replace_suggestions(offering.id, result.suggestions)

        return offering

    def run_matching(self, session_id: str, user_id: str | None = None) -> MatchSummary:
        """Match every unresolved offering of a session.

        Each offering is committed on its own, so an error part-way through
        leaves earlier offerings updated.

        Returns:
            Counts per outcome
        """
        summary = MatchSummary()
        offerings = self.catalog.list_offerings(session_id, MatchStatus.UNRESOLVED)
        logger.info(f"Matching {len(offerings)} unresolved offerings in session {session_id}")

        for offering in offerings:
            result = self.match_offering(offering)
            self.apply_result(offering, result, user_id)
            summary.record(result.status)
            logger.debug(
                f"{offering.course_code} '{offering.original_title}' -> "
                f"{result.status.value} ({result.method.value if result.method else '-'}, "
                f"score={result.score})"
            )

        logger.info(
            f"Matching completed: {summary.auto_matched} auto-matched, "
            f"{summary.needs_review} need review, {summary.unresolved} unresolved"
        )
        return summary

    def approve(
        self,
        offering_id: str,
        canonical_course_id: str,
        user_id: str | None = None,
        method: MatchMethod | None = None,
        score: float | None = None,
    ) -> CourseOffering:
        """Confirm a link chosen by a reviewer.

        Raises:
            NotFoundError: If the offering or canonical course does not exist
        """
        offering = self._get_offering(offering_id)
        if self.catalog.get_canonical(canonical_course_id) is None:
            raise NotFoundError("Canonical course", canonical_course_id)

        offering.match_status = MatchStatus.MANUAL_MATCHED
        offering.canonical_course_id = canonical_course_id
        offering.match_method = method or MatchMethod.MANUAL_REVIEW
        offering.match_score = score
        offering.matched_by = user_id
        offering.matched_at = datetime.now().isoformat()
        self.catalog.update_offering(offering)

        self.catalog.upsert_alias(
            CourseAlias.from_offering(offering, canonical_course_id, AliasSource.MANUAL_CONFIRM)
        )
        self.catalog.delete_suggestions(offering_id)
        logger.info(f"Offering {offering_id} manually linked to {canonical_course_id}")
        return offering

    def reject(self, offering_id: str, user_id: str | None = None) -> CourseOffering:
        """Mark an offering as having no canonical counterpart.

        Raises:
            NotFoundError: If the offering does not exist
        """
        offering = self._get_offering(offering_id)
        offering.match_status = MatchStatus.REJECTED
        offering.canonical_course_id = None
        offering.match_method = None
        offering.match_score = None
        offering.matched_by = user_id
        offering.matched_at = datetime.now().isoformat()
        self.catalog.update_offering(offering)
        self.catalog.delete_suggestions(offering_id)
        return offering

    def list_review_items(
        self, session_id: str
    ) -> list[tuple[CourseOffering, list[MatchingSuggestion]]]:
        """Offerings waiting for review, each with its stored suggestions."""
        return [
            (offering, self.catalog.list_suggestions(offering.id))
            for offering in self.catalog.list_offerings(session_id, MatchStatus.NEEDS_REVIEW)
        ]

    def _get_offering(self, offering_id: str) -> CourseOffering:
        offering = self.catalog.get_offering(offering_id)
        if offering is None:
            raise NotFoundError("Course offering", offering_id)
        return offering

    def _comparable(self, normalized_title: str) -> str:
        if self.expand_abbreviations:
            return expand_abbreviations(normalized_title)
        return normalized_title


def _same_department(offering: CourseOffering, canonical: CanonicalCourse) -> bool:
    return bool(offering.department) and offering.department == canonical.department
