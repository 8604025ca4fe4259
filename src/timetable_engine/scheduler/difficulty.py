"""Difficulty ordering of events before greedy placement."""

from collections import Counter

from .constants import (
    DIFFICULTY_CANDIDATE_BASE,
    DIFFICULTY_DOUBLE_SLOT_BONUS,
    DIFFICULTY_LAB_BONUS,
)
from .models import Event, RoomType


def compute_difficulty(event: Event, candidate_count: int, lecturer_event_count: int) -> int:
    """Heuristic priority: harder events are placed first.

    difficulty = max(0, 100 - candidates) + 50 for labs + 30 for 2-slot
    events + number of events taught by the same lecturer.
    """
    difficulty = max(0, DIFFICULTY_CANDIDATE_BASE - candidate_count)
    if event.room_type_required == RoomType.LAB:
        difficulty += DIFFICULTY_LAB_BONUS
    if event.duration_slots == 2:
        difficulty += DIFFICULTY_DOUBLE_SLOT_BONUS
    return difficulty + lecturer_event_count


def count_lecturer_events(events: list[Event]) -> Counter:
    """Number of events per lecturer id (events without a lecturer are skipped)."""
    return Counter(e.lecturer_id for e in events if e.lecturer_id)


def sort_by_difficulty(
    events: list[Event], candidate_counts: dict[str, int]
) -> list[tuple[Event, int]]:
    """Pair each event with its difficulty, hardest first.

    Equal difficulties keep input order.

    Args:
        events: Events to order
        candidate_counts: event id -> number of generated candidates

    Returns:
        (event, difficulty) tuples sorted descending
    """
    lecturer_counts = count_lecturer_events(events)
    scored = [
        (
            event,
            compute_difficulty(
                event,
                candidate_counts.get(event.id, 0),
                lecturer_counts[event.lecturer_id] if event.lecturer_id else 0,
            ),
        )
        for event in events
    ]
    return sorted(scored, key=lambda item: -item[1])
