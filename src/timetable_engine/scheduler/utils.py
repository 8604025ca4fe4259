"""Utility functions for schedule generation."""

from .constants import SLOT_REFERENCE_PREFIX
from .models import Day, TimeSlot


def sort_timeslots(timeslots: list[TimeSlot]) -> list[TimeSlot]:
    """Return time slots ordered by sort_order (stable for equal values)."""
    return sorted(timeslots, key=lambda ts: ts.sort_order)


def resolve_slot_reference(reference: str, timeslots: list[TimeSlot]) -> TimeSlot | None:
    """Find the time slot a consecutive-pair reference points at.

    A reference matches a slot whose label equals it (case-insensitive), or,
    for references like "TS3", the slot whose sort_order is 3.

    Args:
        reference: Slot reference from the constraints config
        timeslots: Session time slots

    Returns:
        Matching TimeSlot, or None
    """
    ref = str(reference).strip()
    for slot in timeslots:
        if slot.label.strip().upper() == ref.upper():
            return slot

    if ref.upper().startswith(SLOT_REFERENCE_PREFIX):
        number = ref[len(SLOT_REFERENCE_PREFIX):]
        if number.isdigit():
            for slot in timeslots:
                if slot.sort_order == int(number):
                    return slot

    return None


def resolve_consecutive_pairs(
    pairs: list[tuple[str, str]], timeslots: list[TimeSlot]
) -> list[tuple[TimeSlot, TimeSlot]]:
    """Resolve configured pairs to concrete slots, dropping unresolvable ones."""
    resolved = []
    for first_ref, second_ref in pairs:
        first = resolve_slot_reference(first_ref, timeslots)
        second = resolve_slot_reference(second_ref, timeslots)
        if first is None or second is None:
            continue
        resolved.append((first, second))
    return resolved


def slot_key(day: Day, timeslot_id: str) -> str:
    """Occupancy key for one (day, slot)."""
    return f"{day.value}:{timeslot_id}"
