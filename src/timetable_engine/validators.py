"""Validation of imported reference rows."""

from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from .constants import VALID_OFFERING_TYPES
from .scheduler.models import RoomType

OFFERING_REQUIRED_FIELDS = ["course_code", "title", "level", "credit_units", "type"]
TIMESLOT_REQUIRED_FIELDS = ["id", "label", "start_time", "end_time", "sort_order"]
ROOM_REQUIRED_FIELDS = ["id", "name", "room_type"]


@dataclass
class ValidationIssue:
    """A problem with one field of one imported row.

    Attributes:
        row: Spreadsheet row number (the header is row 1)
        field: Offending column
        message: Human-readable description
    """

    row: int
    field: str
    message: str

    def __str__(self) -> str:
        return f"Row {self.row}, {self.field}: {self.message}"


@dataclass
class ValidationResult:
    """Issues found in a file."""

    errors: list[ValidationIssue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if not isinstance(value, str) and pd.isna(value):
        return True
    return str(value).strip() == ""


def validate_required(row: dict[str, Any], field_name: str) -> tuple[bool, str | None]:
    """Validate that a required field is present.

    Args:
        row: Imported row
        field_name: Column to check

    Returns:
        Tuple of (is_valid, error_message)
    """
    if _is_blank(row.get(field_name)):
        return False, f"Missing required field: {field_name}"
    return True, None


def validate_positive_int(value: Any, label: str) -> tuple[bool, str | None]:
    """Validate a value that must parse as an integer >= 1.

    Args:
        value: Raw value
        label: Name used in the error message

    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        number = int(float(str(value).strip()))
    except (ValueError, TypeError):
        return False, f"{label} must be a positive integer"

    if number < 1:
        return False, f"{label} must be a positive integer"

    return True, None


def validate_offering_type(value: Any) -> tuple[bool, str | None]:
    """Validate an offering type (lecture, lab or tutorial)."""
    if str(value).strip().lower() not in VALID_OFFERING_TYPES:
        return False, f"Type must be one of: {', '.join(sorted(VALID_OFFERING_TYPES))}"
    return True, None


def validate_room_type(value: Any) -> tuple[bool, str | None]:
    """Validate a room type (lecture_room or lab)."""
    valid = [t.value for t in RoomType]
    if str(value).strip().lower() not in valid:
        return False, f"Room type must be one of: {', '.join(valid)}"
    return True, None


def _collect(
    row_number: int,
    checks: list[tuple[str, tuple[bool, str | None]]],
) -> list[ValidationIssue]:
    return [
        ValidationIssue(row=row_number, field=name, message=message)
        for name, (is_valid, message) in checks
        if not is_valid and message
    ]


def validate_offering_row(row: dict[str, Any], row_number: int) -> list[ValidationIssue]:
    """Validate one course offering row.

    Args:
        row: Imported row
        row_number: Spreadsheet row number

    Returns:
        Issues found (empty if the row is valid)
    """
    # original_title is accepted in place of title
    if _is_blank(row.get("title")) and not _is_blank(row.get("original_title")):
        row = {**row, "title": row["original_title"]}

    checks = [(name, validate_required(row, name)) for name in OFFERING_REQUIRED_FIELDS]

    if not _is_blank(row.get("level")):
        checks.append(("level", validate_positive_int(row["level"], "Level")))
    if not _is_blank(row.get("credit_units")):
        checks.append(
            ("credit_units", validate_positive_int(row["credit_units"], "Credit units"))
        )
    if not _is_blank(row.get("type")):
        checks.append(("type", validate_offering_type(row["type"])))

    return _collect(row_number, checks)


def validate_offering_rows(rows: list[dict[str, Any]]) -> ValidationResult:
    """Validate an offerings import; row numbers account for the header row."""
    return validate_rows(rows, validate_offering_row)


def validate_timeslot_row(row: dict[str, Any], row_number: int) -> list[ValidationIssue]:
    """Validate one time slot row."""
    checks = [(name, validate_required(row, name)) for name in TIMESLOT_REQUIRED_FIELDS]
    if not _is_blank(row.get("sort_order")):
        checks.append(("sort_order", validate_positive_int(row["sort_order"], "Sort order")))
    return _collect(row_number, checks)


def validate_room_row(row: dict[str, Any], row_number: int) -> list[ValidationIssue]:
    """Validate one room row."""
    checks = [(name, validate_required(row, name)) for name in ROOM_REQUIRED_FIELDS]
    if not _is_blank(row.get("room_type")):
        checks.append(("room_type", validate_room_type(row["room_type"])))
    if not _is_blank(row.get("capacity")):
        checks.append(("capacity", validate_positive_int(row["capacity"], "Capacity")))
    return _collect(row_number, checks)


def validate_rows(rows: list[dict[str, Any]], validator) -> ValidationResult:
    """Apply a row validator to every row of a file."""
    result = ValidationResult()
    for index, row in enumerate(rows):
        result.errors.extend(validator(row, index + 2))
    return result
