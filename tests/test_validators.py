"""Tests for import row validation."""

import pandas as pd

from timetable_engine.validators import (
    ValidationIssue,
    validate_offering_row,
    validate_offering_rows,
    validate_offering_type,
    validate_positive_int,
    validate_required,
    validate_room_row,
    validate_room_type,
    validate_rows,
    validate_timeslot_row,
)

VALID_OFFERING = {
    "course_code": "CSC 101",
    "title": "Intro to Programming",
    "level": "100",
    "credit_units": "3",
    "type": "lecture",
}


class TestFieldValidators:
    def test_required_present(self):
        assert validate_required({"title": "Algebra"}, "title") == (True, None)

    def test_required_blank(self):
        for value in (None, "", "   ", float("nan"), pd.NA):
            is_valid, message = validate_required({"title": value}, "title")
            assert not is_valid
            assert message == "Missing required field: title"

    def test_positive_int(self):
        assert validate_positive_int("3", "Level")[0]
        assert validate_positive_int(3.0, "Level")[0]

    def test_positive_int_rejects(self):
        for value in ("abc", "0", "-1", None):
            is_valid, message = validate_positive_int(value, "Level")
            assert not is_valid
            assert message == "Level must be a positive integer"

    def test_offering_type(self):
        assert validate_offering_type("Lecture")[0]
        assert validate_offering_type(" lab ")[0]
        is_valid, message = validate_offering_type("seminar")
        assert not is_valid
        assert message == "Type must be one of: lab, lecture, tutorial"

    def test_room_type(self):
        assert validate_room_type("lab")[0]
        is_valid, message = validate_room_type("auditorium")
        assert not is_valid
        assert message == "Room type must be one of: lecture_room, lab"


class TestValidateOfferingRow:
    """Tests for offering rows."""

    def test_valid_row(self):
        assert validate_offering_row(VALID_OFFERING, 2) == []

    def test_original_title_accepted(self):
        row = {**VALID_OFFERING, "title": "", "original_title": "Intro to Programming"}
        assert validate_offering_row(row, 2) == []

    def test_missing_fields(self):
        issues = validate_offering_row({"course_code": "CSC 101"}, 5)

        assert {issue.field for issue in issues} == {"title", "level", "credit_units", "type"}
        assert all(issue.row == 5 for issue in issues)

    def test_invalid_values(self):
        row = {**VALID_OFFERING, "level": "zero", "credit_units": "0", "type": "seminar"}

        issues = validate_offering_row(row, 2)

        assert [issue.field for issue in issues] == ["level", "credit_units", "type"]

    def test_issue_str(self):
        issue = ValidationIssue(row=3, field="level", message="Level must be a positive integer")
        assert str(issue) == "Row 3, level: Level must be a positive integer"


class TestValidateRows:
    def test_row_numbers_skip_header(self):
        rows = [VALID_OFFERING, {**VALID_OFFERING, "type": "seminar"}]

        result = validate_offering_rows(rows)

        assert not result.valid
        assert len(result.errors) == 1
        assert result.errors[0].row == 3

    def test_all_valid(self):
        assert validate_offering_rows([VALID_OFFERING]).valid

    def test_timeslot_rows(self):
        rows = [
            {"id": "ts1", "label": "TS1", "start_time": "08:00", "end_time": "09:00",
             "sort_order": "1"},
            {"id": "ts2", "label": "TS2", "start_time": "09:00", "end_time": "",
             "sort_order": "x"},
        ]

        result = validate_rows(rows, validate_timeslot_row)

        assert [(e.row, e.field) for e in result.errors] == [(3, "end_time"), (3, "sort_order")]

    def test_room_rows(self):
        rows = [
            {"id": "R1", "name": "Room 101", "room_type": "lecture_room", "capacity": "80"},
            {"id": "R2", "name": "Room 102", "room_type": "hall", "capacity": ""},
        ]

        result = validate_rows(rows, validate_room_row)

        assert [(e.row, e.field) for e in result.errors] == [(3, "room_type")]
