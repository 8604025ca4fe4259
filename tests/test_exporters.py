"""Tests for schedule exporters."""

import csv
import json

import pandas as pd
import pytest

from timetable_engine.exporters import (
    CSVExporter,
    ExcelExporter,
    JSONExporter,
    ScheduleLookup,
    get_exporter,
)
from timetable_engine.scheduler.models import (
    Day,
    ScheduledEvent,
    ScheduleResult,
    ScheduleStatistics,
    UnscheduledEvent,
    UnscheduledReason,
)


@pytest.fixture
def result():
    return ScheduleResult(
        scheduled=[
            ScheduledEvent(
                event_id="O1:0",
                day=Day.MON,
                timeslot_id="ts1",
                room_id="R1",
                second_timeslot_id="ts2",
                locked=True,
            ),
            ScheduledEvent(
                event_id="O1:1", day=Day.TUE, timeslot_id="ts3", room_id="R2", penalty=3.0
            ),
        ],
        unscheduled=[
            UnscheduledEvent(
                event_id="O2:0",
                reason=UnscheduledReason.NO_SUITABLE_ROOM_TYPE,
                details=UnscheduledReason.NO_SUITABLE_ROOM_TYPE.message,
            )
        ],
        soft_score=3.0,
        seed=42,
        candidate_limit=25,
        statistics=ScheduleStatistics(total_events=3, locked_events=1),
    )


@pytest.fixture
def lookup(timeslots, rooms, make_event, make_offering):
    return ScheduleLookup(
        timeslots=timeslots,
        rooms=rooms,
        events=[
            make_event("O1:0", lecturer_id="L1", duration_slots=2),
            make_event("O1:1", lecturer_id="L1"),
            make_event("O2:0"),
        ],
        offerings=[
            make_offering("O1", "CSC 101", "Intro to Programming"),
            make_offering("O2", "CHM 201", "Organic Chemistry"),
        ],
    )


class TestScheduleLookup:
    def test_resolves_names(self, lookup):
        assert lookup.slot_label("ts1") == "TS1"
        assert lookup.room_name("R1") == "Room 101"
        assert lookup.offering_for("O1:1").course_code == "CSC 101"

    def test_unknown_ids_pass_through(self, lookup):
        assert lookup.slot_label("ts99") == "ts99"
        assert lookup.slot_label(None) == ""
        assert lookup.room_name("R99") == "R99"
        assert lookup.offering_for("X:0") is None


class TestBaseExporterRows:
    def test_scheduled_rows(self, result, lookup):
        rows = JSONExporter(lookup).scheduled_rows(result)

        assert rows[0] == {
            "Event ID": "O1:0",
            "Course Code": "CSC 101",
            "Course Title": "Intro to Programming",
            "Day": "MON",
            "Time Slot": "TS1",
            "Second Time Slot": "TS2",
            "Room": "Room 101",
            "Lecturer ID": "L1",
            "Locked": True,
            "Penalty": 0.0,
        }
        assert rows[1]["Second Time Slot"] == ""

    def test_rows_without_lookup(self, result):
        rows = CSVExporter().scheduled_rows(result)

        assert rows[0]["Course Code"] == ""
        assert rows[0]["Time Slot"] == "ts1"
        assert rows[0]["Room"] == "R1"

    def test_unscheduled_rows(self, result, lookup):
        rows = JSONExporter(lookup).unscheduled_rows(result)

        assert rows == [
            {
                "Event ID": "O2:0",
                "Course Code": "CHM 201",
                "Course Title": "Organic Chemistry",
                "Reason": "no_suitable_room_type",
                "Details": "No suitable room type available",
            }
        ]

    def test_summary_rows(self, result):
        summary = {row["Metric"]: row["Value"] for row in JSONExporter().summary_rows(result)}

        assert summary["Seed"] == 42
        assert summary["Scheduled"] == 2
        assert summary["Unscheduled"] == 1
        assert summary["Locked"] == 1
        assert summary["Soft Score"] == 3.0


class TestJSONExporter:
    def test_export(self, result, tmp_path):
        output = tmp_path / "out" / "schedule.json"

        JSONExporter().export(result, output)

        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["scheduled_count"] == 2
        assert data["unscheduled_count"] == 1
        assert data["seed"] == 42
        assert data["scheduled"][0]["second_timeslot_id"] == "ts2"
        assert data["unscheduled"][0]["reason"] == "no_suitable_room_type"


class TestCSVExporter:
    def test_export_creates_files(self, result, lookup, tmp_path):
        CSVExporter(lookup).export(result, tmp_path / "csv")

        with open(tmp_path / "csv" / "scheduled.csv", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
        assert [row["Event ID"] for row in rows] == ["O1:0", "O1:1"]
        assert (tmp_path / "csv" / "unscheduled.csv").exists()
        assert (tmp_path / "csv" / "summary.csv").exists()

    def test_empty_sections_are_skipped(self, tmp_path):
        CSVExporter().export(ScheduleResult(), tmp_path / "csv")

        assert not (tmp_path / "csv" / "scheduled.csv").exists()
        assert not (tmp_path / "csv" / "unscheduled.csv").exists()
        assert (tmp_path / "csv" / "summary.csv").exists()


class TestExcelExporter:
    def test_export_sheets(self, result, lookup, tmp_path):
        output = tmp_path / "schedule.xlsx"

        ExcelExporter(lookup).export(result, output)

        sheets = pd.read_excel(output, sheet_name=None)
        assert list(sheets) == ["Scheduled", "Unscheduled", "Summary"]
        assert sheets["Scheduled"]["Event ID"].tolist() == ["O1:0", "O1:1"]
        assert sheets["Unscheduled"]["Reason"].tolist() == ["no_suitable_room_type"]

    def test_empty_result_keeps_headers(self, tmp_path):
        output = tmp_path / "empty.xlsx"

        ExcelExporter().export(ScheduleResult(), output)

        sheets = pd.read_excel(output, sheet_name=None)
        assert sheets["Scheduled"].empty
        assert "Room" in sheets["Scheduled"].columns


class TestGetExporter:
    def test_known_formats(self, lookup):
        assert isinstance(get_exporter("json"), JSONExporter)
        assert isinstance(get_exporter("csv"), CSVExporter)
        exporter = get_exporter("excel", lookup)
        assert isinstance(exporter, ExcelExporter)
        assert exporter.lookup is lookup

    def test_unknown_format(self):
        with pytest.raises(ValueError, match="Unsupported format: pdf"):
            get_exporter("pdf")
