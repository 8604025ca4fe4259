"""Export functionality for generated schedules."""

import csv
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pandas as pd

from .models import CourseOffering
from .scheduler.models import Event, Room, ScheduleResult, TimeSlot


@dataclass
class ScheduleLookup:
    """Reference data used to make exported rows readable.

    Unknown ids are exported as they are.
    """

    timeslots: list[TimeSlot] = field(default_factory=list)
    rooms: list[Room] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)
    offerings: list[CourseOffering] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._slots = {ts.id: ts for ts in self.timeslots}
        self._rooms = {r.id: r for r in self.rooms}
        self._events = {e.id: e for e in self.events}
        self._offerings = {o.id: o for o in self.offerings}

    def slot_label(self, timeslot_id: str | None) -> str:
        if not timeslot_id:
            return ""
        slot = self._slots.get(timeslot_id)
        return slot.label if slot and slot.label else timeslot_id

    def room_name(self, room_id: str) -> str:
        room = self._rooms.get(room_id)
        return room.name if room else room_id

    def event(self, event_id: str) -> Event | None:
        return self._events.get(event_id)

    def offering_for(self, event_id: str) -> CourseOffering | None:
        event = self._events.get(event_id)
        return self._offerings.get(event.offering_id) if event else None


class BaseExporter(ABC):
    """Base class for exporters."""

    def __init__(self, lookup: ScheduleLookup | None = None):
        self.lookup = lookup or ScheduleLookup()

    @abstractmethod
    def export(self, result: ScheduleResult, output_path: str | Path) -> None:
        """Export schedule result to file.

        Args:
            result: ScheduleResult to export
            output_path: Path to output file or directory
        """
        pass

    def scheduled_rows(self, result: ScheduleResult) -> list[dict[str, Any]]:
        """One row per placement with names and labels resolved."""
        rows = []
        for placement in result.scheduled:
            event = self.lookup.event(placement.event_id)
            offering = self.lookup.offering_for(placement.event_id)
            rows.append(
                {
                    "Event ID": placement.event_id,
                    "Course Code": offering.course_code if offering else "",
                    "Course Title": offering.original_title if offering else "",
                    "Day": placement.day.value,
                    "Time Slot": self.lookup.slot_label(placement.timeslot_id),
                    "Second Time Slot": self.lookup.slot_label(placement.second_timeslot_id),
                    "Room": self.lookup.room_name(placement.room_id),
                    "Lecturer ID": (event.lecturer_id or "") if event else "",
                    "Locked": placement.locked,
                    "Penalty": placement.penalty,
                }
            )
        return rows

    def unscheduled_rows(self, result: ScheduleResult) -> list[dict[str, Any]]:
        rows = []
        for item in result.unscheduled:
            offering = self.lookup.offering_for(item.event_id)
            rows.append(
                {
                    "Event ID": item.event_id,
                    "Course Code": offering.course_code if offering else "",
                    "Course Title": offering.original_title if offering else "",
                    "Reason": item.reason.value,
                    "Details": item.details,
                }
            )
        return rows

    def summary_rows(self, result: ScheduleResult) -> list[dict[str, Any]]:
        stats = result.statistics
        return [
            {"Metric": "Generation Date", "Value": result.generation_date},
            {"Metric": "Seed", "Value": "" if result.seed is None else result.seed},
            {"Metric": "Candidate Limit", "Value": result.candidate_limit},
            {"Metric": "Total Events", "Value": stats.total_events},
            {"Metric": "Scheduled", "Value": result.scheduled_count},
            {"Metric": "Unscheduled", "Value": result.unscheduled_count},
            {"Metric": "Locked", "Value": stats.locked_events},
            {"Metric": "Repaired", "Value": stats.repaired_events},
            {"Metric": "Soft Score", "Value": result.soft_score},
        ]


class JSONExporter(BaseExporter):
    """Export to JSON format."""

    def __init__(
        self,
        lookup: ScheduleLookup | None = None,
        indent: int = 2,
        ensure_ascii: bool = False,
    ):
        """Initialize exporter.

        Args:
            lookup: Reference data for readable rows
            indent: JSON indentation level
            ensure_ascii: If False, allows non-ASCII characters
        """
        super().__init__(lookup)
        self.indent = indent
        self.ensure_ascii = ensure_ascii

    def export(self, result: ScheduleResult, output_path: str | Path) -> None:
        """Export schedule result to JSON file.

        Args:
            result: ScheduleResult to export
            output_path: Path to output JSON file
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(
                result.to_dict(),
                f,
                indent=self.indent,
                ensure_ascii=self.ensure_ascii,
            )


class CSVExporter(BaseExporter):
    """Export to CSV format (multiple files)."""

    def export(self, result: ScheduleResult, output_path: str | Path) -> None:
        """Export schedule result to CSV files.

        Creates three files:
        - scheduled.csv: Placed events
        - unscheduled.csv: Events that could not be placed
        - summary.csv: Run summary

        Args:
            result: ScheduleResult to export
            output_path: Path to output directory
        """
        output_dir = Path(output_path)
        output_dir.mkdir(parents=True, exist_ok=True)

        self._write_csv(output_dir / "scheduled.csv", self.scheduled_rows(result))
        self._write_csv(output_dir / "unscheduled.csv", self.unscheduled_rows(result))
        self._write_csv(output_dir / "summary.csv", self.summary_rows(result))

    def _write_csv(self, output_path: Path, rows: list[dict]) -> None:
        """Write rows to CSV file."""
        if not rows:
            return

        with open(output_path, "w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=rows[0].keys())
            writer.writeheader()
            writer.writerows(rows)


class ExcelExporter(BaseExporter):
    """Export to Excel format (single workbook with multiple sheets)."""

    def export(self, result: ScheduleResult, output_path: str | Path) -> None:
        """Export schedule result to Excel file.

        Creates workbook with sheets:
        - Scheduled: Placed events
        - Unscheduled: Events that could not be placed
        - Summary: Run summary

        Args:
            result: ScheduleResult to export
            output_path: Path to output Excel file
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
            self._write_sheet(
                writer,
                "Scheduled",
                self.scheduled_rows(result),
                ["Event ID", "Course Code", "Course Title", "Day", "Time Slot", "Room"],
            )
            self._write_sheet(
                writer,
                "Unscheduled",
                self.unscheduled_rows(result),
                ["Event ID", "Course Code", "Course Title", "Reason", "Details"],
            )
            self._write_sheet(writer, "Summary", self.summary_rows(result), ["Metric", "Value"])

    def _write_sheet(
        self,
        writer: pd.ExcelWriter,
        sheet_name: str,
        rows: list[dict],
        empty_columns: list[str],
    ) -> None:
        df = pd.DataFrame(rows) if rows else pd.DataFrame(columns=empty_columns)
        df.to_excel(writer, sheet_name=sheet_name, index=False)


def get_exporter(format_type: str, lookup: ScheduleLookup | None = None) -> BaseExporter:
    """Get appropriate exporter for format type.

    Args:
        format_type: Export format ('json', 'csv', 'excel')
        lookup: Reference data for readable rows

    Returns:
        Exporter instance

    Raises:
        ValueError: If format type is not supported
    """
    exporters = {
        "json": JSONExporter,
        "csv": CSVExporter,
        "excel": ExcelExporter,
    }

    if format_type not in exporters:
        raise ValueError(
            f"Unsupported format: {format_type}. Supported: {', '.join(exporters.keys())}"
        )

    return exporters[format_type](lookup)
