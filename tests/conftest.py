"""Test fixtures for timetable engine tests."""

import pytest

from timetable_engine.models import CanonicalCourse, CourseOffering, OfferingType
from timetable_engine.scheduler.config import ConstraintsConfig
from timetable_engine.scheduler.models import Event, Room, RoomType, TimeSlot
from timetable_engine.storage import InMemoryStore

SESSION_ID = "2024-2025"


def _timeslot(number: int) -> TimeSlot:
    return TimeSlot(
        id=f"ts{number}",
        label=f"TS{number}",
        start_time=f"{7 + number:02d}:00",
        end_time=f"{8 + number:02d}:00",
        sort_order=number,
    )


@pytest.fixture
def session_id():
    return SESSION_ID


@pytest.fixture
def timeslots():
    """Eight hourly slots, TS1 (08:00) to TS8 (15:00)."""
    return [_timeslot(n) for n in range(1, 9)]


@pytest.fixture
def two_timeslots():
    return [_timeslot(1), _timeslot(2)]


@pytest.fixture
def rooms():
    """Two lecture rooms and one lab."""
    return [
        Room(id="R1", name="Room 101", room_type=RoomType.LECTURE_ROOM, capacity=80),
        Room(id="R2", name="Room 102", room_type=RoomType.LECTURE_ROOM, capacity=40),
        Room(id="LAB1", name="Physics Lab", room_type=RoomType.LAB, capacity=30),
    ]


@pytest.fixture
def monday_config():
    """Monday only, with TS1+TS2 as the single consecutive pair."""
    return ConstraintsConfig.from_dict(
        {"allowed_days": ["MON"], "consecutive_pairs": [["TS1", "TS2"]]}
    )


@pytest.fixture
def make_event():
    """Factory for events with sensible defaults."""

    def _make(
        event_id,
        lecturer_id=None,
        level=100,
        duration_slots=1,
        room_type=RoomType.LECTURE_ROOM,
        offering_id=None,
    ):
        return Event(
            id=event_id,
            offering_id=offering_id or event_id.split(":")[0],
            event_index=0,
            duration_slots=duration_slots,
            room_type_required=room_type,
            lecturer_id=lecturer_id,
            level=level,
            session_id=SESSION_ID,
        )

    return _make


@pytest.fixture
def make_offering():
    """Factory for unresolved course offerings in the test session."""

    def _make(
        offering_id,
        course_code,
        title,
        department="",
        level=100,
        credit_units=2,
        offering_type=OfferingType.LECTURE,
    ):
        return CourseOffering(
            id=offering_id,
            session_id=SESSION_ID,
            course_code=course_code,
            original_title=title,
            level=level,
            credit_units=credit_units,
            type=offering_type,
            department=department,
        )

    return _make


@pytest.fixture
def catalog():
    """Store with a small canonical catalog and no offerings."""
    store = InMemoryStore()
    store.add_canonical_courses(
        [
            CanonicalCourse(id="C1", title="Introduction to Programming", department="CSC"),
            CanonicalCourse(id="C2", title="Applied Linear Algebra 2", department="MTH"),
            CanonicalCourse(id="C3", title="Organic Chemistry", department="CHM"),
        ]
    )
    return store


@pytest.fixture
def reference_dir(tmp_path):
    """A complete reference directory for one small session."""
    files = {
        "timeslots.csv": (
            "id,label,start_time,end_time,sort_order\n"
            "ts1,TS1,08:00,09:00,1\n"
            "ts2,TS2,09:00,10:00,2\n"
            "ts3,TS3,10:00,11:00,3\n"
        ),
        "rooms.csv": (
            "id,name,room_type,capacity\n"
            "R1,Room 101,lecture_room,80\n"
            "LAB1,Physics Lab,lab,30\n"
        ),
        "offerings.csv": (
            "id,course_code,title,level,credit_units,type,department\n"
            "O1,CSC 101,Intro to Programming,100,2,lecture,CSC\n"
            "O2,CHM 201,Organic Chemistry,200,1,lecture,CHM\n"
            "O3,PHY 105,Underwater Basket Weaving,100,1,lecture,PHY\n"
        ),
        "canonical-courses.csv": (
            "id,title,department\n"
            "C1,Introduction to Programming,CSC\n"
            "C3,Organic Chemistry,CHM\n"
        ),
        "lecturer-assignments.csv": (
            "offering_id,lecturer_id,share\n"
            "O1,L1,1.0\n"
            "O2,L2,0.6\n"
            "O2,L3,0.4\n"
        ),
        "constraints.json": (
            '{"allowed_days": ["MON", "TUE"], "consecutive_pairs": [["TS1", "TS2"]]}'
        ),
    }
    for name, content in files.items():
        (tmp_path / name).write_text(content, encoding="utf-8")
    return tmp_path
