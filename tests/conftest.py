"""
Shared test fixtures.

Every test runs against a temporary data file and with the user's own
config and environment hidden.
"""

import pytest

from quran_tracker.records.models import SessionRecord, StudentRecord
from quran_tracker.rubrics.models import ReviewLevel
from quran_tracker.scoring.engine import select_rubric
from quran_tracker.storage.store import JsonStudentStore
from quran_tracker.tracker import Tracker



@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path):
    """Point config lookup at an empty location and drop data overrides."""
    monkeypatch.setenv("QURAN_TRACKER_CONFIG", str(tmp_path / "no-config.yml"))
    monkeypatch.delenv("QURAN_TRACKER_DATA", raising=False)


@pytest.fixture
def basic_rubric():
    return select_rubric("basic")


@pytest.fixture
def advanced_rubric():
    return select_rubric("advanced")


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "data" / "students.json"


@pytest.fixture
def store(data_file):
    return JsonStudentStore(data_file)


@pytest.fixture
def notifications():
    return []


@pytest.fixture
def tracker(store, notifications):
    return Tracker.open(store, notify=notifications.append)


def make_session(total, surah="Al-Fatiha", level=ReviewLevel.BASIC, notes=""):
    """A session record with a given total, for aggregate tests."""
    return SessionRecord(
        date="2026-10-19",
        surah=surah,
        ayah_range="1-7",
        scores={},
        total_score=total,
        notes=notes,
        review_level=level,
        timestamp="2026-10-19T09:30:00.000Z",
    )


@pytest.fixture
def student_with_history():
    scored = SessionRecord(
        date="2026-10-12",
        surah="Al-Ikhlas",
        ayah_range="1-4",
        scores={"pronunciation": {0: 8, 1: 10, 2: 7, 3: 5}, "fluency": {0: 6}},
        total_score=36,
        notes="Good makharij.\nWork on madd.",
        review_level=ReviewLevel.BASIC,
        timestamp="2026-10-12T17:05:11.250Z",
    )
    advanced = SessionRecord(
        date="2026-10-19",
        surah="Al-Mulk",
        ayah_range="1-10",
        scores={"makhraj": {0: 4, 4: 2}, "mistakes": {0: 8, 1: 7}},
        total_score=21,
        notes="",
        review_level=ReviewLevel.ADVANCED,
        timestamp="2026-10-19T09:30:00.000Z",
    )
    return StudentRecord(id=1760870400000, name="Yusuf Rahman").with_sessions((scored, advanced))


@pytest.fixture
def session_factory():
    return make_session
