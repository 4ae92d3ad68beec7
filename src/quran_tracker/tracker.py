"""
Tracker

Holds the in-memory student collection and applies user actions to it:
adding students and recording scored sessions. Every change is written
through to the store; when a write fails the user is notified and the
in-memory collection stays authoritative until the next successful save.
"""

from __future__ import annotations

import time
from collections.abc import Callable

from .exceptions import StudentNotFoundError
from .records.models import ScoreEntry, SessionDraft, SessionRecord, StudentRecord
from .rubrics.models import ReviewLevel
from .scoring.engine import append_session, finalize_session
from .storage.store import JsonStudentStore
from .utils.logging import get_logger

logger = get_logger(__name__)

SAVE_FAILED_MESSAGE = "Error saving data. Please try again."


def _silent(message: str) -> None:
    pass


class Tracker:
    """Application state: the student roster and its persistence."""

    def __init__(
        self,
        store: JsonStudentStore,
        notify: Callable[[str], None] | None = None,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the tracker.

        Args:
            store: Where the collection is loaded from and saved to
            notify: Called with a user-facing message when a save fails
            clock: Seconds since the epoch, used to generate student ids
        """
        self.store = store
        self.notify = notify or _silent
        self.clock = clock
        self.students: list[StudentRecord] = []
        self._last_id = 0

    @classmethod
    def open(cls, store: JsonStudentStore, **kwargs) -> "Tracker":
        """Create a tracker and load the stored collection into it."""
        tracker = cls(store, **kwargs)
        tracker.load()
        return tracker

    def load(self) -> None:
        self.students = self.store.load()
        self._last_id = max((s.id for s in self.students), default=0)

    def save(self) -> bool:
        """Write the collection, notifying the user on failure."""
        if self.store.save(self.students):
            return True
        self.notify(SAVE_FAILED_MESSAGE)
        return False

    def add_student(self, name: str) -> StudentRecord | None:
        """Add a student with no sessions.

        Returns:
            The new student, or None when the name is blank
        """
        name = (name or "").strip()
        if not name:
            logger.debug("Ignoring add-student with a blank name")
            return None

        student = StudentRecord(id=self._next_id(), name=name)
        self.students.append(student)
        logger.info(f"Added student {student.name!r} ({student.id})")
        self.save()
        return student

    def get_student(self, student_id: int) -> StudentRecord:
        """Look up a student by id.

        Raises:
            StudentNotFoundError: If no student has that id
        """
        for student in self.students:
            if student.id == student_id:
                return student
        raise StudentNotFoundError(student_id)

    def find_students(self, query: str) -> list[StudentRecord]:
        """Students whose name contains ``query``, ignoring case."""
        query = query.strip().casefold()
        return [s for s in self.students if query in s.name.casefold()]

    def record_session(self, student_id: int, session: SessionRecord) -> StudentRecord:
        """Append a finalized session to a student's history and save.

        Returns:
            The updated student record
        """
        for position, student in enumerate(self.students):
            if student.id == student_id:
                updated = append_session(student, session)
                self.students[position] = updated
                break
        else:
            raise StudentNotFoundError(student_id)

        logger.info(
            f"Recorded session for {updated.name!r}: {session.total_score}/100 "
            f"(average {updated.average_score:.1f} over {updated.session_count})"
        )
        self.save()
        return updated

    def score_session(
        self,
        student_id: int,
        draft: SessionDraft,
        score_entry: ScoreEntry,
        level: str | ReviewLevel,
    ) -> StudentRecord:
        """Finalize a scored draft and record it for a student."""
        self.get_student(student_id)
        return self.record_session(student_id, finalize_session(draft, score_entry, level))

    def _next_id(self) -> int:
        """Epoch milliseconds, bumped past the last id handed out."""
        candidate = int(self.clock() * 1000)
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return candidate
