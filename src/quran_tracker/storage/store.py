"""Local JSON store for the student collection.

The whole collection lives under one namespace key of a JSON document::

    {"quran-tracker-students": [{"id": ..., "name": ..., "sessions": [...]}, ...]}

A bare JSON array (the value of that key on its own, as exported from the
browser version of the tracker) is accepted on load as well.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from ..exceptions import StorageError
from ..records.models import StudentRecord
from ..utils.files import atomic_write_text
from ..utils.logging import get_logger

logger = get_logger(__name__)

NAMESPACE_KEY = "quran-tracker-students"


def encode_students(students: Iterable[StudentRecord]) -> list[dict[str, Any]]:
    return [student.to_dict() for student in students]


def decode_students(data: Any, key: str = NAMESPACE_KEY) -> list[StudentRecord]:
    """Parse the stored form of the collection.

    Raises:
        ValueError: If the data is not a collection of student records
    """
    if isinstance(data, dict):
        data = data.get(key, [])
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of students, got {type(data).__name__}")
    try:
        return [StudentRecord.from_dict(item) for item in data]
    except (KeyError, TypeError, AttributeError) as e:
        raise ValueError(f"Malformed student record: {e}") from e


class JsonStudentStore:
    """Reads and writes the student collection as a JSON file."""

    def __init__(self, path: Path, key: str = NAMESPACE_KEY):
        """Initialize the store.

        Args:
            path: JSON file holding the collection
            key: Namespace key the collection is stored under
        """
        self.path = Path(path).expanduser()
        self.key = key

    def load(self) -> list[StudentRecord]:
        """Load all students.

        A missing file is the normal first-run case. An unreadable or
        corrupt file is logged and also treated as an empty collection.
        """
        if not self.path.exists():
            logger.info(f"No existing data at {self.path}")
            return []

        try:
            with open(self.path, encoding="utf-8") as f:
                students = decode_students(json.load(f), self.key)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read {self.path}, starting empty: {e}")
            return []

        logger.info(f"Loaded {len(students)} students from {self.path}")
        return students

    def save(self, students: Iterable[StudentRecord]) -> bool:
        """Write all students, returning False if the write failed."""
        try:
            self.save_or_raise(students)
        except StorageError as e:
            logger.error(str(e))
            return False
        return True

    def save_or_raise(self, students: Iterable[StudentRecord]) -> None:
        """Write all students.

        Other top-level keys already in the file are kept. The previous file
        stays intact if the write fails.

        Raises:
            StorageError: If the file could not be written
        """
        document = self._read_document()
        students = list(students)
        document[self.key] = encode_students(students)

        try:
            atomic_write_text(self.path, json.dumps(document, ensure_ascii=False, indent=2))
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Error saving data to {self.path}: {e}") from e

        logger.debug(f"Saved {len(students)} students to {self.path}")

    def _read_document(self) -> dict[str, Any]:
        """Current file contents as a dict, or an empty dict if unusable."""
        try:
            with open(self.path, encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, ValueError):
            return {}
        return document if isinstance(document, dict) else {}
