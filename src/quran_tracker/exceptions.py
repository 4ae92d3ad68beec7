"""Exception types raised by the tracker."""


class TrackerError(Exception):
    """Base class for all tracker errors."""


class RubricError(TrackerError):
    """A rubric file is malformed or breaks the point invariants."""


class StorageError(TrackerError):
    """The student collection could not be written."""


class ConfigError(TrackerError):
    """A configuration file could not be parsed."""


class StudentNotFoundError(TrackerError, KeyError):
    """No student with the requested id exists."""

    def __init__(self, student_id: int):
        super().__init__(student_id)
        self.student_id = student_id

    def __str__(self) -> str:
        return f"Student not found: {self.student_id}"
