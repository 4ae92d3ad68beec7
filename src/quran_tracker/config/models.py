"""Configuration data models."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..rubrics.models import ReviewLevel

DEFAULT_HOME = Path.home() / ".quran_tracker"


@dataclass
class TrackerConfig:
    """Tracker settings."""

    data_file: Path = field(default_factory=lambda: DEFAULT_HOME / "students.json")
    reports_dir: Path = field(default_factory=lambda: DEFAULT_HOME / "reports")
    default_level: ReviewLevel = ReviewLevel.BASIC
    log_file: Path | None = None
    teacher_name: str = "Your Teacher"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TrackerConfig":
        defaults = cls()
        log_file = data.get("log_file")
        return cls(
            data_file=_path(data.get("data_file"), defaults.data_file),
            reports_dir=_path(data.get("reports_dir"), defaults.reports_dir),
            default_level=ReviewLevel.parse(data.get("default_level", defaults.default_level)),
            log_file=Path(log_file).expanduser() if log_file else None,
            teacher_name=data.get("teacher_name", defaults.teacher_name),
        )


def _path(value: Any, default: Path) -> Path:
    return Path(value).expanduser() if value else default
