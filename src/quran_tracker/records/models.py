"""Student and session record models.

Field names in the dict form match the stored JSON (``ayahRange``,
``totalScore`` ...), so ``from_dict(to_dict(x)) == x`` for every record.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import date
from types import MappingProxyType
from typing import Any

from ..rubrics.models import ReviewLevel

# category key -> sub-criterion index -> awarded points.
# Missing categories or indices mean "not scored yet" and count as 0.
ScoreEntry = dict[str, dict[int, int]]

# Read-only form of a ScoreEntry held by finalized records.
FrozenScores = Mapping[str, Mapping[int, int]]


def encode_scores(scores: ScoreEntry) -> dict[str, dict[str, int]]:
    """Convert a ScoreEntry to its JSON form (string sub-indices)."""
    return {
        category: {str(index): int(value) for index, value in subs.items()}
        for category, subs in scores.items()
    }


def freeze_scores(scores: Mapping[str, Mapping[int, int]] | None) -> FrozenScores:
    """Copy a ScoreEntry into nested read-only mappings."""
    return MappingProxyType({
        category: MappingProxyType(dict(subs))
        for category, subs in (scores or {}).items()
    })


def decode_scores(data: dict[str, Any] | None) -> ScoreEntry:
    """Parse the JSON form of a ScoreEntry back to integer sub-indices."""
    if not data:
        return {}
    return {
        str(category): {int(index): int(value) for index, value in (subs or {}).items()}
        for category, subs in data.items()
    }


@dataclass
class SessionDraft:
    """Fields entered before scoring starts."""

    date: str = field(default_factory=lambda: date.today().isoformat())
    surah: str = ""
    ayah_range: str = ""
    notes: str = ""


@dataclass(frozen=True)
class SessionRecord:
    """One graded recitation session. Never modified once created.

    ``scores`` is stored as a read-only copy of whatever mapping is passed in.
    """

    date: str
    surah: str
    ayah_range: str
    scores: FrozenScores = field(hash=False)
    total_score: int
    notes: str
    review_level: ReviewLevel
    timestamp: str

    def __post_init__(self):
        object.__setattr__(self, "scores", freeze_scores(self.scores))

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "surah": self.surah,
            "ayahRange": self.ayah_range,
            "scores": encode_scores(self.scores),
            "totalScore": self.total_score,
            "notes": self.notes,
            "reviewLevel": self.review_level.value,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionRecord":
        return cls(
            date=data["date"],
            surah=data.get("surah", ""),
            ayah_range=data.get("ayahRange", ""),
            scores=decode_scores(data.get("scores")),
            total_score=int(data["totalScore"]),
            notes=data.get("notes", ""),
            review_level=ReviewLevel.parse(data.get("reviewLevel", ReviewLevel.BASIC)),
            timestamp=data["timestamp"],
        )

    def score_snapshot(self) -> ScoreEntry:
        """A copy of the scores that callers may modify freely."""
        return {category: dict(subs) for category, subs in self.scores.items()}


@dataclass(frozen=True)
class StudentRecord:
    """A student and their chronological session history."""

    id: int
    name: str
    sessions: tuple[SessionRecord, ...] = ()
    total_score: int = 0
    average_score: float = 0.0

    @property
    def session_count(self) -> int:
        return len(self.sessions)

    @property
    def latest_session(self) -> SessionRecord | None:
        return self.sessions[-1] if self.sessions else None

    def with_sessions(self, sessions: tuple[SessionRecord, ...]) -> "StudentRecord":
        """Copy of this student with the aggregates recomputed for ``sessions``.

        The total is summed from scratch rather than updated incrementally.
        """
        total = sum(s.total_score for s in sessions)
        average = total / len(sessions) if sessions else 0.0
        return replace(self, sessions=sessions, total_score=total, average_score=average)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "sessions": [s.to_dict() for s in self.sessions],
            "totalScore": self.total_score,
            "averageScore": self.average_score,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StudentRecord":
        return cls(
            id=int(data["id"]),
            name=str(data["name"]),
            sessions=tuple(SessionRecord.from_dict(s) for s in data.get("sessions", [])),
            total_score=int(data.get("totalScore", 0)),
            average_score=float(data.get("averageScore", 0.0)),
        )
