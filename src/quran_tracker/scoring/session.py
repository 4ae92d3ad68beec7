"""Interactive scoring of a single recitation session."""

from __future__ import annotations

from enum import Enum
from typing import Any

from ..records.models import ScoreEntry, SessionDraft, SessionRecord
from ..rubrics.models import ReviewLevel, RubricDefinition
from .engine import category_subtotal, clamp_score, compute_session_total, finalize_session, select_rubric


class SessionState(str, Enum):
    COLLECTING_FIELDS = "collecting-fields"
    ENTERING_SCORES = "entering-scores"
    FINALIZED = "finalized"


class ScoringSession:
    """Walks one session from field entry to a finalized record.

    The state only moves forward: fields are collected, scores are entered,
    and ``finalize`` produces the record. After that the session rejects
    further changes.
    """

    def __init__(self, level: str | ReviewLevel = ReviewLevel.BASIC, draft: SessionDraft | None = None):
        self.level = ReviewLevel.parse(level)
        self.draft = draft or SessionDraft()
        self.scores: ScoreEntry = {}
        self.state = SessionState.COLLECTING_FIELDS
        self.record: SessionRecord | None = None

    @property
    def rubric(self) -> RubricDefinition:
        return select_rubric(self.level)

    @property
    def total(self) -> int:
        return compute_session_total(self.rubric, self.scores)

    def subtotal(self, category_key: str) -> int:
        return category_subtotal(self.rubric, self.scores, category_key)

    def update_fields(self, **fields: Any) -> None:
        """Set date, surah, ayah_range or notes on the draft."""
        self._require_open()
        for name, value in fields.items():
            if not hasattr(self.draft, name):
                raise AttributeError(f"Unknown session field: {name}")
            setattr(self.draft, name, value)

    def switch_level(self, level: str | ReviewLevel) -> None:
        """Score against another rubric; scores entered so far are dropped."""
        self._require_open()
        level = ReviewLevel.parse(level)
        if level is not self.level:
            self.level = level
            self.scores = {}

    def set_score(self, category_key: str, sub_index: int, raw_value: Any) -> int:
        """Store a clamped sub-score and return the value actually kept."""
        self._require_open()
        value = clamp_score(self.rubric, category_key, sub_index, raw_value)
        self.scores.setdefault(category_key, {})[sub_index] = value
        self.state = SessionState.ENTERING_SCORES
        return value

    def score_of(self, category_key: str, sub_index: int) -> int:
        return self.scores.get(category_key, {}).get(sub_index, 0)

    def finalize(self) -> SessionRecord:
        self._require_open()
        self.record = finalize_session(self.draft, self.scores, self.level)
        self.state = SessionState.FINALIZED
        return self.record

    def _require_open(self) -> None:
        if self.state is SessionState.FINALIZED:
            raise RuntimeError("Session already finalized")
