"""Scoring engine.

Stateless functions that turn raw sub-score entries into session totals and
fold finished sessions into a student's running average. Malformed or
out-of-range input is clamped, never rejected, so a half-typed value in a
form can always be scored.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from typing import Any

from ..records.models import ScoreEntry, SessionDraft, SessionRecord, StudentRecord, freeze_scores
from ..rubrics.loader import load_builtin_rubric
from ..rubrics.models import ReviewLevel, RubricDefinition
from ..utils.logging import get_logger

logger = get_logger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_points(raw_value: Any) -> int:
    """Read an integer out of user input, returning 0 when there is none.

    Strings are read up to the first non-digit (``"12abc"`` gives 12,
    ``"7.9"`` gives 7). Floats are truncated toward zero.
    """
    if isinstance(raw_value, bool) or raw_value is None:
        return 0
    if isinstance(raw_value, int):
        return raw_value
    if isinstance(raw_value, float):
        return int(raw_value) if math.isfinite(raw_value) else 0
    if isinstance(raw_value, str):
        match = _LEADING_INT.match(raw_value)
        return int(match.group(1)) if match else 0
    return 0


def _clamp(value: int, points: int) -> int:
    return min(max(0, value), points)


def select_rubric(level: str | ReviewLevel) -> RubricDefinition:
    """Return the fixed rubric for ``basic`` or ``advanced`` review.

    Raises:
        ValueError: For any other level
    """
    return load_builtin_rubric(ReviewLevel.parse(level))


def clamp_score(
    rubric: RubricDefinition,
    category_key: str,
    sub_index: int,
    raw_value: Any,
) -> int:
    """Coerce a raw entry into ``[0, points]`` for one sub-criterion.

    Args:
        rubric: Rubric the sub-criterion belongs to
        category_key: Category key within the rubric
        sub_index: Position of the sub-criterion in its category
        raw_value: Whatever the user typed

    Returns:
        The clamped score

    Raises:
        KeyError: If the category does not exist in the rubric
        IndexError: If the sub-criterion index is out of range
    """
    sub = rubric.sub_criterion(category_key, sub_index)
    return _clamp(parse_points(raw_value), sub.points)


def category_subtotal(rubric: RubricDefinition, score_entry: ScoreEntry, category_key: str) -> int:
    """Points awarded in one category; unscored sub-criteria count as 0."""
    subcriteria = rubric.category(category_key).subcriteria
    subtotal = 0
    for index, value in (score_entry.get(category_key) or {}).items():
        if 0 <= index < len(subcriteria):
            subtotal += _clamp(value, subcriteria[index].points)
    return subtotal


def compute_session_total(rubric: RubricDefinition, score_entry: ScoreEntry) -> int:
    """Sum every recorded sub-score across the rubric's categories.

    Categories or indices missing from ``score_entry`` contribute 0, and keys
    the rubric does not define are ignored, so the result always lies in
    ``[0, rubric.total_points]``.
    """
    return sum(category_subtotal(rubric, score_entry, key) for key in rubric.categories)


def finalize_session(
    draft: SessionDraft,
    score_entry: ScoreEntry,
    level: str | ReviewLevel,
    now: datetime | None = None,
) -> SessionRecord:
    """Freeze a draft and its scores into a SessionRecord.

    Args:
        draft: Date, surah, ayah range and notes entered for the session
        score_entry: Sub-scores entered so far
        level: Review level the scores were entered against
        now: Creation instant (defaults to the current UTC time)

    Returns:
        The immutable session record
    """
    level = ReviewLevel.parse(level)
    rubric = select_rubric(level)
    now = now or datetime.now(timezone.utc)

    record = SessionRecord(
        date=draft.date,
        surah=draft.surah.strip(),
        ayah_range=draft.ayah_range.strip(),
        scores=freeze_scores(score_entry),
        total_score=compute_session_total(rubric, score_entry),
        notes=draft.notes,
        review_level=level,
        timestamp=now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
    )
    logger.debug(f"Finalized {level.value} session for {record.surah!r}: {record.total_score}/100")
    return record


def append_session(student: StudentRecord, session: SessionRecord) -> StudentRecord:
    """Return ``student`` with ``session`` added at the end of its history.

    The existing sessions are kept as they are and in the same order; the
    total and average are recomputed over the whole history.
    """
    return student.with_sessions(student.sessions + (session,))
