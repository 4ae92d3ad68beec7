"""
Scoring module.

Clamps sub-scores, totals sessions and folds them into student averages.
"""

from .engine import (
    append_session,
    category_subtotal,
    clamp_score,
    compute_session_total,
    finalize_session,
    parse_points,
    select_rubric,
)
from .session import ScoringSession, SessionState

__all__ = [
    "append_session",
    "category_subtotal",
    "clamp_score",
    "compute_session_total",
    "finalize_session",
    "parse_points",
    "select_rubric",
    "ScoringSession",
    "SessionState",
]
