"""Student and session records."""

from .models import (
    ScoreEntry,
    SessionDraft,
    SessionRecord,
    StudentRecord,
    decode_scores,
    encode_scores,
    freeze_scores,
)

__all__ = [
    "ScoreEntry",
    "SessionDraft",
    "SessionRecord",
    "StudentRecord",
    "decode_scores",
    "encode_scores",
    "freeze_scores",
]
