"""Parent e-mail composition.

Builds the progress message for a student's parent. Sending is left to the
user's mail client: the CLI opens the ``mailto:`` link.
"""

from dataclasses import dataclass
from urllib.parse import quote

from ..records.models import StudentRecord
from ..utils.logging import get_logger
from .report_card import format_average

logger = get_logger(__name__)

RECENT_SESSIONS = 3


@dataclass
class ParentEmail:
    """A composed e-mail ready to hand to a mail client."""

    to: str
    subject: str
    body: str

    def mailto_url(self) -> str:
        return (
            f"mailto:{quote(self.to, safe='@,')}"
            f"?subject={quote(self.subject)}&body={quote(self.body)}"
        )


def _recent_lines(student: StudentRecord) -> list[str]:
    lines = []
    for session in reversed(student.sessions[-RECENT_SESSIONS:]):
        passage = " ".join(part for part in (session.surah, session.ayah_range) if part)
        lines.append(f"  - {session.date}: {passage or 'Recitation'} ({session.review_level.value}) {session.total_score}/100")
    return lines


def compose_parent_email(student: StudentRecord, teacher_name: str, to: str = "") -> ParentEmail:
    """Compose a progress update for a student's parent.

    Args:
        student: Student the message is about
        teacher_name: Signature line
        to: Recipient address, may be left empty for the mail client

    Returns:
        The composed ParentEmail
    """
    if student.sessions:
        summary = (
            f"{student.name} has completed {student.session_count} recitation "
            f"session(s) with an average score of {format_average(student)}."
        )
        recent = ["", "Recent sessions:", *_recent_lines(student)]
        latest = student.latest_session
        if latest is not None and latest.notes.strip():
            recent += ["", "Notes from the latest session:", latest.notes.strip()]
    else:
        summary = f"{student.name} has no recorded recitation sessions yet."
        recent = []

    body = "\n".join([
        "Assalamu alaikum,",
        "",
        f"Here is the latest Quran recitation progress for {student.name}.",
        "",
        summary,
        *recent,
        "",
        "Please don't hesitate to reach out with any questions.",
        "",
        "Best regards,",
        teacher_name,
    ])

    logger.debug(f"Composed parent e-mail for {student.name!r}")
    return ParentEmail(to=to, subject=f"Quran recitation progress: {student.name}", body=body)
