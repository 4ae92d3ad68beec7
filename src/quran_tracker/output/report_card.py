"""
Report card generation.

Renders a student's progress as a PDF: average, session history and the
category breakdown of the most recent session. Uses reportlab.

Usage from code:
    from quran_tracker.output.report_card import generate_report_card
    generate_report_card(student, output_path)
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ..records.models import SessionRecord, StudentRecord
from ..scoring.engine import category_subtotal, select_rubric
from ..utils.files import safe_filename
from ..utils.logging import get_logger

logger = get_logger(__name__)

BASE_TABLE_STYLE = [
    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#d1fae5")),
    ("TEXTCOLOR", (0, 0), (-1, 0), colors.HexColor("#065f46")),
    ("VALIGN", (0, 0), (-1, -1), "TOP"),
    ("FONTSIZE", (0, 0), (-1, -1), 8),
    ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#cbd5e0")),
    ("LEFTPADDING", (0, 0), (-1, -1), 6),
    ("RIGHTPADDING", (0, 0), (-1, -1), 6),
    ("TOPPADDING", (0, 0), (-1, -1), 4),
    ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
]


def _get_styles() -> dict[str, ParagraphStyle]:
    """Get custom paragraph styles for the report card."""
    styles = getSampleStyleSheet()

    return {
        "Title": ParagraphStyle(
            "CardTitle",
            parent=styles["Heading1"],
            fontSize=18,
            spaceAfter=6,
            textColor=colors.HexColor("#047857"),
        ),
        "Heading2": ParagraphStyle(
            "CardHeading2",
            parent=styles["Heading2"],
            fontSize=13,
            spaceBefore=12,
            spaceAfter=6,
            textColor=colors.HexColor("#065f46"),
        ),
        "Normal": ParagraphStyle(
            "CardNormal",
            parent=styles["Normal"],
            fontSize=10,
            leading=14,
            spaceAfter=6,
        ),
        "Small": ParagraphStyle(
            "CardSmall",
            parent=styles["Normal"],
            fontSize=8,
            leading=10,
            textColor=colors.HexColor("#374151"),
        ),
        "Notes": ParagraphStyle(
            "CardNotes",
            parent=styles["Normal"],
            fontSize=10,
            leading=14,
            leftIndent=10,
            rightIndent=10,
            backColor=colors.HexColor("#fefce8"),
            borderPadding=6,
        ),
    }


def format_average(student: StudentRecord) -> str:
    """Average as shown on detail views and reports: one decimal."""
    return f"{student.average_score:.1f}%"


def _build_header_section(student: StudentRecord, styles: dict[str, ParagraphStyle]) -> list:
    elements = [
        Paragraph(f"Report Card: {escape(student.name)}", styles["Title"]),
        Paragraph(
            f"{student.session_count} sessions &nbsp;|&nbsp; Average: <b>{format_average(student)}</b>",
            styles["Normal"],
        ),
        Paragraph(f"Generated {datetime.now():%Y-%m-%d %H:%M}", styles["Small"]),
        Spacer(1, 0.2 * inch),
    ]
    return elements


def _build_history_section(
    sessions: tuple[SessionRecord, ...], styles: dict[str, ParagraphStyle]
) -> list:
    """Session history, newest first."""
    elements = [Paragraph("Session History", styles["Heading2"])]

    if not sessions:
        elements.append(Paragraph("No sessions recorded yet.", styles["Normal"]))
        return elements

    table_data = [[
        Paragraph("<b>Date</b>", styles["Small"]),
        Paragraph("<b>Surah</b>", styles["Small"]),
        Paragraph("<b>Ayahs</b>", styles["Small"]),
        Paragraph("<b>Level</b>", styles["Small"]),
        Paragraph("<b>Score</b>", styles["Small"]),
    ]]
    for session in reversed(sessions):
        table_data.append([
            Paragraph(escape(session.date), styles["Small"]),
            Paragraph(escape(session.surah), styles["Small"]),
            Paragraph(escape(session.ayah_range), styles["Small"]),
            Paragraph(session.review_level.value.title(), styles["Small"]),
            Paragraph(f"{session.total_score}%", styles["Small"]),
        ])

    table = Table(table_data, colWidths=[1.1 * inch, 2.2 * inch, 1.1 * inch, 1 * inch, 0.8 * inch])
    table.setStyle(TableStyle(BASE_TABLE_STYLE + [("ALIGN", (4, 0), (4, -1), "CENTER")]))
    elements.extend([table, Spacer(1, 0.2 * inch)])
    return elements


def _build_breakdown_section(session: SessionRecord, styles: dict[str, ParagraphStyle]) -> list:
    """Category subtotals of one session."""
    rubric = select_rubric(session.review_level)
    elements = [
        Paragraph(
            f"Latest Session Breakdown ({rubric.name}, {escape(session.date)})",
            styles["Heading2"],
        )
    ]

    table_data = [[
        Paragraph("<b>Category</b>", styles["Small"]),
        Paragraph("<b>Points</b>", styles["Small"]),
    ]]
    for key, category in rubric.categories.items():
        subtotal = category_subtotal(rubric, session.scores, key)
        table_data.append([
            Paragraph(escape(category.title), styles["Small"]),
            Paragraph(f"{subtotal}/{category.max_points}", styles["Small"]),
        ])
    table_data.append([
        Paragraph("<b>TOTAL</b>", styles["Small"]),
        Paragraph(f"<b>{session.total_score}/{rubric.total_points}</b>", styles["Small"]),
    ])

    table = Table(table_data, colWidths=[4.4 * inch, 1.8 * inch])
    table.setStyle(TableStyle(BASE_TABLE_STYLE + [
        ("BACKGROUND", (0, -1), (-1, -1), colors.HexColor("#ecfdf5")),
        ("ALIGN", (1, 0), (1, -1), "CENTER"),
    ]))
    elements.extend([table, Spacer(1, 0.15 * inch)])

    if session.notes.strip():
        elements.append(Paragraph("Teacher Notes", styles["Heading2"]))
        for para in session.notes.strip().split("\n\n"):
            elements.append(Paragraph(escape(para).replace("\n", "<br/>"), styles["Notes"]))
            elements.append(Spacer(1, 0.1 * inch))

    return elements


def default_report_path(student: StudentRecord, reports_dir: Path) -> Path:
    return reports_dir / f"{safe_filename(student.name)}_{student.id}_report.pdf"


def generate_report_card(student: StudentRecord, output_path: Path) -> Path:
    """
    Generate a PDF report card for a student.

    Args:
        student: Student to report on
        output_path: Where to write the PDF

    Returns:
        Path to the generated PDF file
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    styles = _get_styles()

    elements = []
    elements.extend(_build_header_section(student, styles))
    elements.extend(_build_history_section(student.sessions, styles))
    if student.latest_session is not None:
        elements.extend(_build_breakdown_section(student.latest_session, styles))

    doc = SimpleDocTemplate(
        str(output_path),
        pagesize=letter,
        title=f"Report Card - {student.name}",
        rightMargin=0.75 * inch,
        leftMargin=0.75 * inch,
        topMargin=0.75 * inch,
        bottomMargin=0.75 * inch,
    )
    doc.build(elements)

    logger.info(f"Report card generated: {output_path}")
    return output_path
