"""Console script for quran_tracker."""

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config.loader import ConfigLoader
from .config.models import TrackerConfig
from .exceptions import ConfigError, StudentNotFoundError
from .output.parent_email import compose_parent_email
from .output.report_card import default_report_path, format_average, generate_report_card
from .records.models import SessionDraft, StudentRecord
from .rubrics.models import ReviewLevel
from .scoring.engine import parse_points, select_rubric
from .scoring.session import ScoringSession
from .storage.store import JsonStudentStore
from .tracker import Tracker
from .utils.logging import get_logger, level_for, setup_logging

logger = get_logger(__name__)

app = typer.Typer(help="Track Quran recitation progress.", no_args_is_help=True)
console = Console()
err_console = Console(stderr=True)


@dataclass
class AppContext:
    config: TrackerConfig
    tracker: Tracker


def _notify(message: str) -> None:
    err_console.print(f"[bold red]{message}[/bold red]")


def _state(ctx: typer.Context) -> AppContext:
    return ctx.obj


def _get_student(ctx: typer.Context, student_id: int) -> StudentRecord:
    try:
        return _state(ctx).tracker.get_student(student_id)
    except StudentNotFoundError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)


def _parse_level(value: str) -> ReviewLevel:
    try:
        return ReviewLevel.parse(value)
    except ValueError as e:
        raise typer.BadParameter(str(e))


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"quran-tracker {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    data_file: Optional[Path] = typer.Option(None, "--data-file", "-d", help="Student data JSON file"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Config YAML file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write logs to this file"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit"
    ),
):
    """Quran recitation progress tracker."""
    try:
        config = ConfigLoader(config_file).load()
    except ConfigError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    if data_file:
        config.data_file = data_file
    setup_logging(level=level_for(verbose), log_file=log_file or config.log_file)

    tracker = Tracker.open(JsonStudentStore(config.data_file), notify=_notify)
    ctx.obj = AppContext(config=config, tracker=tracker)


@app.command("add-student")
def add_student(ctx: typer.Context, name: str = typer.Argument(..., help="Student name")):
    """Add a student to the roster."""
    student = _state(ctx).tracker.add_student(name)
    if student is None:
        console.print("[yellow]No student added: the name is blank.[/yellow]")
        return
    console.print(f"Added [bold]{escape(student.name)}[/bold] (id {student.id})")


@app.command("list")
def list_students(ctx: typer.Context):
    """List all students with their session count and average."""
    students = _state(ctx).tracker.students
    if not students:
        console.print("No students yet. Add one to get started!")
        return

    table = Table(title="Students")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Sessions", justify="right")
    table.add_column("Average", justify="right", style="green")
    for student in students:
        table.add_row(
            str(student.id),
            escape(student.name),
            str(student.session_count),
            f"{student.average_score:.0f}%",
        )
    console.print(table)


@app.command()
def show(ctx: typer.Context, student_id: int = typer.Argument(..., help="Student id")):
    """Show a student's average and session history, newest first."""
    student = _get_student(ctx, student_id)
    console.print(f"[bold]{escape(student.name)}[/bold]  {student.session_count} sessions")
    console.print(f"Average: [bold green]{format_average(student)}[/bold green]")

    if not student.sessions:
        console.print("No sessions recorded yet")
        return

    table = Table(title="Session History")
    table.add_column("Date")
    table.add_column("Surah")
    table.add_column("Ayahs")
    table.add_column("Level")
    table.add_column("Score", justify="right", style="green")
    table.add_column("Notes", overflow="fold")
    for session in reversed(student.sessions):
        table.add_row(
            escape(session.date),
            escape(session.surah),
            escape(session.ayah_range),
            session.review_level.value,
            f"{session.total_score}%",
            escape(session.notes),
        )
    console.print(table)


@app.command()
def rubric(level: str = typer.Option("basic", "--level", "-l", help="basic or advanced")):
    """Print a rubric with its point values and hints."""
    definition = select_rubric(_parse_level(level))

    table = Table(title=f"{definition.name} ({definition.total_points} points)")
    table.add_column("Category / Sub-criterion")
    table.add_column("Points", justify="right")
    table.add_column("Hint", style="italic dim")
    for category in definition.categories.values():
        table.add_row(f"[bold]{category.title}[/bold]", f"[bold]{category.max_points}[/bold]", "")
        for sub in category.subcriteria:
            table.add_row(f"  {sub.name}", str(sub.points), sub.hint)
    console.print(table)


@app.command()
def score(
    ctx: typer.Context,
    student_id: int = typer.Argument(..., help="Student id"),
    level: Optional[str] = typer.Option(None, "--level", "-l", help="basic or advanced"),
    session_date: Optional[str] = typer.Option(None, "--date", help="Session date (YYYY-MM-DD)"),
    surah: Optional[str] = typer.Option(None, "--surah", help="Surah recited"),
    ayah_range: Optional[str] = typer.Option(None, "--ayah-range", help="Ayah range, e.g. 1-7"),
    notes: Optional[str] = typer.Option(None, "--notes", help="Strengths, areas for improvement"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Save without asking for confirmation"),
):
    """Score a new recitation session for a student."""
    state = _state(ctx)
    student = _get_student(ctx, student_id)
    session = ScoringSession(_parse_level(level) if level else state.config.default_level)

    console.print(f"Score: [bold]{escape(student.name)}[/bold] ({session.rubric.name})")
    session.update_fields(
        date=session_date or typer.prompt("Date", default=date.today().isoformat()),
        surah=surah if surah is not None else typer.prompt("Surah", default=""),
        ayah_range=ayah_range if ayah_range is not None else typer.prompt("Ayah range", default=""),
    )

    for key, category in session.rubric.categories.items():
        console.print(f"\n[bold]{category.title}[/bold] (max {category.max_points})")
        for index, sub in enumerate(category.subcriteria):
            raw = typer.prompt(f"  {sub.name} [{sub.hint}] /{sub.points}", default="0")
            kept = session.set_score(key, index, raw)
            if kept != parse_points(raw):
                console.print(f"    [yellow]kept {kept}[/yellow]")
        console.print(f"  Subtotal: {session.subtotal(key)}/{category.max_points}")

    session.update_fields(notes=notes if notes is not None else typer.prompt("Notes", default=""))
    console.print(f"\nTotal Score: [bold green]{session.total}/100[/bold green]")

    if not yes and not typer.confirm("Save session?", default=True):
        logger.info(f"Discarded unsaved session for student {student.id}")
        console.print("Session discarded")
        return

    updated = state.tracker.record_session(student.id, session.finalize())
    logger.info(f"Recorded {session.level.value} session for student {student.id}: {session.record.total_score}/100")
    console.print(
        f"Saved. {escape(updated.name)}: {updated.session_count} sessions, average {format_average(updated)}"
    )


@app.command()
def report(
    ctx: typer.Context,
    student_id: int = typer.Argument(..., help="Student id"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="PDF path"),
):
    """Print a student's report card to PDF."""
    state = _state(ctx)
    student = _get_student(ctx, student_id)
    output_path = output or default_report_path(student, state.config.reports_dir)
    console.print(f"Generating report for {escape(student.name)}...")
    generate_report_card(student, output_path)
    logger.info(f"Report card for student {student.id} written to {output_path}")
    console.print(f"Report card written to {escape(str(output_path))}")


@app.command()
def email(
    ctx: typer.Context,
    student_id: int = typer.Argument(..., help="Student id"),
    to: str = typer.Option("", "--to", help="Parent e-mail address"),
    open_client: bool = typer.Option(False, "--open", help="Open the message in the mail client"),
):
    """Compose a progress e-mail to a student's parent."""
    state = _state(ctx)
    student = _get_student(ctx, student_id)
    message = compose_parent_email(student, teacher_name=state.config.teacher_name, to=to)

    if open_client:
        console.print(f"Opening email client for {escape(student.name)}...")
        typer.launch(message.mailto_url())
        logger.info(f"Opened parent e-mail for student {student.id}")
        return

    console.print(f"To: {escape(message.to) or '(not set)'}")
    console.print(f"Subject: {escape(message.subject)}\n")
    console.print(message.body, markup=False, highlight=False)


if __name__ == "__main__":
    app()
