"""Check command: content-integrity checks for lessons."""

import json
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from lessonkit.cli.commands.shared import current_config, load_lessons
from lessonkit.core.checks import CheckReport, check_lesson
from lessonkit.core.links import LinkChecker, check_local_links, link_issues

logger = logging.getLogger(__name__)

SEVERITY_STYLES = {"error": "red", "warning": "yellow", "info": "cyan"}


def print_reports(reports: list[CheckReport], console: Console) -> None:
    for report in reports:
        console.print(f"[bold]{escape(report.lesson_path)}[/bold]", soft_wrap=True)
        if not report.issues:
            console.print("  no issues")
        for issue in report.issues:
            style = SEVERITY_STYLES.get(issue.severity, "")
            location = f"line {issue.line}" if issue.line is not None else "-"
            console.print(
                f"  {location:>9}  [{style}]{issue.severity:<7}[/{style}] "
                f"{issue.category}: {escape(issue.message)}",
                soft_wrap=True,
            )
        console.print()

    table = Table(title="Summary")
    table.add_column("Lesson")
    table.add_column("Errors", justify="right")
    table.add_column("Warnings", justify="right")
    table.add_column("Notes", justify="right")
    for report in reports:
        notes = len(report.issues) - len(report.errors) - len(report.warnings)
        table.add_row(
            escape(Path(report.lesson_path).name),
            str(len(report.errors)),
            str(len(report.warnings)),
            str(notes),
        )
    console.print(table)


@click.command()
@click.argument(
    "lessons",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format",
)
@click.option(
    "--online/--offline",
    default=False,
    help="Also validate external links over HTTP (default: offline).",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Fail on warnings as well as errors.",
)
def check(lessons: tuple[Path, ...], output_format: str, online: bool, strict: bool):
    """Check lessons for content problems.

    Verifies that every quiz has an answer matching one of its options,
    that code snippets are complete and parse, that relative links and
    anchors resolve, and reports topics marked as planned but unwritten.

    Examples:

    \b
        lessonkit check lesson.md                # Check one lesson
        lessonkit check drafts/*.md --online     # Also check web links
        lessonkit check lesson.md --format=json  # Machine-readable output
    """
    config = current_config()
    parsed = load_lessons(lessons)

    reports = []
    for lesson in parsed:
        report = check_lesson(lesson, config.checks)
        report.extend(link_issues(check_local_links(lesson), lesson))
        reports.append(report)

    if online:
        with LinkChecker.from_config(config.links) as checker:
            for lesson, report in zip(parsed, reports):
                report.extend(link_issues(checker.check_links(lesson.links), lesson))

    if output_format == "json":
        click.echo(json.dumps([report.to_dict() for report in reports], indent=2))
    else:
        print_reports(reports, Console())

    failed = any(report.has_errors() or (strict and report.warnings) for report in reports)
    logger.info(f"Checked {len(reports)} lesson(s); failed: {failed}")
    raise SystemExit(1 if failed else 0)
