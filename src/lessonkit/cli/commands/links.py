"""Links command: validate every link in lessons."""

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from lessonkit.cli.commands.shared import current_config, load_lessons
from lessonkit.core.links import LinkChecker, check_local_links


@click.command()
@click.argument(
    "lessons",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option("--timeout", type=float, help="Timeout per request in seconds.")
@click.option("--workers", type=click.IntRange(1, 64), help="Links checked in parallel.")
@click.option("--offline", is_flag=True, help="Only check relative links and anchors.")
def links(lessons: tuple[Path, ...], timeout: float | None, workers: int | None, offline: bool):
    """Validate external links, relative links and anchors.

    Each distinct URL is requested once (HEAD, falling back to GET).
    Exits with status 1 if any link is broken.
    """
    config = current_config().links
    if timeout is not None:
        config = config.model_copy(update={"timeout": timeout})
    if workers is not None:
        config = config.model_copy(update={"max_workers": workers})

    parsed = load_lessons(lessons)
    console = Console()
    broken = 0
    checked = 0
    with LinkChecker.from_config(config) as checker:
        results = []
        for lesson in parsed:
            statuses = check_local_links(lesson)
            if not offline:
                statuses.extend(checker.check_links(lesson.links))
            results.append((lesson, statuses))

    for lesson, statuses in results:
        console.print(
            f"[bold]{escape(lesson.name)}[/bold]: {len(statuses)} link(s)", soft_wrap=True
        )
        for status in statuses:
            checked += 1
            if status.ok:
                continue
            broken += 1
            console.print(
                f"  [red]✗[/red] line {status.line}: "
                f"{escape(status.url)} ({escape(status.describe())})",
                soft_wrap=True,
            )

    if broken:
        console.print(f"[red]{broken} of {checked} link(s) broken[/red]")
        raise SystemExit(1)
    console.print(f"[green]✓ All {checked} link(s) are healthy[/green]")
