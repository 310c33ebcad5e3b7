"""Compare command: find near-duplicate lesson drafts."""

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from lessonkit.cli.commands.shared import current_config, load_lessons, print_separator
from lessonkit.core.checks import check_lesson
from lessonkit.core.drafts import choose_canonical, compare_drafts, near_duplicates, unified_diff


@click.command()
@click.argument(
    "drafts",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--threshold",
    type=click.FloatRange(0.0, 1.0),
    help="Similarity at or above which drafts count as near-duplicates.",
)
@click.option("--diff", "show_diff", is_flag=True, help="Show the diff of the most similar pair.")
def compare(drafts: tuple[Path, ...], threshold: float | None, show_diff: bool):
    """Compare drafts of a lesson and recommend one to keep.

    Examples:

    \b
        lessonkit compare draft1.md draft2.md draft3.md
        lessonkit compare draft*.md --diff
    """
    if len(drafts) < 2:
        raise click.UsageError("Need at least two drafts to compare.")

    config = current_config()
    if threshold is None:
        threshold = config.drafts.similarity_threshold

    lessons = load_lessons(drafts)
    comparisons = compare_drafts(lessons)

    console = Console()
    table = Table(title="Draft similarity")
    table.add_column("Draft")
    table.add_column("Draft")
    table.add_column("Similarity", justify="right")
    table.add_column("+ lines", justify="right")
    table.add_column("- lines", justify="right")
    for comparison in comparisons:
        left, right = comparison.names
        table.add_row(
            escape(left),
            escape(right),
            f"{comparison.similarity:.0%}",
            str(len(comparison.added)),
            str(len(comparison.removed)),
        )
    console.print(table)

    duplicates = near_duplicates(comparisons, threshold)
    console.print(f"Near-duplicate pairs (>= {threshold:.0%}): {len(duplicates)}")
    for duplicate in duplicates:
        left, right = duplicate.names
        console.print(
            f"  {escape(left)} ~ {escape(right)}: {duplicate.similarity:.0%}", soft_wrap=True
        )

    reports = [check_lesson(lesson, config.checks) for lesson in lessons]
    canonical = choose_canonical(lessons, reports)
    console.print(f"Recommended draft: {escape(canonical.name)}", soft_wrap=True)

    if show_diff:
        best = comparisons[0]
        print_separator(f"{best.names[0]} → {best.names[1]}", char="-")
        click.echo(unified_diff(best.left, best.right))
