"""Outline command for generating lesson outlines in Markdown format."""

from pathlib import Path

import click

from lessonkit.cli.commands.shared import load_lessons
from lessonkit.core.outline import generate_outline, get_output_filename


@click.command()
@click.argument(
    "lesson-file",
    type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o",
    "--output",
    "output_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write output to FILE (mutually exclusive with --output-dir).",
)
@click.option(
    "-d",
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Write to DIR with a filename derived from the lesson title.",
)
def outline(lesson_file: Path, output_file: Path | None, output_dir: Path | None):
    """Generate a Markdown outline of a lesson.

    Examples:

    \b
        lessonkit outline lesson.md              # Print outline to stdout
        lessonkit outline lesson.md -o out.md    # Write outline to file
        lessonkit outline lesson.md -d ./docs    # Write to directory
    """
    if output_file and output_dir:
        raise click.UsageError("--output and --output-dir are mutually exclusive.")

    (lesson,) = load_lessons([lesson_file])
    content = generate_outline(lesson)

    if output_dir:
        output_file = output_dir / get_output_filename(lesson)

    if output_file:
        try:
            output_file.parent.mkdir(parents=True, exist_ok=True)
            output_file.write_text(content, encoding="utf-8")
        except OSError as e:
            raise click.ClickException(f"Cannot write {output_file}: {e}") from None
        click.echo(f"Written: {output_file}")
    else:
        click.echo(content)
