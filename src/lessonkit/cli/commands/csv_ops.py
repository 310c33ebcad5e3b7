"""CSV commands: show and transform people CSV files."""

import logging
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from lessonkit.cli.commands.shared import current_config
from lessonkit.errors import LessonKitError
from lessonkit.io.csv_io import read_people
from lessonkit.io.etl import run_etl

logger = logging.getLogger(__name__)


@click.group(name="csv")
def csv_group():
    """Work with name/age/city CSV files."""
    pass


@csv_group.command(name="show")
@click.argument("csv-file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--skip-invalid", is_flag=True, help="Skip rows that cannot be read.")
def csv_show(csv_file: Path, skip_invalid: bool):
    """Print the people in a CSV file as a table."""
    config = current_config().csv
    skipped: list = []
    try:
        people = list(
            read_people(
                csv_file,
                encoding=config.encoding,
                delimiter=config.delimiter,
                skip_invalid=skip_invalid,
                skipped=skipped,
            )
        )
    except LessonKitError as e:
        raise click.ClickException(str(e)) from None

    table = Table(title=escape(csv_file.name))
    table.add_column("Name")
    table.add_column("Age", justify="right")
    table.add_column("City")
    for person in people:
        table.add_row(escape(person.name), str(person.age), escape(person.city))

    console = Console()
    console.print(table)
    console.print(f"{len(people)} row(s)")
    if skipped:
        console.print(f"[yellow]Skipped {len(skipped)} invalid row(s)[/yellow]")


@csv_group.command(name="etl")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("target", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["csv", "json"], case_sensitive=False),
    default="csv",
    help="Output format",
)
@click.option("--min-age", type=click.IntRange(min=0), help="Keep only people at least this old.")
@click.option("--city", help="Keep only people from this city (case-insensitive).")
@click.option("--no-normalize", is_flag=True, help="Keep names and cities as written.")
@click.option("--skip-invalid", is_flag=True, help="Skip rows that cannot be read.")
def csv_etl(
    source: Path,
    target: Path,
    output_format: str,
    min_age: int | None,
    city: str | None,
    no_normalize: bool,
    skip_invalid: bool,
):
    """Extract people from SOURCE, clean and filter them, load them into TARGET.

    Examples:

    \b
        lessonkit csv etl people.csv adults.csv --min-age 18
        lessonkit csv etl people.csv berlin.json --city berlin --format json
    """
    config = current_config().csv
    try:
        result = run_etl(
            source,
            target,
            fmt=output_format.lower(),
            min_age=min_age,
            city=city,
            normalize=not no_normalize,
            skip_invalid=skip_invalid,
            encoding=config.encoding,
            delimiter=config.delimiter,
        )
    except LessonKitError as e:
        raise click.ClickException(str(e)) from None

    click.echo(str(result))
    click.echo(f"Written: {target}")
