"""Command-line interface for lessonkit.

Commands are organized into separate modules under lessonkit.cli.commands.
"""

import click

from lessonkit.__version__ import __version__
from lessonkit.cli.commands.shared import LOG_LEVELS, load_config, setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="lessonkit")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Logging level (default: from configuration, INFO)",
)
@click.option(
    "--verbose-logging",
    is_flag=True,
    help="Also write log messages to the console",
)
@click.pass_context
def cli(ctx, log_level, verbose_logging):
    """lessonkit - Tools for file and CSV input/output lessons.

    Check lesson documents for broken quizzes and links, compare drafts,
    and run the lesson's CSV examples.
    """
    ctx.ensure_object(dict)
    config = load_config()
    setup_logging(log_level or config.logging.log_level, console_logging=verbose_logging)
    ctx.obj["CONFIG"] = config


# These imports must come after cli is defined, hence noqa: E402
from lessonkit.cli.commands.check import check  # noqa: E402
from lessonkit.cli.commands.compare import compare  # noqa: E402
from lessonkit.cli.commands.config import config  # noqa: E402
from lessonkit.cli.commands.csv_ops import csv_group  # noqa: E402
from lessonkit.cli.commands.links import links  # noqa: E402
from lessonkit.cli.commands.outline import outline  # noqa: E402
from lessonkit.cli.commands.quiz import quiz  # noqa: E402

cli.add_command(check)
cli.add_command(links)
cli.add_command(compare)
cli.add_command(outline)
cli.add_command(quiz)

cli.add_command(config)
cli.add_command(csv_group)


if __name__ == "__main__":
    cli()
