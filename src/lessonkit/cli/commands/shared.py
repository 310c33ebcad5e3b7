"""Shared utilities for CLI commands."""

import logging
import sys
from collections.abc import Iterable
from logging.handlers import RotatingFileHandler
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from lessonkit.core.lesson import Lesson
from lessonkit.errors import ConfigError, LessonError
from lessonkit.infrastructure.config import LessonKitConfig, get_config
from lessonkit.infrastructure.logging.log_paths import get_main_log_path as get_log_file_path

# Shared console for diagnostics - uses stderr to avoid mixing with JSON output
cli_console = Console(file=sys.stderr)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def setup_logging(log_level_name: str, console_logging: bool = False):
    """Configure logging for lessonkit.

    By default, logs go to a file in the system-appropriate log directory.
    Console logging can be enabled for debugging.

    Args:
        log_level_name: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        console_logging: If True, also log to console via Rich
    """
    log_level = logging.getLevelName(log_level_name.upper())
    log_file = get_log_file_path()

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    # File handler with rotation (10 MB max, keep 3 backups)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root_logger.addHandler(file_handler)

    if console_logging:
        console_handler = RichHandler(
            console=cli_console,
            rich_tracebacks=True,
            show_path=False,
        )
        console_handler.setLevel(log_level)
        root_logger.addHandler(console_handler)

    root_logger.setLevel(logging.DEBUG)  # Let handlers filter
    logging.getLogger("lessonkit").setLevel(log_level)


def load_config() -> LessonKitConfig:
    try:
        return get_config(reload=True)
    except ConfigError as e:
        raise click.ClickException(str(e)) from None


def current_config() -> LessonKitConfig:
    """Configuration loaded by the `lessonkit` group, or a fresh one."""
    ctx = click.get_current_context(silent=True)
    obj = ctx.find_root().obj if ctx is not None else None
    if isinstance(obj, dict) and "CONFIG" in obj:
        return obj["CONFIG"]
    return load_config()


def load_lessons(paths: Iterable[Path]) -> list[Lesson]:
    """Parse lesson files, turning load failures into CLI errors."""
    lessons = []
    for path in paths:
        try:
            lessons.append(Lesson.from_file(path))
        except LessonError as e:
            raise click.ClickException(str(e)) from None
    return lessons


def print_separator(section: str = "", char: str = "="):
    """Print a separator line using Rich console."""
    if section:
        cli_console.rule(f"[bold]{section}[/bold]", characters=char)
    else:
        cli_console.rule(characters=char)
