"""Reading a file name from the command line, with the usual guards.

`argv` is the argument vector as in `sys.argv`: element 0 is the script
name, element 1 is the first argument following it.
"""

import logging
import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import TextIO

from lessonkit.errors import LessonFileNotFoundError, LessonKitError, MissingArgumentError

logger = logging.getLogger(__name__)


def script_name(argv: Sequence[str]) -> str:
    return Path(argv[0]).name if argv else "script"


def first_argument(argv: Sequence[str]) -> str:
    """Return the first argument after the script name.

    Raises:
        MissingArgumentError: If no argument was given.
    """
    if len(argv) < 2:
        raise MissingArgumentError("expected a file name argument")
    return argv[1]


def require_existing_file(name: str) -> Path:
    """Return `name` as a path, raising if it is not an existing file."""
    path = Path(name)
    if not path.is_file():
        raise LessonFileNotFoundError(path)
    return path


def run_guarded(
    argv: Sequence[str],
    action: Callable[[Path], None],
    stderr: TextIO | None = None,
) -> int:
    """Run `action` on the file named by the first argument.

    Returns the process exit status: 0 on success, 1 if the argument is
    missing, the file does not exist, or the action fails with a
    `LessonKitError`. A message explaining the failure goes to `stderr`.
    """
    stderr = stderr or sys.stderr
    try:
        path = require_existing_file(first_argument(argv))
        action(path)
    except MissingArgumentError:
        print(f"Usage: {script_name(argv)} FILENAME", file=stderr)
        return 1
    except LessonFileNotFoundError as e:
        print(f"File not found: {e.path}", file=stderr)
        return 1
    except LessonKitError as e:
        logger.debug(f"{script_name(argv)} failed: {e}")
        print(f"Error: {e}", file=stderr)
        return 1
    return 0
