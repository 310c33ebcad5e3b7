"""Reading and writing text files."""

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path

from lessonkit.errors import LessonFileNotFoundError, LessonIOError

logger = logging.getLogger(__name__)


@contextmanager
def translate_os_errors(path: Path):
    """Re-raise OS errors for `path` as lessonkit errors."""
    try:
        yield
    except FileNotFoundError:
        raise LessonFileNotFoundError(path) from None
    except UnicodeDecodeError as e:
        raise LessonIOError(path, f"cannot decode: {e.reason}") from e
    except OSError as e:
        raise LessonIOError(path, e.strerror or str(e)) from e


def read_lines(path: Path | str, encoding: str = "utf-8") -> Iterator[str]:
    """Yield the lines of a file without their line endings.

    The file stays open only while the iterator is being consumed.
    """
    path = Path(path)
    with translate_os_errors(path), open(path, encoding=encoding) as f:
        for line in f:
            yield line.rstrip("\r\n")


def read_text(path: Path | str, encoding: str = "utf-8") -> str:
    path = Path(path)
    with translate_os_errors(path), open(path, encoding=encoding) as f:
        return f.read()


def write_text(path: Path | str, text: str, encoding: str = "utf-8") -> None:
    path = Path(path)
    with translate_os_errors(path), open(path, "w", encoding=encoding) as f:
        f.write(text)
    logger.debug(f"Wrote {len(text)} characters to {path}")


def write_lines(path: Path | str, lines: Iterable[str], encoding: str = "utf-8") -> int:
    """Write each line followed by a newline; return the number of lines."""
    path = Path(path)
    count = 0
    with translate_os_errors(path), open(path, "w", encoding=encoding) as f:
        for line in lines:
            f.write(f"{line}\n")
            count += 1
    logger.debug(f"Wrote {count} lines to {path}")
    return count


def append_line(path: Path | str, line: str, encoding: str = "utf-8") -> None:
    path = Path(path)
    with translate_os_errors(path), open(path, "a", encoding=encoding) as f:
        f.write(f"{line}\n")


def count_lines(path: Path | str, encoding: str = "utf-8") -> int:
    return sum(1 for _ in read_lines(path, encoding=encoding))
