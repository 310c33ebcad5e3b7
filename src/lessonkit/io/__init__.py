"""The file, CSV and command-line snippets taught in the lessons.

Every operation opens at most one file, inside a `with` block, so the
handle is released as soon as the block ends.
"""

from lessonkit.io.csv_io import EXPECTED_HEADER, Person, read_people, read_rows, write_people
from lessonkit.io.files import (
    append_line,
    count_lines,
    read_lines,
    read_text,
    write_lines,
    write_text,
)

__all__ = [
    "EXPECTED_HEADER",
    "Person",
    "append_line",
    "count_lines",
    "read_lines",
    "read_people",
    "read_rows",
    "read_text",
    "write_lines",
    "write_people",
    "write_text",
]
