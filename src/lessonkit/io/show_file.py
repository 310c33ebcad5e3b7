"""Print every line of the file named on the command line.

Usage: python -m lessonkit.io.show_file FILENAME
"""

import sys
from pathlib import Path

from lessonkit.io.args import run_guarded
from lessonkit.io.files import read_lines


def show(path: Path) -> None:
    for line in read_lines(path):
        print(line)


def main(argv: list[str] | None = None) -> int:
    return run_guarded(sys.argv if argv is None else argv, show)


if __name__ == "__main__":
    sys.exit(main())
