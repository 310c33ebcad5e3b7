"""
lessonkit: tooling for course lessons on file and CSV input/output.

## Modules:

- `lessonkit.core`: Lesson parsing, integrity checks, draft comparison.
- `lessonkit.io`: The file, CSV and command-line snippets taught in the lessons.
- `lessonkit.infrastructure`: Configuration and logging paths.
- `lessonkit.cli`: The command line interface.
"""

from lessonkit.__version__ import __version__

__all__ = ["__version__"]
