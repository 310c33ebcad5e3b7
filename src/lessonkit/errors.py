"""Exception hierarchy for lessonkit.

Content problems in a lesson (a wrong quiz answer, a broken link) are not
exceptions; they are reported as `LessonIssue` objects by the checks. The
exceptions below signal that an operation could not be carried out at all.
"""


class LessonKitError(Exception):
    """Base class for all lessonkit errors."""


class LessonError(LessonKitError):
    """A lesson document could not be loaded."""


class LessonIOError(LessonKitError):
    """Reading or writing a file failed."""

    def __init__(self, path, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")


class LessonFileNotFoundError(LessonIOError):
    """A file named by the user does not exist."""

    def __init__(self, path):
        super().__init__(path, "file not found")


class CsvFormatError(LessonKitError):
    """A CSV file does not have the expected layout."""

    def __init__(self, message: str, row: int | None = None):
        self.row = row
        if row is not None:
            message = f"row {row}: {message}"
        super().__init__(message)


class MissingArgumentError(LessonKitError):
    """A required command-line argument was not supplied."""


class ConfigError(LessonKitError):
    """Configuration is invalid."""
