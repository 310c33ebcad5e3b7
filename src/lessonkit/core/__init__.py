"""Lesson parsing, integrity checks and draft comparison."""

from lessonkit.core.checks import CheckReport, LessonIssue, check_lesson
from lessonkit.core.drafts import DraftComparison, choose_canonical, compare_drafts
from lessonkit.core.lesson import Lesson, parse_lesson

__all__ = [
    "CheckReport",
    "DraftComparison",
    "Lesson",
    "LessonIssue",
    "check_lesson",
    "choose_canonical",
    "compare_drafts",
    "parse_lesson",
]
