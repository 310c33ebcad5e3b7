"""Comparison of near-duplicate lesson drafts.

A lesson often exists in several slightly different drafts. This module
measures how similar they are, shows what differs and recommends the draft
to keep.
"""

import difflib
import logging
from dataclasses import dataclass, field
from itertools import combinations

from lessonkit.core.checks import CheckReport
from lessonkit.core.lesson import Lesson

logger = logging.getLogger(__name__)


@dataclass
class DraftComparison:
    """Similarity of two drafts.

    Attributes:
        left: First draft
        right: Second draft
        similarity: Ratio in [0, 1] of matching prose lines
        added: Lines present only in `right`
        removed: Lines present only in `left`
    """

    left: Lesson
    right: Lesson
    similarity: float
    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)

    @property
    def names(self) -> tuple[str, str]:
        return self.left.name, self.right.name


def normalized_lines(lesson: Lesson) -> list[str]:
    """Prose lines with trailing whitespace stripped and blank lines dropped."""
    return [line.rstrip() for line in lesson.plain_prose().splitlines() if line.strip()]


def compare_pair(left: Lesson, right: Lesson) -> DraftComparison:
    left_lines = normalized_lines(left)
    right_lines = normalized_lines(right)
    matcher = difflib.SequenceMatcher(a=left_lines, b=right_lines, autojunk=False)

    added, removed = [], []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag in ("replace", "delete"):
            removed.extend(left_lines[i1:i2])
        if tag in ("replace", "insert"):
            added.extend(right_lines[j1:j2])

    return DraftComparison(
        left=left, right=right, similarity=matcher.ratio(), added=added, removed=removed
    )


def compare_drafts(lessons: list[Lesson]) -> list[DraftComparison]:
    """Compare every pair of drafts, most similar pair first."""
    comparisons = [compare_pair(left, right) for left, right in combinations(lessons, 2)]
    comparisons.sort(key=lambda c: c.similarity, reverse=True)
    for comparison in comparisons:
        logger.debug(
            f"Similarity {comparison.names[0]} / {comparison.names[1]}: "
            f"{comparison.similarity:.3f}"
        )
    return comparisons


def near_duplicates(
    comparisons: list[DraftComparison], threshold: float = 0.8
) -> list[DraftComparison]:
    return [c for c in comparisons if c.similarity >= threshold]


def unified_diff(left: Lesson, right: Lesson, context: int = 3) -> str:
    """Unified diff of the full text of two drafts."""
    diff = difflib.unified_diff(
        left.text.splitlines(),
        right.text.splitlines(),
        fromfile=left.name,
        tofile=right.name,
        n=context,
        lineterm="",
    )
    return "\n".join(diff)


def choose_canonical(lessons: list[Lesson], reports: list[CheckReport]) -> Lesson:
    """Recommend the draft to keep.

    Preference: fewest errors, then fewest warnings, then most code snippets,
    then the longest text. Remaining ties go to the earliest draft.

    Args:
        lessons: The drafts
        reports: Check reports, in the same order as `lessons`

    Raises:
        ValueError: If no drafts are given or the lists differ in length.
    """
    if not lessons:
        raise ValueError("No drafts to choose from")
    if len(lessons) != len(reports):
        raise ValueError("Every draft needs a check report")

    def rank(index: int):
        lesson, report = lessons[index], reports[index]
        return (
            len(report.errors),
            len(report.warnings),
            -len(lesson.snippets),
            -len(lesson.text),
            index,
        )

    best = min(range(len(lessons)), key=rank)
    logger.info(f"Canonical draft: {lessons[best].name}")
    return lessons[best]
