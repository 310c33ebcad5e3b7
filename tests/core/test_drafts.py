"""Tests for draft comparison."""

import pytest

from conftest import BROKEN_LESSON, SAMPLE_LESSON
from lessonkit.core.checks import check_lesson
from lessonkit.core.drafts import (
    choose_canonical,
    compare_drafts,
    compare_pair,
    near_duplicates,
    normalized_lines,
    unified_diff,
)
from lessonkit.core.lesson import parse_lesson

VARIANT_LESSON = SAMPLE_LESSON.replace(
    "ETL pipelines read, clean and store data.",
    "An ETL pipeline extracts, transforms and loads data.",
)
UNRELATED_LESSON = "# Lists\n\nLists hold items in order.\n\n## Slicing\n\nUse a[1:3].\n"


@pytest.fixture
def drafts():
    return [
        parse_lesson(SAMPLE_LESSON),
        parse_lesson(VARIANT_LESSON),
        parse_lesson(UNRELATED_LESSON),
    ]


class TestCompare:
    def test_identical_drafts(self):
        comparison = compare_pair(parse_lesson(SAMPLE_LESSON), parse_lesson(SAMPLE_LESSON))
        assert comparison.similarity == 1.0
        assert comparison.added == []
        assert comparison.removed == []

    def test_changed_line_is_reported(self, drafts):
        comparison = compare_pair(drafts[0], drafts[1])

        assert 0.9 < comparison.similarity < 1.0
        assert comparison.removed == ["ETL pipelines read, clean and store data."]
        assert comparison.added == ["An ETL pipeline extracts, transforms and loads data."]

    def test_code_is_ignored(self):
        changed_code = SAMPLE_LESSON.replace("print(line)", "print(line.strip())")
        comparison = compare_pair(parse_lesson(SAMPLE_LESSON), parse_lesson(changed_code))
        assert comparison.similarity == 1.0

    def test_pairs_are_sorted_by_similarity(self, drafts):
        comparisons = compare_drafts(drafts)

        assert len(comparisons) == 3
        similarities = [c.similarity for c in comparisons]
        assert similarities == sorted(similarities, reverse=True)
        assert comparisons[0].left is drafts[0]
        assert comparisons[0].right is drafts[1]

    def test_near_duplicates(self, drafts):
        comparisons = compare_drafts(drafts)

        pairs = near_duplicates(comparisons, threshold=0.8)

        assert len(pairs) == 1
        assert pairs[0].right is drafts[1]

    def test_normalized_lines_drop_blanks(self):
        lesson = parse_lesson("# Title   \n\n\nText\n")
        assert normalized_lines(lesson) == ["# Title", "Text"]


class TestUnifiedDiff:
    def test_diff_shows_changed_lines(self, drafts):
        diff = unified_diff(drafts[0], drafts[1])

        assert "-ETL pipelines read, clean and store data." in diff
        assert "+An ETL pipeline extracts, transforms and loads data." in diff

    def test_identical_drafts_have_no_diff(self):
        assert unified_diff(parse_lesson(SAMPLE_LESSON), parse_lesson(SAMPLE_LESSON)) == ""


class TestChooseCanonical:
    def test_fewest_errors_wins(self):
        lessons = [parse_lesson(BROKEN_LESSON), parse_lesson(SAMPLE_LESSON)]
        reports = [check_lesson(lesson) for lesson in lessons]

        assert choose_canonical(lessons, reports) is lessons[1]

    def test_more_snippets_break_ties(self):
        without_code = parse_lesson("# Title\n\nProse only, quite a lot of it.\n")
        with_code = parse_lesson("# Title\n\n```python\nx = 1\n```\n")
        lessons = [without_code, with_code]
        reports = [check_lesson(lesson) for lesson in lessons]

        assert choose_canonical(lessons, reports) is with_code

    def test_earliest_draft_wins_full_tie(self):
        lessons = [parse_lesson(SAMPLE_LESSON), parse_lesson(SAMPLE_LESSON)]
        reports = [check_lesson(lesson) for lesson in lessons]

        assert choose_canonical(lessons, reports) is lessons[0]

    def test_requires_drafts(self):
        with pytest.raises(ValueError, match="No drafts"):
            choose_canonical([], [])

    def test_requires_matching_reports(self):
        with pytest.raises(ValueError, match="check report"):
            choose_canonical([parse_lesson(SAMPLE_LESSON)], [])
