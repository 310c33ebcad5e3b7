"""Tests for the compare, outline and quiz commands."""

import pytest
from click.testing import CliRunner

from conftest import SAMPLE_LESSON
from lessonkit.cli.main import cli


@pytest.fixture
def draft_paths(lesson_dir):
    sample = lesson_dir / "sample.md"
    sample.write_text(SAMPLE_LESSON, encoding="utf-8")
    variant = lesson_dir / "variant.md"
    variant.write_text(
        SAMPLE_LESSON.replace(
            "ETL pipelines read, clean and store data.",
            "An ETL pipeline extracts, transforms and loads data.",
        ),
        encoding="utf-8",
    )
    unrelated = lesson_dir / "lists.md"
    unrelated.write_text("# Lists\n\nLists hold items in order.\n", encoding="utf-8")
    return [sample, variant, unrelated]


class TestCompareCommand:
    def test_reports_near_duplicates_and_recommendation(self, draft_paths):
        result = CliRunner().invoke(cli, ["compare", *map(str, draft_paths)])

        assert result.exit_code == 0
        assert "Near-duplicate pairs (>= 80%): 1" in result.output
        assert "Recommended draft: variant.md" in result.output

    def test_near_duplicate_pairs_are_listed(self, draft_paths):
        result = CliRunner().invoke(cli, ["compare", *map(str, draft_paths)])

        pair_lines = [line for line in result.output.splitlines() if " ~ " in line]
        assert len(pair_lines) == 1
        assert "sample.md ~ variant.md" in pair_lines[0]
        assert "lists.md" not in pair_lines[0]

    def test_threshold_option(self, draft_paths):
        result = CliRunner().invoke(
            cli, ["compare", "--threshold", "0.99", *map(str, draft_paths)]
        )

        assert result.exit_code == 0
        assert "Near-duplicate pairs (>= 99%): 0" in result.output

    def test_threshold_from_configuration(self, draft_paths, monkeypatch):
        monkeypatch.setenv("LESSONKIT_DRAFTS__SIMILARITY_THRESHOLD", "0.5")

        result = CliRunner().invoke(cli, ["compare", *map(str, draft_paths)])

        assert "Near-duplicate pairs (>= 50%): 1" in result.output

    def test_diff(self, draft_paths):
        result = CliRunner().invoke(cli, ["compare", "--diff", *map(str, draft_paths[:2])])

        assert result.exit_code == 0
        assert "-ETL pipelines read, clean and store data." in result.output
        assert "+An ETL pipeline extracts, transforms and loads data." in result.output

    def test_needs_two_drafts(self, draft_paths):
        result = CliRunner().invoke(cli, ["compare", str(draft_paths[0])])

        assert result.exit_code == 2
        assert "Need at least two drafts" in result.output


class TestOutlineCommand:
    def test_prints_outline(self, sample_lesson_path):
        result = CliRunner().invoke(cli, ["outline", str(sample_lesson_path)])

        assert result.exit_code == 0
        assert result.output.startswith("# File and CSV Input/Output\n")
        assert "- Extract, Transform, Load" in result.output

    def test_output_file(self, sample_lesson_path, tmp_path):
        target = tmp_path / "out" / "outline.md"

        result = CliRunner().invoke(cli, ["outline", str(sample_lesson_path), "-o", str(target)])

        assert result.exit_code == 0
        assert f"Written: {target}" in result.output
        assert "Quiz questions: 1" in target.read_text(encoding="utf-8")

    def test_output_dir(self, sample_lesson_path, tmp_path):
        result = CliRunner().invoke(
            cli, ["outline", str(sample_lesson_path), "-d", str(tmp_path / "docs")]
        )

        assert result.exit_code == 0
        assert (tmp_path / "docs" / "File and CSV Input_Output-outline.md").exists()

    def test_unwritable_output_is_reported(self, sample_lesson_path, tmp_path):
        blocker = tmp_path / "afile"
        blocker.write_text("", encoding="utf-8")

        result = CliRunner().invoke(
            cli, ["outline", str(sample_lesson_path), "-o", str(blocker / "out.md")]
        )

        assert result.exit_code == 1
        assert "Cannot write" in result.output
        assert result.exception is None or isinstance(result.exception, SystemExit)

    def test_output_options_are_exclusive(self, sample_lesson_path, tmp_path):
        result = CliRunner().invoke(
            cli,
            ["outline", str(sample_lesson_path), "-o", "a.md", "-d", str(tmp_path)],
        )

        assert result.exit_code == 2
        assert "mutually exclusive" in result.output


class TestQuizCommand:
    def test_questions_without_answers(self, sample_lesson_path):
        result = CliRunner().invoke(cli, ["quiz", str(sample_lesson_path)])

        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[:4] == [
            "1. What does `sys.argv[1]` contain?",
            "    A) The script name",
            "    B) The first argument after the script name",
            "    C) The number of arguments",
        ]
        assert "Answer" not in result.output

    def test_reveal(self, sample_lesson_path):
        result = CliRunner().invoke(cli, ["quiz", "--reveal", str(sample_lesson_path)])

        assert "  * B) The first argument after the script name" in result.output
        assert "  Answer: B" in result.output

    def test_reveal_unmarked_answer(self, broken_lesson_path):
        result = CliRunner().invoke(cli, ["quiz", "--reveal", str(broken_lesson_path)])

        assert result.exit_code == 0
        assert "3. Which module reads CSV files?" in result.output
        assert "  Answer: (not marked)" in result.output

    def test_lesson_without_quiz(self, tmp_path):
        path = tmp_path / "plain.md"
        path.write_text("# Plain\n\nNo questions here.\n", encoding="utf-8")

        result = CliRunner().invoke(cli, ["quiz", str(path)])

        assert result.output == "plain.md has no quiz questions.\n"
