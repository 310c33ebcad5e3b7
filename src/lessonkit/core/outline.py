"""Markdown outlines of lessons."""

from lessonkit.core.lesson import Lesson
from lessonkit.core.text_utils import sanitize_file_name, strip_markup


def generate_outline(lesson: Lesson) -> str:
    """Generate a Markdown outline for a lesson.

    The lesson title becomes the H1; every other heading becomes a bullet,
    indented by its level. A short summary of snippets and quizzes follows.
    """
    lines = [f"# {strip_markup(lesson.title)}", ""]

    title_skipped = False
    for heading in lesson.headings:
        if heading.level == 1 and not title_skipped and heading.text == lesson.title:
            title_skipped = True
            continue
        indent = "  " * max(heading.level - 2, 0)
        lines.append(f"{indent}- {strip_markup(heading.text)}")

    lines.append("")
    lines.append(f"Code snippets: {len(lesson.snippets)}")
    lines.append(f"Quiz questions: {len(lesson.quizzes)}")
    if lesson.planned_topics:
        lines.append(f"Planned topics: {len(lesson.planned_topics)}")
    lines.append("")

    return "\n".join(lines)


def get_output_filename(lesson: Lesson) -> str:
    return f"{sanitize_file_name(strip_markup(lesson.title))}-outline.md"
