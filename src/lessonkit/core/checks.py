"""Content-integrity checks for lessons.

Each check is a function taking a parsed `Lesson` and the check
configuration and yielding `LessonIssue` objects. Checks register
themselves with the `lesson_check` decorator and run in registration order.
"""

import ast
import json
import logging
import re
from collections import Counter
from collections.abc import Callable, Iterable
from dataclasses import asdict, dataclass, field
from typing import Literal

from lessonkit.core.lesson import Lesson
from lessonkit.infrastructure.config import ChecksConfig

logger = logging.getLogger(__name__)

Severity = Literal["error", "warning", "info"]


@dataclass
class LessonIssue:
    """A problem found in a lesson.

    Attributes:
        category: Issue category (e.g., 'quiz_answer_mismatch', 'broken_link')
        severity: How serious the issue is
        message: Description of the issue
        file_path: Lesson the issue was found in
        line: 1-based line number, if the issue has a location
        guidance: Suggestion for how to fix the issue
    """

    category: str
    severity: Severity
    message: str
    file_path: str = ""
    line: int | None = None
    guidance: str = ""

    def __str__(self) -> str:
        location = self.file_path or "<lesson>"
        if self.line is not None:
            location = f"{location}:{self.line}"
        parts = [f"[{self.severity.title()}] {self.category} ({location})"]
        parts.append(f"  {self.message}")
        if self.guidance:
            parts.append(f"  Action: {self.guidance}")
        return "\n".join(parts)

    def to_json(self) -> str:
        return json.dumps(asdict(self))

    @classmethod
    def from_json(cls, json_str: str) -> "LessonIssue":
        return cls(**json.loads(json_str))


@dataclass
class CheckReport:
    """All issues found in one lesson."""

    lesson_path: str
    issues: list[LessonIssue] = field(default_factory=list)

    @property
    def errors(self) -> list[LessonIssue]:
        return [issue for issue in self.issues if issue.severity == "error"]

    @property
    def warnings(self) -> list[LessonIssue]:
        return [issue for issue in self.issues if issue.severity == "warning"]

    def has_errors(self) -> bool:
        return bool(self.errors)

    def extend(self, issues: Iterable[LessonIssue]) -> None:
        self.issues.extend(issues)
        self.issues.sort(key=lambda issue: (issue.line is None, issue.line or 0))

    def summary(self) -> str:
        status = "✗" if self.has_errors() else "✓"
        infos = len(self.issues) - len(self.errors) - len(self.warnings)
        return (
            f"{status} {self.lesson_path}: {len(self.errors)} errors, "
            f"{len(self.warnings)} warnings, {infos} notes"
        )

    def to_dict(self) -> dict:
        return {
            "lesson": self.lesson_path,
            "errors": len(self.errors),
            "warnings": len(self.warnings),
            "issues": [asdict(issue) for issue in self.issues],
        }


CheckFunction = Callable[[Lesson, ChecksConfig], Iterable[LessonIssue]]

check_registry: list[tuple[str, CheckFunction]] = []


def lesson_check(name: str) -> Callable[[CheckFunction], CheckFunction]:
    def register(fun: CheckFunction) -> CheckFunction:
        check_registry.append((name, fun))
        return fun

    return register


def _path(lesson: Lesson) -> str:
    return str(lesson.path) if lesson.path else ""


def _normalize(text: str) -> str:
    text = re.sub(r"[*_`]", "", text)
    return " ".join(text.split()).lower().rstrip(".")


@lesson_check("quizzes")
def check_quizzes(lesson: Lesson, config: ChecksConfig) -> Iterable[LessonIssue]:
    for quiz in lesson.quizzes:
        question = quiz.question or "<untitled question>"
        labels = Counter(option.label for option in quiz.options)
        for label, count in sorted(labels.items()):
            if count > 1:
                yield LessonIssue(
                    category="quiz_duplicate_option",
                    severity="error",
                    message=f"Option {label} appears {count} times in '{question}'",
                    file_path=_path(lesson),
                    line=quiz.line,
                    guidance="Give every option a unique label",
                )

        if len(quiz.options) < config.min_quiz_options:
            yield LessonIssue(
                category="quiz_too_few_options",
                severity="warning",
                message=(
                    f"'{question}' offers {len(quiz.options)} option(s), "
                    f"at least {config.min_quiz_options} expected"
                ),
                file_path=_path(lesson),
                line=quiz.line,
            )

        if len(quiz.checked_labels) > 1:
            yield LessonIssue(
                category="quiz_answer_mismatch",
                severity="error",
                message=(
                    f"'{question}' marks several options as correct: "
                    f"{', '.join(quiz.checked_labels)}"
                ),
                file_path=_path(lesson),
                line=quiz.line,
                guidance="Check exactly one option",
            )

        if quiz.answer_label is None:
            yield LessonIssue(
                category="quiz_answer_missing",
                severity="error",
                message=f"'{question}' has no marked answer",
                file_path=_path(lesson),
                line=quiz.line,
                guidance="Add a line '**Answer:** <label>' after the options",
            )
            continue

        correct = quiz.correct_option
        if correct is None:
            available = ", ".join(option.label for option in quiz.options) or "none"
            yield LessonIssue(
                category="quiz_answer_mismatch",
                severity="error",
                message=(
                    f"Answer {quiz.answer_label} of '{question}' names no option "
                    f"(available: {available})"
                ),
                file_path=_path(lesson),
                line=quiz.line,
            )
            continue

        if quiz.checked_labels and quiz.checked_labels != [quiz.answer_label]:
            yield LessonIssue(
                category="quiz_answer_mismatch",
                severity="error",
                message=(
                    f"'{question}' checks option {', '.join(quiz.checked_labels)} "
                    f"but the answer line says {quiz.answer_label}"
                ),
                file_path=_path(lesson),
                line=quiz.line,
            )

        if quiz.answer_text and _normalize(quiz.answer_text) != _normalize(correct.text):
            yield LessonIssue(
                category="quiz_answer_mismatch",
                severity="error",
                message=(
                    f"Answer {quiz.answer_label} of '{question}' reads '{quiz.answer_text}' "
                    f"but option {correct.label} reads '{correct.text}'"
                ),
                file_path=_path(lesson),
                line=quiz.line,
                guidance="Make the answer text match the labeled option",
            )


@lesson_check("snippets")
def check_snippets(lesson: Lesson, config: ChecksConfig) -> Iterable[LessonIssue]:
    if lesson.unterminated_fence_line is not None:
        yield LessonIssue(
            category="unterminated_code_fence",
            severity="error",
            message="Code block is never closed",
            file_path=_path(lesson),
            line=lesson.unterminated_fence_line,
            guidance="Add a closing fence",
        )

    for snippet in lesson.snippets:
        if snippet.is_empty:
            yield LessonIssue(
                category="empty_code_snippet",
                severity="warning",
                message="Code block is empty",
                file_path=_path(lesson),
                line=snippet.line,
            )
            continue
        if snippet.language not in config.snippet_languages:
            continue
        if _is_placeholder(snippet.code):
            continue
        try:
            ast.parse(snippet.code)
        except SyntaxError as e:
            line = snippet.line + (e.lineno or 0)
            yield LessonIssue(
                category="snippet_syntax_error",
                severity="error",
                message=f"Snippet does not parse: {e.msg}",
                file_path=_path(lesson),
                line=line,
            )


def _is_placeholder(code: str) -> bool:
    return all(line.strip() in ("", "...", "# ...") for line in code.splitlines())


@lesson_check("planned_topics")
def check_planned_topics(lesson: Lesson, config: ChecksConfig) -> Iterable[LessonIssue]:
    severity: Severity = "warning" if config.planned_topics_are_warnings else "info"
    for topic in lesson.planned_topics:
        yield LessonIssue(
            category="planned_topic",
            severity=severity,
            message=f"Planned but unwritten: {topic.text}",
            file_path=_path(lesson),
            line=topic.line,
        )


@lesson_check("structure")
def check_structure(lesson: Lesson, config: ChecksConfig) -> Iterable[LessonIssue]:
    if not any(heading.level == 1 for heading in lesson.headings):
        yield LessonIssue(
            category="missing_title",
            severity="warning",
            message="Lesson has no level-1 heading",
            file_path=_path(lesson),
            guidance="Start the lesson with '# <title>'",
        )

    previous = 0
    for heading in lesson.headings:
        if previous and heading.level > previous + 1:
            yield LessonIssue(
                category="heading_level_skip",
                severity="warning",
                message=f"Heading '{heading.text}' jumps from level {previous} to {heading.level}",
                file_path=_path(lesson),
                line=heading.line,
            )
        previous = heading.level


@lesson_check("insecure_links")
def check_insecure_links(lesson: Lesson, config: ChecksConfig) -> Iterable[LessonIssue]:
    for link in lesson.links:
        if link.url.startswith("http://"):
            yield LessonIssue(
                category="insecure_link",
                severity="warning",
                message=f"Link uses plain http: {link.url}",
                file_path=_path(lesson),
                line=link.line,
                guidance="Use https if the site supports it",
            )


def check_lesson(lesson: Lesson, config: ChecksConfig | None = None) -> CheckReport:
    """Run all registered checks on a lesson."""
    config = config or ChecksConfig()
    report = CheckReport(lesson_path=_path(lesson) or lesson.title)
    for name, fun in check_registry:
        issues = list(fun(lesson, config))
        logger.debug(f"Check '{name}' found {len(issues)} issue(s) in {report.lesson_path}")
        report.extend(issues)
    return report
