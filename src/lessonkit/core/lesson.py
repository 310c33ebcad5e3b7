"""Lesson documents and their markdown parser.

A lesson is a markdown file made of prose, fenced code snippets, one or more
multiple-choice quiz questions and links to external material. The parser
is a line scanner: it never fails on malformed markdown, it records what it
finds (including structural problems) and leaves judgement to the checks in
`lessonkit.core.checks`.

Quiz markup accepted by the parser::

    **Question:** What does `sys.argv[1]` contain?

    - A) The script name
    - B) The first argument after the script name

    **Answer:** B

Options may also be written as ``A. text``, ``(A) text`` or as task list
items (``- [x] B) text``), in which case the checked box marks the answer.
"""

import logging
import re
from collections.abc import Iterator
from pathlib import Path

from attrs import Factory, define, frozen

from lessonkit.errors import LessonError

logger = logging.getLogger(__name__)

FENCE_RE = re.compile(r"^ {0,3}(?P<fence>`{3,}|~{3,})\s*(?P<info>[^`\s]*)[^`]*$")
HEADING_RE = re.compile(r"^ {0,3}(?P<hashes>#{1,6})\s+(?P<text>.*?)(?:\s+#+)?\s*$")
QUESTION_RE = re.compile(
    r"^\s*(?:\*\*|__)?(?:Question|Q)(?:\s*\d+)?\s*(?:\*\*|__)?\s*:"
    r"\s*(?:\*\*|__)?\s*(?P<text>.+?)\s*$"
)
OPTION_RE = re.compile(
    r"^\s*(?:[-*+]\s+)?(?:\[(?P<check>[ xX])\]\s+)?"
    r"\(?(?P<label>[A-Ha-h])[).:]\s+(?P<text>.+?)\s*$"
)
# Lower-case answer labels must be closed by a parenthesis or end the line,
# otherwise "Answer: a file" would read as option A.
ANSWER_RE = re.compile(
    r"^\s*(?:[-*+]\s+)?(?:\*\*|__)?(?i:(?:correct\s+)?answer)\s*(?:\*\*|__)?\s*:\s*(?:\*\*|__)?\s*"
    r"(?:\*\*|__)?\(?(?P<label>[A-H](?![A-Za-z])|[a-h](?=\)|\s*(?:\*\*|__)?\s*$))\)?"
    r"[).:]?\s*(?P<text>.*?)\s*(?:\*\*|__)?\s*$"
)
QUIZ_HEADING_RE = re.compile(r"\bquiz\b", re.IGNORECASE)

INLINE_CODE_RE = re.compile(r"(`+)(?:(?!\1).)+?\1")
INLINE_LINK_RE = re.compile(
    r"(?P<image>!?)\[(?P<text>[^\]]*)\]\((?P<url><[^>]*>|[^)\s]+)(?:\s+\"[^\"]*\")?\)"
)
AUTOLINK_RE = re.compile(r"<(?P<url>(?:https?|mailto):[^>\s]+)>")
BARE_URL_RE = re.compile(r"https?://[^\s<>\"'\]]+")

PLANNED_TOPIC_RE = re.compile(
    r"\b(?:TODO|TBD|FIXME)\b|(?i:coming soon|future addition|to be (?:written|added))"
)


@frozen
class Heading:
    level: int
    text: str
    line: int

    @property
    def slug(self) -> str:
        return heading_slug(self.text)


@frozen
class CodeSnippet:
    language: str
    code: str
    line: int

    @property
    def is_empty(self) -> bool:
        return not self.code.strip()


@frozen
class QuizOption:
    label: str
    text: str
    line: int


@define
class Quiz:
    question: str
    line: int
    options: list[QuizOption] = Factory(list)
    answer_label: str | None = None
    answer_text: str | None = None
    checked_labels: list[str] = Factory(list)

    def option(self, label: str) -> QuizOption | None:
        for option in self.options:
            if option.label == label:
                return option
        return None

    @property
    def correct_option(self) -> QuizOption | None:
        if self.answer_label is None:
            return None
        return self.option(self.answer_label)


@frozen
class Link:
    text: str
    url: str
    line: int
    is_image: bool = False

    @property
    def is_external(self) -> bool:
        return self.url.startswith(("http://", "https://"))

    @property
    def is_anchor(self) -> bool:
        return self.url.startswith("#")

    @property
    def is_mailto(self) -> bool:
        return self.url.startswith("mailto:")


@frozen
class PlannedTopic:
    text: str
    line: int


@define
class Lesson:
    title: str
    text: str
    path: Path | None = None
    headings: list[Heading] = Factory(list)
    snippets: list[CodeSnippet] = Factory(list)
    quizzes: list[Quiz] = Factory(list)
    links: list[Link] = Factory(list)
    planned_topics: list[PlannedTopic] = Factory(list)
    unterminated_fence_line: int | None = None

    @classmethod
    def from_file(cls, path: Path, encoding: str = "utf-8") -> "Lesson":
        path = Path(path)
        try:
            with open(path, encoding=encoding) as f:
                text = f.read()
        except FileNotFoundError:
            raise LessonError(f"Lesson file not found: {path}") from None
        except (OSError, UnicodeDecodeError) as e:
            raise LessonError(f"Cannot read lesson {path}: {e}") from e
        logger.debug(f"Read lesson {path} ({len(text)} characters)")
        return cls.from_text(text, path=path)

    @classmethod
    def from_text(cls, text: str, path: Path | None = None) -> "Lesson":
        return parse_lesson(text, path)

    @property
    def name(self) -> str:
        return self.path.name if self.path else self.title

    def outline(self) -> list[tuple[int, str]]:
        return [(heading.level, heading.text) for heading in self.headings]

    def heading_slugs(self) -> set[str]:
        """Anchors of all headings; repeated headings get -1, -2, ... as on GitHub."""
        slugs = set()
        seen: dict[str, int] = {}
        for heading in self.headings:
            slug = heading.slug
            count = seen.get(slug, 0)
            seen[slug] = count + 1
            slugs.add(f"{slug}-{count}" if count else slug)
        return slugs

    def plain_prose(self) -> str:
        """Return the lesson text with all fenced code blocks removed."""
        return "\n".join(line for line in _prose_lines(self.text.splitlines()))


def heading_slug(text: str) -> str:
    """Anchor slug for a heading, following the GitHub convention."""
    text = INLINE_CODE_RE.sub(lambda m: m.group(0).strip("`"), text)
    slug = re.sub(r"[^\w\- ]", "", text.strip().lower())
    return slug.replace(" ", "-")


def _prose_lines(lines: list[str]) -> Iterator[str]:
    fence: str | None = None
    for line in lines:
        match = FENCE_RE.match(line)
        if fence is None:
            if match:
                fence = match.group("fence")
                continue
            yield line
        elif match and _closes_fence(match.group("fence"), fence) and not match.group("info"):
            fence = None


def _closes_fence(candidate: str, opening: str) -> bool:
    return candidate[0] == opening[0] and len(candidate) >= len(opening)


class _QuizBuilder:
    """Collects the lines of the quiz currently being parsed."""

    def __init__(self):
        self.quizzes: list[Quiz] = []
        self.current: Quiz | None = None
        self.awaiting_question_line: int | None = None
        self.answered = False
        self.blank_seen = False
        # Set while the current quiz is a prose line under a Quiz heading
        self.tentative = False

    def start(self, question: str, line: int, tentative: bool = False):
        self.finish()
        self.current = Quiz(question=question, line=line)
        self.tentative = tentative
        if not tentative:
            self.awaiting_question_line = None

    def finish(self) -> bool:
        """Close the current quiz; return True if a tentative one was dropped."""
        dropped = False
        if self.current is not None:
            if self.tentative and not self.current.options and not self.answered:
                dropped = True
            else:
                if self.current.answer_label is None and len(self.current.checked_labels) == 1:
                    self.current.answer_label = self.current.checked_labels[0]
                self.quizzes.append(self.current)
                self.awaiting_question_line = None
        self.current = None
        self.tentative = False
        self.answered = False
        self.blank_seen = False
        return dropped

    def feed(self, line: str, lineno: int) -> bool:
        """Feed a prose line; return True if the line belonged to a quiz."""
        question = QUESTION_RE.match(line)
        if question:
            self.start(question.group("text"), lineno)
            return True

        if self.awaiting_question_line is not None and self.current is None:
            if not line.strip():
                return False
            if OPTION_RE.match(line):
                self.start("", self.awaiting_question_line)
            else:
                self.start(line.strip(), lineno, tentative=True)
                return True

        if self.current is None:
            return False

        if not line.strip():
            if self.answered:
                self.finish()
            else:
                self.blank_seen = True
            return False

        answer = ANSWER_RE.match(line)
        if answer:
            self.current.answer_label = answer.group("label").upper()
            self.current.answer_text = answer.group("text").strip(" -–—") or None
            self.answered = True
            return True

        option = OPTION_RE.match(line)
        if option and not self.answered:
            label = option.group("label").upper()
            self.current.options.append(QuizOption(label, option.group("text"), lineno))
            if option.group("check") in ("x", "X"):
                self.current.checked_labels.append(label)
            return True

        if not self.current.options and not self.answered and not self.blank_seen:
            # A question spanning more than one line
            self.current.question = f"{self.current.question} {line.strip()}".strip()
            return True

        if self.finish():
            # The dropped line was an introduction; this one may be the question
            return self.feed(line, lineno)
        return False


def _strip_inline_code(line: str) -> str:
    return INLINE_CODE_RE.sub(lambda m: " " * len(m.group(0)), line)


def _find_links(line: str, lineno: int) -> list[Link]:
    links = []
    scan = _strip_inline_code(line)

    def blank(match: re.Match) -> str:
        return " " * len(match.group(0))

    for match in INLINE_LINK_RE.finditer(scan):
        url = match.group("url").strip("<>")
        links.append(Link(match.group("text"), url, lineno, is_image=bool(match.group("image"))))
    scan = INLINE_LINK_RE.sub(blank, scan)

    for match in AUTOLINK_RE.finditer(scan):
        links.append(Link(match.group("url"), match.group("url"), lineno))
    scan = AUTOLINK_RE.sub(blank, scan)

    for match in BARE_URL_RE.finditer(scan):
        url = match.group(0).rstrip(".,;:!?")
        if url.endswith(")") and url.count("(") < url.count(")"):
            url = url.rstrip(")")
        links.append(Link(url, url, lineno))

    return sorted(links, key=lambda link: line.find(link.url))


def parse_lesson(text: str, path: Path | None = None) -> Lesson:
    """Parse a markdown lesson."""
    headings: list[Heading] = []
    snippets: list[CodeSnippet] = []
    links: list[Link] = []
    planned: list[PlannedTopic] = []
    quizzes = _QuizBuilder()

    fence: str | None = None
    fence_line = 0
    fence_language = ""
    code_lines: list[str] = []

    for lineno, line in enumerate(text.splitlines(), 1):
        fence_match = FENCE_RE.match(line)

        if fence is not None:
            if (
                fence_match
                and _closes_fence(fence_match.group("fence"), fence)
                and not fence_match.group("info")
            ):
                snippets.append(CodeSnippet(fence_language, "\n".join(code_lines), fence_line))
                fence = None
            else:
                code_lines.append(line)
            continue

        if fence_match:
            quizzes.finish()
            fence = fence_match.group("fence")
            fence_line = lineno
            fence_language = fence_match.group("info").lower()
            code_lines = []
            continue

        if PLANNED_TOPIC_RE.search(line):
            planned.append(PlannedTopic(line.strip(" -*#<>!").strip(), lineno))

        heading_match = HEADING_RE.match(line)
        if heading_match:
            quizzes.finish()
            level = len(heading_match.group("hashes"))
            heading = Heading(level, heading_match.group("text"), lineno)
            headings.append(heading)
            if QUIZ_HEADING_RE.search(heading.text):
                quizzes.awaiting_question_line = lineno
            else:
                quizzes.awaiting_question_line = None
            links.extend(_find_links(heading.text, lineno))
            continue

        quizzes.feed(line, lineno)
        links.extend(_find_links(line, lineno))

    quizzes.finish()

    unterminated = None
    if fence is not None:
        logger.debug(f"Unterminated code fence opened at line {fence_line}")
        unterminated = fence_line
        snippets.append(CodeSnippet(fence_language, "\n".join(code_lines), fence_line))

    return Lesson(
        title=_find_title(headings, path),
        text=text,
        path=path,
        headings=headings,
        snippets=snippets,
        quizzes=quizzes.quizzes,
        links=links,
        planned_topics=planned,
        unterminated_fence_line=unterminated,
    )


def _find_title(headings: list[Heading], path: Path | None) -> str:
    for heading in headings:
        if heading.level == 1:
            return heading.text
    if headings:
        return headings[0].text
    if path is not None:
        return path.stem
    return "Untitled"
