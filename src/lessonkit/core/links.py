"""Link validation for lessons.

External links are checked over HTTP with `httpx`; relative links and
in-page anchors are resolved against the lesson file and its headings.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote, urlsplit

import httpx

from lessonkit.core.checks import LessonIssue
from lessonkit.core.lesson import Lesson, Link
from lessonkit.infrastructure.config import LinksConfig

logger = logging.getLogger(__name__)


@dataclass
class LinkStatus:
    """Result of checking one link."""

    url: str
    ok: bool
    status_code: int | None = None
    error: str | None = None
    line: int | None = None

    def describe(self) -> str:
        if self.ok:
            return f"{self.status_code}"
        if self.status_code is not None:
            return f"HTTP {self.status_code}"
        return self.error or "unknown error"


class LinkChecker:
    """Checks external URLs, retrying on network errors.

    Usage:
        with LinkChecker(timeout=5.0) as checker:
            statuses = checker.check_links(lesson.links)
    """

    def __init__(
        self,
        timeout: float = 10.0,
        max_workers: int = 8,
        max_retries: int = 2,
        user_agent: str = "lessonkit-link-checker/1.0",
        initial_retry_delay: float = 0.5,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the link checker.

        Args:
            timeout: Request timeout in seconds
            max_workers: Number of URLs checked in parallel
            max_retries: Retries after a network error (0 = try once)
            user_agent: User-Agent header to send
            initial_retry_delay: Initial delay between retries (doubles each attempt)
            transport: Optional httpx transport (used by tests)
        """
        self.max_workers = max_workers
        self.max_retries = max_retries
        self.initial_retry_delay = initial_retry_delay
        self._client = httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            headers={"User-Agent": user_agent},
            transport=transport,
        )

    @classmethod
    def from_config(cls, config: LinksConfig, **kwargs) -> "LinkChecker":
        return cls(
            timeout=config.timeout,
            max_workers=config.max_workers,
            max_retries=config.max_retries,
            user_agent=config.user_agent,
            **kwargs,
        )

    def close(self):
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def check_url(self, url: str) -> LinkStatus:
        """Check a single URL. Network failures are reported, never raised."""
        retry_delay = self.initial_retry_delay

        for attempt in range(self.max_retries + 1):
            try:
                response = self._client.head(url)
                if response.status_code >= 400:
                    # Some sites reject HEAD requests; ask again with GET
                    response = self._client.get(url)
                ok = response.status_code < 400
                if not ok:
                    logger.info(f"Link {url} returned HTTP {response.status_code}")
                return LinkStatus(url=url, ok=ok, status_code=response.status_code)

            except httpx.InvalidURL as e:
                logger.info(f"Link {url} is not a valid URL: {e}")
                return LinkStatus(url=url, ok=False, error=f"InvalidURL: {e}")

            except httpx.HTTPError as e:
                if attempt >= self.max_retries:
                    logger.info(f"Link {url} failed after {attempt + 1} attempt(s): {e}")
                    return LinkStatus(url=url, ok=False, error=f"{type(e).__name__}: {e}")
                logger.debug(
                    f"Checking {url} failed (attempt {attempt + 1}/{self.max_retries + 1}): "
                    f"{e}. Retrying in {retry_delay}s..."
                )
                time.sleep(retry_delay)
                retry_delay *= 2

        raise AssertionError("Unexpected retry loop exit")

    def check_links(self, links: list[Link]) -> list[LinkStatus]:
        """Check all external links, each distinct URL once, in first-seen order."""
        first_lines: dict[str, int] = {}
        for link in links:
            if link.is_external:
                first_lines.setdefault(link.url, link.line)

        urls = list(first_lines)
        logger.info(f"Checking {len(urls)} unique external link(s)")
        if not urls:
            return []

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            statuses = list(executor.map(self.check_url, urls))

        for status in statuses:
            status.line = first_lines[status.url]
        return statuses


def check_local_links(lesson: Lesson) -> list[LinkStatus]:
    """Resolve relative links and anchors of a lesson."""
    statuses = []
    slugs = lesson.heading_slugs()
    base_dir = lesson.path.parent if lesson.path else Path.cwd()

    for link in lesson.links:
        if link.is_external or link.is_mailto:
            continue
        parts = urlsplit(link.url)
        if parts.scheme:
            continue

        if link.is_anchor:
            anchor = unquote(parts.fragment)
            ok = anchor in slugs
            error = None if ok else f"no heading with anchor #{anchor}"
            statuses.append(LinkStatus(url=link.url, ok=ok, error=error, line=link.line))
            continue

        target = base_dir / unquote(parts.path)
        ok = target.exists()
        error = None if ok else f"file not found: {target}"
        statuses.append(LinkStatus(url=link.url, ok=ok, error=error, line=link.line))

    return statuses


def link_issues(statuses: list[LinkStatus], lesson: Lesson) -> list[LessonIssue]:
    """Convert failed link checks to lesson issues."""
    file_path = str(lesson.path) if lesson.path else ""
    issues = []
    for status in statuses:
        if status.ok:
            continue
        if status.url.startswith("#"):
            category = "broken_anchor"
            guidance = "Point the link at an existing heading"
        elif status.url.startswith(("http://", "https://")):
            category = "broken_link"
            guidance = "Update or remove the link"
        else:
            category = "broken_local_link"
            guidance = "Check the relative path"
        issues.append(
            LessonIssue(
                category=category,
                severity="error",
                message=f"{status.url}: {status.describe()}",
                file_path=file_path,
                line=status.line,
                guidance=guidance,
            )
        )
    return issues
