"""Domain entities for crawl and scrape jobs."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from webcrawlerapi.core.json_fields import extract_int, extract_objects, extract_value


class JobStatus(str, Enum):
    """Status literals reported by the service.

    Results keep the raw status string, so unknown values survive parsing and
    are simply treated as non-terminal.
    """

    NEW = "new"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    ERROR = "error"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, value: str | None) -> "JobStatus | None":
        """Return the matching member, or ``None`` for absent or unknown statuses."""

        try:
            return cls(value)
        except ValueError:
            return None


CRAWL_TERMINAL_STATUSES: frozenset[str] = frozenset(
    {JobStatus.DONE.value, JobStatus.ERROR.value, JobStatus.CANCELLED.value}
)
# Scrape jobs never reach ``cancelled``; it is not terminal for them.
SCRAPE_TERMINAL_STATUSES: frozenset[str] = frozenset({JobStatus.DONE.value, JobStatus.ERROR.value})


@dataclass(slots=True)
class CrawlItem:
    """A single page discovered by a crawl job."""

    url: str | None = None
    status: str | None = None
    raw_content_url: str | None = None
    cleaned_content_url: str | None = None
    markdown_content_url: str | None = None

    @classmethod
    def from_json(cls, document: str) -> "CrawlItem":
        return cls(
            url=extract_value(document, "url"),
            status=extract_value(document, "status"),
            raw_content_url=extract_value(document, "raw_content_url"),
            cleaned_content_url=extract_value(document, "cleaned_content_url"),
            markdown_content_url=extract_value(document, "markdown_content_url"),
        )

    def content_url(self, scrape_type: str | None) -> str | None:
        """Return the stored content location for ``scrape_type``."""

        if scrape_type == "html":
            return self.raw_content_url
        if scrape_type == "cleaned":
            return self.cleaned_content_url
        if scrape_type == "markdown":
            return self.markdown_content_url
        return None

    def __repr__(self) -> str:
        return f"CrawlItem(url={self.url!r}, status={self.status!r})"


@dataclass(slots=True)
class CrawlResult:
    """Snapshot of a crawl job as returned by ``GET /v1/job/{id}``."""

    id: str | None = None
    status: str | None = None
    url: str | None = None
    scrape_type: str | None = None
    recommended_pull_delay_ms: int = 0
    items: list[CrawlItem] = field(default_factory=list)

    @classmethod
    def from_json(cls, document: str) -> "CrawlResult":
        return cls(
            id=extract_value(document, "id"),
            status=extract_value(document, "status"),
            url=extract_value(document, "url"),
            scrape_type=extract_value(document, "scrape_type"),
            recommended_pull_delay_ms=extract_int(document, "recommended_pull_delay_ms"),
            items=[CrawlItem.from_json(item) for item in extract_objects(document, "job_items")],
        )

    @property
    def job_status(self) -> JobStatus | None:
        return JobStatus.parse(self.status)

    @property
    def is_terminal(self) -> bool:
        return self.status in CRAWL_TERMINAL_STATUSES

    def __repr__(self) -> str:
        return f"CrawlResult(id={self.id!r}, status={self.status!r}, items={len(self.items)})"


@dataclass(slots=True)
class ScrapeResult:
    """Snapshot of a scrape job as returned by ``GET /v2/scrape/{id}``."""

    status: str | None = None
    content: str | None = None
    html: str | None = None
    markdown: str | None = None
    cleaned: str | None = None
    url: str | None = None
    page_status_code: int = 0

    @classmethod
    def from_json(cls, document: str) -> "ScrapeResult":
        return cls(
            status=extract_value(document, "status"),
            content=extract_value(document, "content"),
            html=extract_value(document, "html"),
            markdown=extract_value(document, "markdown"),
            cleaned=extract_value(document, "cleaned"),
            url=extract_value(document, "url"),
            page_status_code=extract_int(document, "page_status_code"),
        )

    @property
    def job_status(self) -> JobStatus | None:
        return JobStatus.parse(self.status)

    @property
    def is_terminal(self) -> bool:
        return self.status in SCRAPE_TERMINAL_STATUSES

    def __repr__(self) -> str:
        return f"ScrapeResult(status={self.status!r}, url={self.url!r})"
