"""Domain layer definitions."""

from .jobs import (
    CRAWL_TERMINAL_STATUSES,
    SCRAPE_TERMINAL_STATUSES,
    CrawlItem,
    CrawlResult,
    JobStatus,
    ScrapeResult,
)

__all__ = [
    "CRAWL_TERMINAL_STATUSES",
    "SCRAPE_TERMINAL_STATUSES",
    "CrawlItem",
    "CrawlResult",
    "JobStatus",
    "ScrapeResult",
]
