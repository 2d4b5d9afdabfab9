"""Python client for the WebCrawlerAPI crawling service."""

from webcrawlerapi.application import WebCrawlerAPI
from webcrawlerapi.core.errors import WebCrawlerAPIError
from webcrawlerapi.domain import CrawlItem, CrawlResult, JobStatus, ScrapeResult
from webcrawlerapi.infrastructure.transport import SDK_VERSION

__version__ = SDK_VERSION

__all__ = [
    "CrawlItem",
    "CrawlResult",
    "JobStatus",
    "ScrapeResult",
    "WebCrawlerAPI",
    "WebCrawlerAPIError",
]
