"""Application services."""

from .client import WebCrawlerAPI
from .polling import JobPoller, extract_job_id, fixed_delay, hinted_delay

__all__ = [
    "JobPoller",
    "WebCrawlerAPI",
    "extract_job_id",
    "fixed_delay",
    "hinted_delay",
]
