"""Synchronous client for the WebCrawlerAPI service."""
from __future__ import annotations

import logging

from webcrawlerapi.application.polling import JobPoller, extract_job_id, fixed_delay, hinted_delay
from webcrawlerapi.core.errors import UNKNOWN_ERROR, WebCrawlerAPIError
from webcrawlerapi.core.json_fields import extract_value
from webcrawlerapi.core.schema import CrawlRequest, ScrapeRequest, ScrapeType
from webcrawlerapi.core.settings import (
    DEFAULT_BASE_URL,
    DEFAULT_MAX_POLLS,
    DEFAULT_POLL_DELAY_MS,
    DEFAULT_TIMEOUT,
    ClientSettings,
)
from webcrawlerapi.domain import (
    CRAWL_TERMINAL_STATUSES,
    SCRAPE_TERMINAL_STATUSES,
    CrawlResult,
    ScrapeResult,
)
from webcrawlerapi.infrastructure import EventSleeper, HttpxTransport, Sleeper, Transport

logger = logging.getLogger(__name__)


class WebCrawlerAPI:
    """Submit crawl and scrape jobs and wait for their results.

    Example::

        with WebCrawlerAPI("your-api-key") as client:
            result = client.crawl("https://example.com", "markdown", items_limit=10)
            for item in result.items:
                print(item.url, item.content_url("markdown"))
    """

    def __init__(
        self,
        api_key: str | None,
        base_url: str | None = None,
        *,
        transport: Transport | None = None,
        sleeper: Sleeper | None = None,
        poll_delay_ms: int = DEFAULT_POLL_DELAY_MS,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        if api_key is None or not api_key.strip():
            raise ValueError("API key is required")

        self._base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self._transport: Transport = transport or HttpxTransport(api_key, timeout=timeout)
        self._owns_transport = transport is None
        self._sleeper: Sleeper = sleeper or EventSleeper()
        self._poll_delay_ms = poll_delay_ms

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings,
        *,
        transport: Transport | None = None,
        sleeper: Sleeper | None = None,
    ) -> "WebCrawlerAPI":
        return cls(
            settings.api_key,
            settings.base_url,
            transport=transport,
            sleeper=sleeper,
            poll_delay_ms=settings.poll_delay_ms,
            timeout=settings.timeout,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def sleeper(self) -> Sleeper:
        return self._sleeper

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _request(self, method: str, path: str, body: str | None = None) -> str:
        status_code, text = self._transport.send(method, f"{self._base_url}{path}", body)
        if 200 <= status_code < 300:
            return text

        error_code = extract_value(text, "error_code")
        if error_code is None:
            error_code = UNKNOWN_ERROR
        message = extract_value(text, "error_message")
        if message is None:
            message = extract_value(text, "message")
        if message is None:
            message = f"Request failed with status {status_code}"
        logger.warning("%s %s failed with status %s: %s", method, path, status_code, error_code)
        raise WebCrawlerAPIError(error_code, message, status_code=status_code)

    def _submit_crawl(self, request: CrawlRequest) -> str:
        return self._request("POST", "/v1/crawl", request.to_body())

    def _submit_scrape(self, request: ScrapeRequest) -> str:
        return self._request("POST", "/v2/scrape?async=true", request.to_body())

    def _check_crawl(self, job_id: str) -> str:
        return self._request("GET", f"/v1/job/{job_id}")

    def _check_scrape(self, scrape_id: str) -> str:
        return self._request("GET", f"/v2/scrape/{scrape_id}")

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------
    def crawl(
        self,
        url: str,
        scrape_type: ScrapeType | None = "markdown",
        items_limit: int = 10,
        max_polls: int = DEFAULT_MAX_POLLS,
        *,
        sleeper: Sleeper | None = None,
    ) -> CrawlResult:
        """Crawl ``url`` and block until the job is done, failed or cancelled.

        The wait between polls follows the service's
        ``recommended_pull_delay_ms`` when it sends one.  If ``max_polls`` is
        exhausted the last, possibly non-terminal, result is returned.

        Pass a dedicated ``sleeper`` to cancel this call alone; interrupting
        :attr:`sleeper` cancels every poll running on the client.
        """

        request = CrawlRequest(url=url, scrape_type=scrape_type, items_limit=items_limit)
        poller: JobPoller[CrawlResult] = JobPoller(
            submit=lambda: self._submit_crawl(request),
            check=self._check_crawl,
            parse=CrawlResult.from_json,
            terminal_statuses=CRAWL_TERMINAL_STATUSES,
            delay_policy=hinted_delay(self._poll_delay_ms),
            sleeper=sleeper if sleeper is not None else self._sleeper,
            label="crawl job",
        )
        return poller.run(max_polls)

    def scrape(
        self,
        url: str,
        scrape_type: ScrapeType | None = "markdown",
        max_polls: int = DEFAULT_MAX_POLLS,
        *,
        sleeper: Sleeper | None = None,
    ) -> ScrapeResult:
        """Scrape a single page and block until it is done or failed.

        Scrape polling always waits the fixed poll delay between attempts.
        ``sleeper`` works as in :meth:`crawl`.
        """

        request = ScrapeRequest(url=url, scrape_type=scrape_type)
        poller: JobPoller[ScrapeResult] = JobPoller(
            submit=lambda: self._submit_scrape(request),
            check=self._check_scrape,
            parse=ScrapeResult.from_json,
            terminal_statuses=SCRAPE_TERMINAL_STATUSES,
            delay_policy=fixed_delay(self._poll_delay_ms),
            sleeper=sleeper if sleeper is not None else self._sleeper,
            label="scrape",
        )
        return poller.run(max_polls)

    def scrape_async(self, url: str, scrape_type: ScrapeType | None = "markdown") -> str:
        """Start a scrape and return its id without waiting."""

        request = ScrapeRequest(url=url, scrape_type=scrape_type)
        return extract_job_id(self._submit_scrape(request), "scrape")

    def get_scrape(self, scrape_id: str) -> ScrapeResult:
        """Fetch the current state of a scrape started with :meth:`scrape_async`."""

        return ScrapeResult.from_json(self._check_scrape(scrape_id))

    def close(self) -> None:
        if self._owns_transport and isinstance(self._transport, HttpxTransport):
            self._transport.close()

    def __enter__(self) -> "WebCrawlerAPI":
        return self

    def __exit__(self, *args) -> None:
        self.close()


__all__ = ["WebCrawlerAPI"]
