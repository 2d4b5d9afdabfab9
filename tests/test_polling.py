from __future__ import annotations

import json
from pathlib import Path
import sys
import threading

sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest

from webcrawlerapi.application.polling import JobPoller, extract_job_id, fixed_delay, hinted_delay
from webcrawlerapi.core.errors import INTERRUPTED, INVALID_RESPONSE, WebCrawlerAPIError
from webcrawlerapi.domain import (
    CRAWL_TERMINAL_STATUSES,
    SCRAPE_TERMINAL_STATUSES,
    CrawlResult,
    ScrapeResult,
)
from webcrawlerapi.infrastructure.clock import EventSleeper, SleepInterrupted


class RecordingSleeper:
    def __init__(self) -> None:
        self.delays: list[int] = []

    def sleep(self, delay_ms: int) -> None:
        self.delays.append(delay_ms)


class InterruptingSleeper:
    def sleep(self, delay_ms: int) -> None:
        raise SleepInterrupted("cancelled")


class ScriptedJob:
    """Replays a fixed sequence of status bodies for one job id."""

    def __init__(self, bodies: list[dict], submit_body: dict | None = None) -> None:
        self._bodies = [json.dumps(body) for body in bodies]
        self._submit_body = json.dumps(submit_body if submit_body is not None else {"id": "job-1"})
        self.submissions = 0
        self.checks: list[str] = []

    def submit(self) -> str:
        self.submissions += 1
        return self._submit_body

    def check(self, job_id: str) -> str:
        self.checks.append(job_id)
        index = min(len(self.checks), len(self._bodies)) - 1
        return self._bodies[index]


def _crawl_poller(job: ScriptedJob, sleeper, default_ms: int = 5000) -> JobPoller[CrawlResult]:
    return JobPoller(
        submit=job.submit,
        check=job.check,
        parse=CrawlResult.from_json,
        terminal_statuses=CRAWL_TERMINAL_STATUSES,
        delay_policy=hinted_delay(default_ms),
        sleeper=sleeper,
    )


def _scrape_poller(job: ScriptedJob, sleeper, default_ms: int = 5000) -> JobPoller[ScrapeResult]:
    return JobPoller(
        submit=job.submit,
        check=job.check,
        parse=ScrapeResult.from_json,
        terminal_statuses=SCRAPE_TERMINAL_STATUSES,
        delay_policy=fixed_delay(default_ms),
        sleeper=sleeper,
    )


def test_crawl_poller_stops_on_done():
    job = ScriptedJob(
        [
            {"id": "job-1", "status": "in_progress"},
            {"id": "job-1", "status": "in_progress"},
            {"id": "job-1", "status": "done", "job_items": [{"url": "a"}]},
        ]
    )
    sleeper = RecordingSleeper()

    result = _crawl_poller(job, sleeper).run()

    assert job.submissions == 1
    assert job.checks == ["job-1", "job-1", "job-1"]
    assert len(sleeper.delays) == 2
    assert result.status == "done"
    assert [item.url for item in result.items] == ["a"]


@pytest.mark.parametrize("status", ["done", "error", "cancelled"])
def test_crawl_terminal_statuses(status):
    job = ScriptedJob([{"id": "job-1", "status": status}])
    sleeper = RecordingSleeper()

    result = _crawl_poller(job, sleeper).run()

    assert result.status == status
    assert len(job.checks) == 1
    assert sleeper.delays == []


def test_exhausted_attempts_return_last_outcome():
    job = ScriptedJob(
        [
            {"id": "job-1", "status": "new"},
            {"id": "job-1", "status": "in_progress", "recommended_pull_delay_ms": 10},
            {"id": "job-1", "status": "done"},
        ]
    )
    sleeper = RecordingSleeper()

    result = _crawl_poller(job, sleeper).run(max_polls=2)

    assert len(job.checks) == 2
    assert result.status == "in_progress"
    assert result.recommended_pull_delay_ms == 10
    assert sleeper.delays == [5000]


def test_unknown_status_keeps_polling():
    job = ScriptedJob(
        [
            {"id": "job-1", "status": "DONE"},
            {"id": "job-1", "status": "queued"},
            {"id": "job-1", "status": "done"},
        ]
    )
    result = _crawl_poller(job, RecordingSleeper()).run()

    assert len(job.checks) == 3
    assert result.status == "done"


def test_crawl_poller_honours_delay_hint():
    job = ScriptedJob(
        [
            {"id": "job-1", "status": "in_progress", "recommended_pull_delay_ms": 1500},
            {"id": "job-1", "status": "in_progress", "recommended_pull_delay_ms": 0},
            {"id": "job-1", "status": "in_progress", "recommended_pull_delay_ms": "soon"},
            {"id": "job-1", "status": "done"},
        ]
    )
    sleeper = RecordingSleeper()

    _crawl_poller(job, sleeper, default_ms=700).run()

    assert sleeper.delays == [1500, 700, 700]


def test_scrape_poller_treats_cancelled_as_non_terminal():
    job = ScriptedJob(
        [
            {"status": "cancelled"},
            {"status": "in_progress"},
            {"status": "done", "content": "# Example Domain"},
        ]
    )
    sleeper = RecordingSleeper()

    result = _scrape_poller(job, sleeper).run()

    assert len(job.checks) == 3
    assert result.status == "done"
    assert result.content == "# Example Domain"


@pytest.mark.parametrize("status", ["done", "error"])
def test_scrape_poller_stops_on_done_and_error(status):
    job = ScriptedJob([{"status": "in_progress"}, {"status": status}])

    result = _scrape_poller(job, RecordingSleeper()).run()

    assert result.status == status
    assert len(job.checks) == 2


def test_scrape_poller_ignores_delay_hint():
    job = ScriptedJob(
        [
            {"status": "in_progress", "recommended_pull_delay_ms": 100},
            {"status": "in_progress", "recommended_pull_delay_ms": 100},
            {"status": "done"},
        ]
    )
    sleeper = RecordingSleeper()

    _scrape_poller(job, sleeper, default_ms=5000).run()

    assert sleeper.delays == [5000, 5000]


@pytest.mark.parametrize("submit_body", [{}, {"id": ""}, {"id": None}, {"status": "new"}])
def test_missing_job_id_fails_before_polling(submit_body):
    job = ScriptedJob([{"status": "done"}], submit_body=submit_body)

    with pytest.raises(WebCrawlerAPIError) as excinfo:
        _crawl_poller(job, RecordingSleeper()).run()

    assert excinfo.value.error_code == INVALID_RESPONSE
    assert job.checks == []


def test_interrupted_sleep_raises_interrupted():
    job = ScriptedJob([{"id": "job-1", "status": "in_progress"}, {"id": "job-1", "status": "done"}])

    with pytest.raises(WebCrawlerAPIError) as excinfo:
        _crawl_poller(job, InterruptingSleeper()).run()

    assert excinfo.value.error_code == INTERRUPTED
    assert isinstance(excinfo.value.__cause__, SleepInterrupted)
    assert len(job.checks) == 1


def test_event_sleeper_interrupt_from_another_thread():
    job = ScriptedJob([{"id": "job-1", "status": "in_progress"}])
    sleeper = EventSleeper()
    poller = _crawl_poller(job, sleeper, default_ms=60_000)
    errors: list[WebCrawlerAPIError] = []

    def target() -> None:
        try:
            poller.run()
        except WebCrawlerAPIError as exc:
            errors.append(exc)

    worker = threading.Thread(target=target)
    worker.start()
    sleeper.interrupt()
    worker.join(timeout=5)

    assert not worker.is_alive()
    assert [exc.error_code for exc in errors] == [INTERRUPTED]


def test_event_sleeper_reset():
    sleeper = EventSleeper()
    sleeper.interrupt()
    assert sleeper.interrupted
    with pytest.raises(SleepInterrupted):
        sleeper.sleep(10)

    sleeper.reset()
    sleeper.sleep(1)
    assert not sleeper.interrupted


def test_max_polls_must_be_positive():
    job = ScriptedJob([{"id": "job-1", "status": "done"}])

    with pytest.raises(ValueError):
        _crawl_poller(job, RecordingSleeper()).run(max_polls=0)

    assert job.submissions == 0


def test_wait_polls_existing_job():
    job = ScriptedJob([{"status": "in_progress"}, {"status": "done"}])

    result = _scrape_poller(job, RecordingSleeper()).wait("scrape-9")

    assert job.submissions == 0
    assert job.checks == ["scrape-9", "scrape-9"]
    assert result.status == "done"


def test_concurrent_polls_do_not_share_state():
    jobs = [
        ScriptedJob(
            [{"id": f"job-{n}", "status": "in_progress"}] * n + [{"id": f"job-{n}", "status": "done"}],
            submit_body={"id": f"job-{n}"},
        )
        for n in range(1, 5)
    ]
    results: dict[int, CrawlResult] = {}

    def target(n: int, job: ScriptedJob) -> None:
        results[n] = _crawl_poller(job, RecordingSleeper()).run()

    threads = [threading.Thread(target=target, args=(n, job)) for n, job in enumerate(jobs, start=1)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)

    for n, job in enumerate(jobs, start=1):
        assert results[n].id == f"job-{n}"
        assert results[n].status == "done"
        assert job.checks == [f"job-{n}"] * (n + 1)


def test_extract_job_id():
    assert extract_job_id('{"id":"abc","status":"new"}') == "abc"
    with pytest.raises(WebCrawlerAPIError, match="Failed to get scrape ID"):
        extract_job_id("{}", "scrape")
