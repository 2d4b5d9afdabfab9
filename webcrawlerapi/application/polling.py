"""Submit-then-poll orchestration for remote jobs."""
from __future__ import annotations

import logging
from typing import Callable, Generic, Protocol, TypeVar

from webcrawlerapi.core.errors import INTERRUPTED, INVALID_RESPONSE, WebCrawlerAPIError
from webcrawlerapi.core.json_fields import extract_value
from webcrawlerapi.core.settings import DEFAULT_MAX_POLLS, DEFAULT_POLL_DELAY_MS
from webcrawlerapi.infrastructure.clock import Sleeper, SleepInterrupted

logger = logging.getLogger(__name__)


class PollOutcome(Protocol):
    status: str | None


class HintedOutcome(PollOutcome, Protocol):
    recommended_pull_delay_ms: int


OutcomeT = TypeVar("OutcomeT", bound=PollOutcome)
DelayPolicy = Callable[[OutcomeT], int]


def hinted_delay(default_ms: int = DEFAULT_POLL_DELAY_MS) -> Callable[[HintedOutcome], int]:
    """Use the service's recommended delay when positive, else ``default_ms``."""

    def policy(outcome: HintedOutcome) -> int:
        hint = outcome.recommended_pull_delay_ms
        return hint if hint > 0 else default_ms

    return policy


def fixed_delay(default_ms: int = DEFAULT_POLL_DELAY_MS) -> Callable[[PollOutcome], int]:
    """Always wait ``default_ms``, ignoring any hint on the outcome."""

    def policy(outcome: PollOutcome) -> int:
        return default_ms

    return policy


def extract_job_id(document: str, label: str = "job") -> str:
    """Return the ``id`` of a submission response or raise ``invalid_response``."""

    job_id = extract_value(document, "id")
    if not job_id:
        raise WebCrawlerAPIError(INVALID_RESPONSE, f"Failed to get {label} ID from response")
    return job_id


class JobPoller(Generic[OutcomeT]):
    """Drive one remote job from submission to a terminal status.

    ``submit`` performs the submission and returns the raw response body,
    ``check`` fetches the raw status body for a job id and ``parse`` turns that
    body into an outcome.  The poller keeps no state between :meth:`run`
    calls, so separate jobs can be polled from separate threads.
    """

    def __init__(
        self,
        *,
        submit: Callable[[], str],
        check: Callable[[str], str],
        parse: Callable[[str], OutcomeT],
        terminal_statuses: frozenset[str],
        delay_policy: DelayPolicy,
        sleeper: Sleeper,
        label: str = "job",
    ) -> None:
        self._submit = submit
        self._check = check
        self._parse = parse
        self._terminal_statuses = terminal_statuses
        self._delay_policy = delay_policy
        self._sleeper = sleeper
        self._label = label

    def run(self, max_polls: int = DEFAULT_MAX_POLLS) -> OutcomeT:
        """Submit the job and block until it is terminal or ``max_polls`` is used up.

        When the attempts run out the last outcome is returned unchanged, so
        callers must be ready for a non-terminal status.
        """

        if max_polls < 1:
            raise ValueError("max_polls must be at least 1")

        job_id = extract_job_id(self._submit(), self._label)
        logger.debug("Submitted %s %s", self._label, job_id)
        return self.wait(job_id, max_polls)

    def wait(self, job_id: str, max_polls: int = DEFAULT_MAX_POLLS) -> OutcomeT:
        if max_polls < 1:
            raise ValueError("max_polls must be at least 1")

        outcome: OutcomeT | None = None
        for attempt in range(1, max_polls + 1):
            outcome = self._parse(self._check(job_id))
            logger.debug(
                "Poll %d/%d for %s %s: status=%s",
                attempt,
                max_polls,
                self._label,
                job_id,
                outcome.status,
            )
            if outcome.status in self._terminal_statuses:
                logger.info("%s %s finished with status %s", self._label, job_id, outcome.status)
                return outcome
            if attempt == max_polls:
                break

            delay_ms = self._delay_policy(outcome)
            try:
                self._sleeper.sleep(delay_ms)
            except SleepInterrupted as exc:
                logger.info("Polling of %s %s interrupted", self._label, job_id)
                raise WebCrawlerAPIError(INTERRUPTED, "Polling was interrupted") from exc

        logger.info("%s %s still %s after %d polls", self._label, job_id, outcome.status, max_polls)
        return outcome  # type: ignore[return-value]


__all__ = [
    "DelayPolicy",
    "JobPoller",
    "extract_job_id",
    "fixed_delay",
    "hinted_delay",
]
