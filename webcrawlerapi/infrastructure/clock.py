"""Blocking waits between polls.

Polling code never calls :func:`time.sleep` directly; it receives a
:class:`Sleeper` so tests can record delays instead of waiting, and so a
caller can cut a long poll short from another thread.
"""
from __future__ import annotations

import threading
from typing import Protocol


class SleepInterrupted(Exception):
    """Raised by a :class:`Sleeper` when its wait is cancelled."""


class Sleeper(Protocol):
    """Contract for a blocking, interruptible delay."""

    def sleep(self, delay_ms: int) -> None:
        """Block for ``delay_ms`` milliseconds or raise :class:`SleepInterrupted`."""


class EventSleeper:
    """Sleeper backed by a :class:`threading.Event`.

    Calling :meth:`interrupt` from any thread wakes the current wait and every
    later one with :class:`SleepInterrupted` until :meth:`reset` is called.
    """

    def __init__(self, event: threading.Event | None = None) -> None:
        self._event = event or threading.Event()

    def sleep(self, delay_ms: int) -> None:
        if self._event.wait(max(delay_ms, 0) / 1000):
            raise SleepInterrupted(f"sleep of {delay_ms}ms interrupted")

    def interrupt(self) -> None:
        self._event.set()

    def reset(self) -> None:
        self._event.clear()

    @property
    def interrupted(self) -> bool:
        return self._event.is_set()
