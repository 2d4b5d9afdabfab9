"""Infrastructure layer exports."""

from .clock import EventSleeper, Sleeper, SleepInterrupted
from .transport import HttpxTransport, Transport

__all__ = [
    "EventSleeper",
    "HttpxTransport",
    "SleepInterrupted",
    "Sleeper",
    "Transport",
]
