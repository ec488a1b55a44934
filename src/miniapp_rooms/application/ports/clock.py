from __future__ import annotations

from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """UTC wall clock."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


def seconds_since(clock: Clock, unix_ts: int) -> float:
    """Age of a unix timestamp relative to ``clock``; negative if in the future."""
    return clock.now().timestamp() - unix_ts
