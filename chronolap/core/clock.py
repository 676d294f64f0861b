"""Millisecond clock sources for the time engine."""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Callable


Clock = Callable[[], int]


def system_clock() -> int:
    # Wall time, not monotonic: persisted start epochs must survive a restart.
    return int(time.time() * 1000)


class ManualClock:
    """Clock that only moves when told to. Used for simulation and tests."""

    def __init__(self, start_ms: int = 1_700_000_000_000) -> None:
        self._now_ms = int(start_ms)

    def __call__(self) -> int:
        return self._now_ms

    def advance(self, ms: int) -> int:
        self._now_ms += int(ms)
        return self._now_ms


def iso_from_ms(epoch_ms: int) -> str:
    stamp = datetime.fromtimestamp(epoch_ms / 1000.0, tz=timezone.utc)
    return stamp.isoformat(timespec="milliseconds")
