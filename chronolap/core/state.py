"""Engine state shared by the time engine, its codec and its consumers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TimerMode(str, Enum):
    STOPWATCH = "stopwatch"
    COUNTDOWN = "countdown"

    @classmethod
    def parse(cls, raw: object) -> TimerMode:
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.STOPWATCH


@dataclass(frozen=True)
class LapRecord:
    index: int
    absolute_ms: int
    delta_ms: int
    timestamp_iso: str = ""


@dataclass
class EngineState:
    mode: TimerMode = TimerMode.STOPWATCH
    running: bool = False
    start_epoch: int = 0
    accumulated: int = 0
    target_ms: int = 0
    laps: list[LapRecord] = field(default_factory=list)
    last_persisted_at: int = 0
