"""Time engine: stopwatch/countdown accounting, laps and persisted state."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

from chronolap.core.clock import Clock, iso_from_ms, system_clock
from chronolap.core.codec import StateDecodeError, decode_state, encode_state, state_to_payload
from chronolap.core.state import EngineState, LapRecord, TimerMode
from chronolap.core.transitions import Operation, Phase, derive_phase, next_phase
from chronolap.store.kv_store import KeyValueStore, MemoryStore


STORAGE_KEY = "stopwatch:v1"

logger = logging.getLogger(__name__)


class TimeEngine:
    """Single timer whose whole state is re-persisted after every mutation.

    Elapsed time is ``accumulated`` (closed run segments) plus the open
    segment since ``start_epoch`` while running. Countdown mode only changes
    what ``visible_time()`` reports; laps always measure elapsed time.
    """

    def __init__(
        self,
        store: KeyValueStore | None = None,
        clock: Clock | None = None,
        *,
        key: str = STORAGE_KEY,
        mode: TimerMode | str = TimerMode.STOPWATCH,
        target_ms: int = 0,
    ) -> None:
        self._store = store if store is not None else MemoryStore()
        self._clock = clock or system_clock
        self._key = key
        self.state = EngineState(mode=TimerMode.parse(mode), target_ms=_clamp_target(target_ms))
        self._restore()

    # Queries

    @property
    def mode(self) -> TimerMode:
        return self.state.mode

    @property
    def running(self) -> bool:
        return self.state.running

    @property
    def target_ms(self) -> int:
        return self.state.target_ms

    @property
    def laps(self) -> tuple[LapRecord, ...]:
        return tuple(self.state.laps)

    @property
    def last_persisted_at(self) -> int:
        return self.state.last_persisted_at

    @property
    def phase(self) -> Phase:
        elapsed = self.elapsed()
        return derive_phase(
            running=self.state.running,
            countdown=self.state.mode is TimerMode.COUNTDOWN,
            elapsed_ms=elapsed,
            remaining_ms=self.state.target_ms - elapsed,
        )

    def elapsed(self) -> int:
        if not self.state.running:
            return self.state.accumulated
        return self.state.accumulated + max(0, self._now() - self.state.start_epoch)

    def remaining(self) -> int:
        return max(0, self.state.target_ms - self.elapsed())

    def visible_time(self) -> int:
        if self.state.mode is TimerMode.COUNTDOWN:
            return self.remaining()
        return self.elapsed()

    def snapshot(self) -> dict[str, Any]:
        return state_to_payload(self.state)

    def to_json(self) -> str:
        return encode_state(self.state)

    # Run control

    def start(self) -> bool:
        if not self._accept(Operation.START):
            return False
        self.state.start_epoch = self._now()
        self.state.running = True
        self._persist()
        return True

    def pause(self) -> bool:
        if not self._accept(Operation.PAUSE):
            return False
        self.state.accumulated += max(0, self._now() - self.state.start_epoch)
        self.state.start_epoch = 0
        self.state.running = False
        self._persist()
        return True

    def resume(self) -> bool:
        if not self._accept(Operation.RESUME):
            return False
        if self.state.mode is TimerMode.COUNTDOWN and self.remaining() <= 0:
            logger.debug("Ignoring resume on an exhausted countdown")
            return False
        self.state.start_epoch = self._now()
        self.state.running = True
        self._persist()
        return True

    def reset(self) -> None:
        self.state.running = False
        self.state.start_epoch = 0
        self.state.accumulated = 0
        self.state.laps = []
        self._persist()

    # Configuration

    def set_countdown_target(self, ms: object) -> int:
        self.state.target_ms = _clamp_target(ms)
        self._persist()
        return self.state.target_ms

    def set_mode(self, mode: TimerMode | str) -> TimerMode:
        self.state.mode = TimerMode.parse(mode)
        self._persist()
        return self.state.mode

    # Laps

    def lap(self) -> LapRecord:
        absolute_ms = self.elapsed()
        previous_ms = self.state.laps[-1].absolute_ms if self.state.laps else 0
        record = LapRecord(
            index=len(self.state.laps) + 1,
            absolute_ms=absolute_ms,
            delta_ms=absolute_ms - previous_ms,
            timestamp_iso=iso_from_ms(self._now()),
        )
        self.state.laps.append(record)
        self._persist()
        return record

    def remove_lap(self, record: LapRecord) -> bool:
        position = next(
            (i for i, lap in enumerate(self.state.laps) if lap is record),
            None,
        )
        if position is None:
            return False

        survivors = self.state.laps[:position] + self.state.laps[position + 1 :]
        # Deltas stay as recorded; only the indices are made dense again.
        self.state.laps = [
            lap if lap.index == i else replace(lap, index=i)
            for i, lap in enumerate(survivors, start=1)
        ]
        self._persist()
        return True

    def remove_lap_at(self, index: int) -> bool:
        for lap in self.state.laps:
            if lap.index == index:
                return self.remove_lap(lap)
        return False

    def clear_laps(self) -> None:
        self.state.laps = []
        self._persist()

    # Internals

    def _now(self) -> int:
        return int(self._clock())

    def _accept(self, operation: Operation) -> bool:
        phase = self.phase
        if next_phase(phase, operation) is None:
            logger.debug("Ignoring %s while %s", operation.value, phase.value)
            return False
        return True

    def _persist(self) -> None:
        self.state.last_persisted_at = self._now()
        self._store.set(self._key, encode_state(self.state))

    def _restore(self) -> None:
        raw = self._store.get(self._key)
        if raw is None:
            return
        try:
            restored = decode_state(raw)
        except StateDecodeError as exc:
            logger.warning("Discarding persisted timer state under %r: %s", self._key, exc)
            return

        if restored.running:
            now = self._now()
            if restored.start_epoch:
                # Fold the time spent away into closed segments, then continue from now.
                restored.accumulated += max(0, now - restored.start_epoch)
            restored.start_epoch = now
        else:
            restored.start_epoch = 0

        self.state = restored
        logger.debug(
            "Restored %s timer (running=%s, accumulated=%dms, laps=%d)",
            restored.mode.value,
            restored.running,
            restored.accumulated,
            len(restored.laps),
        )


def _clamp_target(raw: object) -> int:
    if isinstance(raw, bool):
        return 0
    try:
        value = int(raw)  # type: ignore[call-overload]
    except (TypeError, ValueError, OverflowError):
        try:
            value = int(float(str(raw).strip()))
        except (TypeError, ValueError, OverflowError):
            return 0
    return max(0, value)
