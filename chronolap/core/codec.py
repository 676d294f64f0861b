"""Persisted payload encoding for the time engine.

The payload is one JSON object stored under a single key:

    {"mode": "stopwatch" | "countdown", "running": bool, "t0": int,
     "accumulated": int, "targetMs": int, "laps": [...], "lastPersistedAt": int}

Decoding is field-by-field: a payload that is not a JSON object is rejected
with ``StateDecodeError``, while individual bad fields fall back to defaults.
"""

from __future__ import annotations

import json
import math
from typing import Any

from chronolap.core.state import EngineState, LapRecord, TimerMode


class StateDecodeError(ValueError):
    """Raised when a persisted engine payload cannot be used at all."""


def state_to_payload(state: EngineState) -> dict[str, Any]:
    return {
        "mode": state.mode.value,
        "running": state.running,
        "t0": state.start_epoch,
        "accumulated": state.accumulated,
        "targetMs": state.target_ms,
        "laps": [lap_to_payload(lap) for lap in state.laps],
        "lastPersistedAt": state.last_persisted_at,
    }


def lap_to_payload(lap: LapRecord) -> dict[str, Any]:
    return {
        "index": lap.index,
        "absoluteMs": lap.absolute_ms,
        "deltaMs": lap.delta_ms,
        "timestampISO": lap.timestamp_iso,
    }


def encode_state(state: EngineState) -> str:
    return json.dumps(state_to_payload(state), ensure_ascii=True)


def decode_state(text: str) -> EngineState:
    try:
        data = json.loads(text)
    except (TypeError, ValueError, RecursionError) as exc:
        raise StateDecodeError(f"Invalid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise StateDecodeError("Engine payload must be an object")

    return EngineState(
        mode=TimerMode.parse(data.get("mode")),
        running=data.get("running") is True,
        start_epoch=_non_negative_int(data.get("t0")),
        accumulated=_non_negative_int(data.get("accumulated")),
        target_ms=_non_negative_int(data.get("targetMs")),
        laps=_decode_laps(data.get("laps")),
        last_persisted_at=_non_negative_int(data.get("lastPersistedAt")),
    )


def _decode_laps(raw: object) -> list[LapRecord]:
    if not isinstance(raw, list):
        return []

    laps: list[LapRecord] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        absolute_ms = _optional_int(item.get("absoluteMs"))
        if absolute_ms is None:
            continue
        absolute_ms = max(0, absolute_ms)
        previous_ms = laps[-1].absolute_ms if laps else 0
        delta_ms = _optional_int(item.get("deltaMs"))
        if delta_ms is None:
            delta_ms = absolute_ms - previous_ms
        stamp = item.get("timestampISO")
        laps.append(
            LapRecord(
                index=len(laps) + 1,
                absolute_ms=absolute_ms,
                delta_ms=delta_ms,
                timestamp_iso=stamp if isinstance(stamp, str) else "",
            )
        )
    return laps


def _optional_int(raw: object) -> int | None:
    # bool is an int subclass; a stray true/false is not a duration.
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float) and math.isfinite(raw):
        return int(raw)
    return None


def _non_negative_int(raw: object) -> int:
    value = _optional_int(raw)
    if value is None:
        return 0
    return max(0, value)
