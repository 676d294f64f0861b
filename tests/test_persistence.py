from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from chronolap.core.clock import ManualClock
from chronolap.core.codec import StateDecodeError, decode_state, encode_state
from chronolap.core.engine import STORAGE_KEY, TimeEngine
from chronolap.core.state import EngineState, LapRecord, TimerMode
from chronolap.store.kv_store import JsonFileStore, MemoryStore


def test_restore_running_engine_is_continuous() -> None:
    clock = ManualClock(start_ms=1_000_000)
    store = MemoryStore()
    engine = TimeEngine(store, clock)
    engine.start()
    clock.advance(2000)
    engine.pause()
    engine.resume()
    t0 = clock()

    # Process goes away; the wall clock keeps moving.
    clock.advance(45_000)
    restored = TimeEngine(store, clock)

    assert restored.running is True
    assert restored.elapsed() == 2000 + (clock() - t0)
    assert restored.state.start_epoch == clock()
    clock.advance(500)
    assert restored.elapsed() == 47_500


def test_restore_paused_engine_keeps_accumulated() -> None:
    clock = ManualClock()
    store = MemoryStore()
    engine = TimeEngine(store, clock, mode="countdown", target_ms=60_000)
    engine.start()
    clock.advance(1234)
    engine.lap()
    engine.pause()

    clock.advance(999_999)
    restored = TimeEngine(store, clock)
    assert restored.running is False
    assert restored.elapsed() == 1234
    assert restored.mode is TimerMode.COUNTDOWN
    assert restored.target_ms == 60_000
    assert restored.laps == engine.laps


def test_restore_does_not_write() -> None:
    clock = ManualClock()
    store = MemoryStore()
    TimeEngine(store, clock).start()
    before = store.get(STORAGE_KEY)
    clock.advance(5000)
    TimeEngine(store, clock)
    assert store.get(STORAGE_KEY) == before


@pytest.mark.parametrize(
    "payload",
    [
        "",
        "{not json",
        "[]",
        "42",
        "null",
        '"text"',
        '{"accumulated": ' + "1" * 5000 + "}",
        "[" * 100_000 + "]" * 100_000,
    ],
    ids=["empty", "broken", "array", "number", "null", "string", "huge-int", "deep-nesting"],
)
def test_malformed_payload_falls_back_to_default(payload: str) -> None:
    store = MemoryStore({STORAGE_KEY: payload})
    engine = TimeEngine(store, ManualClock())
    assert engine.mode is TimerMode.STOPWATCH
    assert engine.running is False
    assert engine.elapsed() == 0
    assert engine.laps == ()


def test_decode_rejects_non_objects() -> None:
    with pytest.raises(StateDecodeError):
        decode_state("[1, 2]")
    with pytest.raises(StateDecodeError):
        decode_state("{")


def test_decode_defaults_missing_and_invalid_fields() -> None:
    state = decode_state(
        json.dumps(
            {
                "mode": "lap-timer",
                "running": "yes",
                "accumulated": -50,
                "targetMs": True,
                "laps": "none",
            }
        )
    )
    assert state == EngineState()


def test_decode_repairs_lap_sequence() -> None:
    state = decode_state(
        json.dumps(
            {
                "laps": [
                    {"index": 4, "absoluteMs": 100, "deltaMs": 100, "timestampISO": "a"},
                    "garbage",
                    {"index": 9, "absoluteMs": "x"},
                    {"index": 7, "absoluteMs": 400},
                ]
            }
        )
    )
    assert state.laps == [
        LapRecord(index=1, absolute_ms=100, delta_ms=100, timestamp_iso="a"),
        LapRecord(index=2, absolute_ms=400, delta_ms=300, timestamp_iso=""),
    ]


def test_encode_uses_wire_names() -> None:
    state = EngineState(
        mode=TimerMode.COUNTDOWN,
        running=True,
        start_epoch=17,
        accumulated=5,
        target_ms=9,
        laps=[LapRecord(1, 5, 5, "2026-01-01T00:00:00.000+00:00")],
        last_persisted_at=18,
    )
    assert json.loads(encode_state(state)) == {
        "mode": "countdown",
        "running": True,
        "t0": 17,
        "accumulated": 5,
        "targetMs": 9,
        "laps": [
            {
                "index": 1,
                "absoluteMs": 5,
                "deltaMs": 5,
                "timestampISO": "2026-01-01T00:00:00.000+00:00",
            }
        ],
        "lastPersistedAt": 18,
    }
    assert decode_state(encode_state(state)) == state


def test_running_payload_without_start_epoch_runs_from_now() -> None:
    clock = ManualClock()
    store = MemoryStore({STORAGE_KEY: json.dumps({"running": True, "accumulated": 700})})
    engine = TimeEngine(store, clock)
    assert engine.running is True
    assert engine.elapsed() == 700
    clock.advance(300)
    assert engine.elapsed() == 1000


def test_restore_with_clock_behind_start_epoch() -> None:
    clock = ManualClock(start_ms=10_000)
    store = MemoryStore(
        {STORAGE_KEY: json.dumps({"running": True, "t0": 50_000, "accumulated": 200})}
    )
    engine = TimeEngine(store, clock)
    assert engine.elapsed() == 200


def test_json_file_store_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "state.json"
    clock = ManualClock()
    engine = TimeEngine(JsonFileStore(path), clock)
    engine.start()
    clock.advance(750)
    engine.lap()

    assert path.exists()
    assert not path.with_name("state.json.tmp").exists()
    data = json.loads(path.read_text(encoding="utf-8"))
    assert isinstance(data[STORAGE_KEY], str)

    clock.advance(250)
    restored = TimeEngine(JsonFileStore(path), clock)
    assert restored.elapsed() == 1000
    assert restored.laps[0].absolute_ms == 750


def test_json_file_store_keeps_other_keys(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path / "state.json")
    store.set("other", "value")
    store.set(STORAGE_KEY, "{}")
    assert store.get("other") == "value"
    assert store.get(STORAGE_KEY) == "{}"
    assert store.get("missing") is None


def test_json_file_store_ignores_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    path.write_text("{broken", encoding="utf-8")
    store = JsonFileStore(path)
    assert store.get(STORAGE_KEY) is None
    engine = TimeEngine(store, ManualClock())
    assert engine.elapsed() == 0
    engine.start()
    assert store.get(STORAGE_KEY) is not None


def test_json_file_store_ignores_deeply_nested_file(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    path.write_text("[" * 100_000 + "]" * 100_000, encoding="utf-8")
    engine = TimeEngine(JsonFileStore(path), ManualClock())
    assert engine.elapsed() == 0
    assert engine.mode is TimerMode.STOPWATCH


def test_json_file_store_write_failure_is_logged(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    clock = ManualClock()
    engine = TimeEngine(JsonFileStore(blocker / "state.json"), clock)

    with caplog.at_level(logging.ERROR, logger="chronolap.store.kv_store"):
        assert engine.start() is True

    assert engine.running is True
    clock.advance(300)
    assert engine.elapsed() == 300
    assert any("failed" in record.getMessage() for record in caplog.records)
