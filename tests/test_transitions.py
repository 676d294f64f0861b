from __future__ import annotations

from chronolap.core.transitions import Operation, Phase, derive_phase, next_phase


def test_derive_phase() -> None:
    assert derive_phase(running=True, countdown=True, elapsed_ms=10, remaining_ms=0) is Phase.RUNNING
    assert derive_phase(running=False, countdown=False, elapsed_ms=0, remaining_ms=0) is Phase.IDLE
    assert derive_phase(running=False, countdown=False, elapsed_ms=5, remaining_ms=-5) is Phase.PAUSED
    assert derive_phase(running=False, countdown=True, elapsed_ms=5, remaining_ms=0) is Phase.EXPIRED
    assert derive_phase(running=False, countdown=True, elapsed_ms=5, remaining_ms=10) is Phase.PAUSED


def test_zero_elapsed_countdown_is_idle_even_without_target() -> None:
    assert derive_phase(running=False, countdown=True, elapsed_ms=0, remaining_ms=0) is Phase.IDLE


def test_table_rejects_invalid_run_control() -> None:
    assert next_phase(Phase.IDLE, Operation.START) is Phase.RUNNING
    assert next_phase(Phase.RUNNING, Operation.PAUSE) is Phase.PAUSED
    assert next_phase(Phase.PAUSED, Operation.RESUME) is Phase.RUNNING

    assert next_phase(Phase.RUNNING, Operation.START) is None
    assert next_phase(Phase.PAUSED, Operation.START) is None
    assert next_phase(Phase.IDLE, Operation.PAUSE) is None
    assert next_phase(Phase.EXPIRED, Operation.RESUME) is None
    assert next_phase(Phase.EXPIRED, Operation.START) is None
