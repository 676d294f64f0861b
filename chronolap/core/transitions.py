"""Transition table for the timer's run-control operations.

``reset``, ``lap`` and the configuration setters are accepted in every phase
and are not listed here.
"""

from __future__ import annotations

from enum import Enum


class Phase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    EXPIRED = "expired"


class Operation(str, Enum):
    START = "start"
    PAUSE = "pause"
    RESUME = "resume"


# (phase, operation) -> phase after the operation. Missing pairs are rejected
# and the engine treats them as silent no-ops. A pause that lands exactly on a
# countdown's zero is later reported as EXPIRED by derive_phase().
TRANSITIONS: dict[tuple[Phase, Operation], Phase] = {
    (Phase.IDLE, Operation.START): Phase.RUNNING,
    (Phase.IDLE, Operation.RESUME): Phase.RUNNING,
    (Phase.RUNNING, Operation.PAUSE): Phase.PAUSED,
    (Phase.PAUSED, Operation.RESUME): Phase.RUNNING,
}


def derive_phase(*, running: bool, countdown: bool, elapsed_ms: int, remaining_ms: int) -> Phase:
    if running:
        return Phase.RUNNING
    if elapsed_ms <= 0:
        return Phase.IDLE
    if countdown and remaining_ms <= 0:
        return Phase.EXPIRED
    return Phase.PAUSED


def next_phase(phase: Phase, operation: Operation) -> Phase | None:
    return TRANSITIONS.get((phase, operation))
