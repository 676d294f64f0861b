"""Redraw loop and control enablement shared by the CLI and web UI."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable

from chronolap.core.engine import TimeEngine
from chronolap.core.formatting import format_time
from chronolap.core.state import TimerMode
from chronolap.core.transitions import Phase


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ControlState:
    start_enabled: bool
    pause_enabled: bool
    resume_enabled: bool
    lap_enabled: bool


@dataclass(frozen=True)
class TickResult:
    text: str
    changed: bool
    expired: bool


RenderCallback = Callable[[str], None]
ExpireCallback = Callable[[], None]


def control_state(engine: TimeEngine) -> ControlState:
    running = engine.running
    countdown_done = engine.mode is TimerMode.COUNTDOWN and engine.visible_time() <= 0
    return ControlState(
        start_enabled=not running and engine.elapsed() == 0,
        pause_enabled=running,
        resume_enabled=not running and not countdown_done,
        lap_enabled=not countdown_done,
    )


class TimerController:
    def __init__(
        self,
        engine: TimeEngine,
        interval_sec: float = 0.05,
        on_render: RenderCallback | None = None,
        on_expire: ExpireCallback | None = None,
    ) -> None:
        self.engine = engine
        self.interval_sec = max(0.01, float(interval_sec))
        self._on_render = on_render
        self._on_expire = on_expire
        self._last_text = ""
        self._stop_event = asyncio.Event()

    @property
    def text(self) -> str:
        return self._last_text

    def tick(self) -> TickResult:
        visible = self.engine.visible_time()
        expired = False
        if self.engine.mode is TimerMode.COUNTDOWN and self.engine.running and visible <= 0:
            self.engine.pause()
            expired = True
            logger.info("Countdown of %dms reached zero", self.engine.target_ms)
            if self._on_expire is not None:
                self._on_expire()

        text = format_time(visible)
        changed = text != self._last_text
        if changed:
            self._last_text = text
            if self._on_render is not None:
                self._on_render(text)
        return TickResult(text=text, changed=changed, expired=expired)

    def force_render(self) -> str:
        self._last_text = ""
        return self.tick().text

    def toggle(self) -> bool:
        """Space-bar behaviour: start from zero, pause while running, else resume."""
        phase = self.engine.phase
        if phase is Phase.IDLE:
            return self.engine.start()
        if phase is Phase.RUNNING:
            return self.engine.pause()
        return self.engine.resume()

    def controls(self) -> ControlState:
        return control_state(self.engine)

    async def run(self) -> None:
        try:
            while not self._stop_event.is_set():
                self.tick()
                try:
                    await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval_sec)
                except asyncio.TimeoutError:
                    pass
        finally:
            self._stop_event.clear()

    def stop(self) -> None:
        self._stop_event.set()
