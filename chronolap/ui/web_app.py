"""NiceGUI web UI for Chronolap."""

from __future__ import annotations

from typing import Any

from nicegui import ui

from chronolap.core.config import AppConfig
from chronolap.core.engine import TimeEngine
from chronolap.core.formatting import compose_countdown_ms, format_delta, format_time, split_ms
from chronolap.core.state import LapRecord, TimerMode
from chronolap.store.kv_store import JsonFileStore
from chronolap.ui.controller import TimerController
from chronolap.ui.labels import Labels


def run_web_ui(config: AppConfig | None = None) -> int:
    config = config or AppConfig()
    t = Labels(config.lang)
    engine = TimeEngine(JsonFileStore(config.state_path), key=config.storage_key)

    ui.add_head_html(
        """
        <style>
          body {
            background: radial-gradient(circle at top, #17223f 0%, #0b1220 58%);
            color: #e5e7eb;
            font-family: Arial, "Segoe UI", sans-serif;
          }
          .cl-card {
            background: linear-gradient(180deg, #0f1b35 0%, #132449 100%);
            border: 1px solid rgba(148, 163, 184, 0.22);
            border-radius: 14px;
          }
          .cl-display {
            font-size: 4.5rem;
            font-weight: 700;
            font-variant-numeric: tabular-nums;
            color: #f8fafc;
          }
          .cl-delta { color: #9caecf; }
        </style>
        """
    )

    with ui.column().classes("w-full items-center gap-4"):
        title_label = ui.label("").classes("text-2xl font-semibold tracking-wide")
        with ui.row().classes("items-center gap-3"):
            mode_switch = ui.switch(value=engine.mode is TimerMode.COUNTDOWN)
            mode_label = ui.label("").classes("text-sm")

        with ui.card().classes("cl-card") as countdown_card:
            hours, minutes, seconds, millis = split_ms(engine.target_ms)
            with ui.row().classes("items-end gap-2"):
                cd_hours = ui.number(t("hours"), value=hours, min=0, max=99, format="%d")
                cd_minutes = ui.number(t("minutes"), value=minutes, min=0, max=59, format="%d")
                cd_seconds = ui.number(t("seconds"), value=seconds, min=0, max=59, format="%d")
                cd_millis = ui.number(t("millis"), value=millis, min=0, max=999, format="%d")
                set_btn = ui.button(t("set"))

        display_label = ui.label(format_time(engine.visible_time())).classes("cl-display")

        with ui.row().classes("gap-2"):
            start_btn = ui.button(t("start"))
            pause_btn = ui.button(t("pause"))
            resume_btn = ui.button(t("resume"))
            reset_btn = ui.button(t("reset"))
            lap_btn = ui.button(t("lap"))

        with ui.card().classes("cl-card w-full max-w-xl"):
            with ui.row().classes("w-full items-center justify-between"):
                ui.label(t("laps")).classes("text-lg font-medium")
                clear_laps_btn = ui.button(t("clear")).props("flat")
            laps_column = ui.column().classes("w-full gap-1")

    controller = TimerController(
        engine,
        interval_sec=config.tick_interval_sec,
        on_render=display_label.set_text,
    )

    def sync_buttons() -> None:
        controls = controller.controls()
        start_btn.set_enabled(controls.start_enabled)
        pause_btn.set_enabled(controls.pause_enabled)
        resume_btn.set_enabled(controls.resume_enabled)
        lap_btn.set_enabled(controls.lap_enabled)

    def render_laps() -> None:
        laps_column.clear()
        with laps_column:
            for lap in engine.laps:
                with ui.row().classes("w-full items-center gap-4"):
                    ui.label(f"{lap.index:02d}").classes("font-mono")
                    ui.label(format_time(lap.absolute_ms)).classes("font-mono")
                    ui.label(format_delta(lap.delta_ms)).classes("font-mono cl-delta")
                    ui.button("×", on_click=_remove_handler(lap)).props(
                        f'flat dense aria-label="{t("removeLap")}"'
                    )

    def _remove_handler(lap: LapRecord) -> Any:
        def _remove() -> None:
            engine.remove_lap(lap)
            render_laps()

        return _remove

    def apply_countdown_fields() -> None:
        engine.set_countdown_target(
            compose_countdown_ms(
                cd_hours.value, cd_minutes.value, cd_seconds.value, cd_millis.value
            )
        )
        controller.force_render()
        sync_buttons()

    def apply_mode(mode: TimerMode) -> None:
        engine.set_mode(mode)
        is_countdown = mode is TimerMode.COUNTDOWN
        title_label.set_text(t("titleCountdown") if is_countdown else t("titleStopwatch"))
        mode_label.set_text(t("modeCountdown") if is_countdown else t("modeStopwatch"))
        countdown_card.set_visibility(is_countdown)
        if is_countdown and engine.target_ms == 0:
            apply_countdown_fields()
        controller.force_render()
        sync_buttons()

    def on_start() -> None:
        engine.start()
        sync_buttons()

    def on_pause() -> None:
        engine.pause()
        sync_buttons()

    def on_resume() -> None:
        engine.resume()
        sync_buttons()

    def on_reset() -> None:
        engine.reset()
        render_laps()
        controller.force_render()
        sync_buttons()

    def on_lap() -> None:
        engine.lap()
        render_laps()

    def on_clear_laps() -> None:
        engine.clear_laps()
        render_laps()

    def on_key(event: Any) -> None:
        if not event.action.keydown or event.action.repeat:
            return
        key = str(event.key.name).lower()
        if key == " ":
            controller.toggle()
            sync_buttons()
        elif key == "r":
            on_reset()
        elif key == "l" and controller.controls().lap_enabled:
            on_lap()

    def refresh_ui() -> None:
        result = controller.tick()
        if result.expired:
            sync_buttons()

    mode_switch.on_value_change(
        lambda e: apply_mode(TimerMode.COUNTDOWN if e.value else TimerMode.STOPWATCH)
    )
    set_btn.on_click(apply_countdown_fields)
    start_btn.on_click(on_start)
    pause_btn.on_click(on_pause)
    resume_btn.on_click(on_resume)
    reset_btn.on_click(on_reset)
    lap_btn.on_click(on_lap)
    clear_laps_btn.on_click(on_clear_laps)
    ui.keyboard(on_key=on_key, ignore=["input", "select", "button", "textarea"])

    apply_mode(engine.mode)
    render_laps()
    ui.timer(controller.interval_sec, refresh_ui)
    ui.run(host=config.web_host, port=config.web_port, reload=False, title="Chronolap")
    return 0
