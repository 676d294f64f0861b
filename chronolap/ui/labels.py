"""UI label registry."""

from __future__ import annotations


LABELS: dict[str, dict[str, str]] = {
    "es": {
        "titleStopwatch": "Cronómetro",
        "titleCountdown": "Cuenta atrás",
        "modeStopwatch": "Modo: Cronómetro",
        "modeCountdown": "Modo: Cuenta atrás",
        "start": "Start",
        "pause": "Pause",
        "resume": "Resume",
        "reset": "Reset",
        "lap": "Lap",
        "laps": "Parciales",
        "clear": "Limpiar",
        "set": "Fijar",
        "removeLap": "Borrar parcial",
        "hours": "Horas",
        "minutes": "Minutos",
        "seconds": "Segundos",
        "millis": "Milisegundos",
    },
    "en": {
        "titleStopwatch": "Stopwatch",
        "titleCountdown": "Countdown",
        "modeStopwatch": "Mode: Stopwatch",
        "modeCountdown": "Mode: Countdown",
        "start": "Start",
        "pause": "Pause",
        "resume": "Resume",
        "reset": "Reset",
        "lap": "Lap",
        "laps": "Laps",
        "clear": "Clear",
        "set": "Set",
        "removeLap": "Remove lap",
        "hours": "Hours",
        "minutes": "Minutes",
        "seconds": "Seconds",
        "millis": "Milliseconds",
    },
}

DEFAULT_LANG = "es"


class Labels:
    def __init__(self, lang: str = DEFAULT_LANG) -> None:
        self.lang = lang if lang in LABELS else DEFAULT_LANG

    def get(self, key: str) -> str:
        # Unknown keys render as themselves.
        return LABELS[self.lang].get(key, key)

    def __call__(self, key: str) -> str:
        return self.get(key)
