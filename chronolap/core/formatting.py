"""Clock-string formatting and countdown field helpers."""

from __future__ import annotations

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE

MAX_COUNTDOWN_HOURS = 99


def split_ms(ms: int) -> tuple[int, int, int, int]:
    total = max(0, int(ms))
    hours, rest = divmod(total, MS_PER_HOUR)
    minutes, rest = divmod(rest, MS_PER_MINUTE)
    seconds, millis = divmod(rest, MS_PER_SECOND)
    return hours, minutes, seconds, millis


def format_time(ms: int) -> str:
    """Render ``ms`` as ``[HH:]MM:SS.mmm``; hours appear only when non-zero."""
    hours, minutes, seconds, millis = split_ms(ms)
    base = f"{minutes:02d}:{seconds:02d}.{millis:03d}"
    if hours:
        return f"{hours:02d}:{base}"
    return base


def format_delta(ms: int) -> str:
    return f"+{format_time(ms)}"


def compose_countdown_ms(
    hours: object = 0,
    minutes: object = 0,
    seconds: object = 0,
    millis: object = 0,
) -> int:
    return (
        _clamped_field(hours, MAX_COUNTDOWN_HOURS) * MS_PER_HOUR
        + _clamped_field(minutes, 59) * MS_PER_MINUTE
        + _clamped_field(seconds, 59) * MS_PER_SECOND
        + _clamped_field(millis, 999)
    )


def _clamped_field(raw: object, upper: int) -> int:
    if raw is None or isinstance(raw, bool):
        return 0
    try:
        value = int(float(str(raw).strip() or 0))
    except (ValueError, OverflowError):
        return 0
    return min(max(value, 0), upper)
