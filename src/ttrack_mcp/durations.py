"""Helpers for converting between millisecond durations and short strings."""

from __future__ import annotations

import re
from datetime import timedelta

_DURATION_PATTERN = re.compile(r"^(?:(\d+)h)?(?:(\d+)m)?(?:(\d+)s)?$")
_ONE_MS = timedelta(milliseconds=1)


def to_millis(delta: timedelta) -> int:
    """Whole milliseconds in ``delta``, floored."""

    return delta // _ONE_MS


def parse_duration(text: str) -> int | None:
    """Parse strings like ``2h``, ``30m`` or ``1h30m15s`` into milliseconds.

    Returns ``None`` when the string is malformed or amounts to zero.
    """

    match = _DURATION_PATTERN.match(text.strip())
    if match is None:
        return None

    hours, minutes, seconds = (int(group) if group else 0 for group in match.groups())
    total_seconds = hours * 3600 + minutes * 60 + seconds
    if total_seconds == 0:
        return None
    return total_seconds * 1000


def format_duration(milliseconds: int) -> str:
    seconds = max(0, milliseconds) // 1000
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)

    if hours:
        return f"{hours}h {minutes}m"
    if minutes:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"


__all__ = ["format_duration", "parse_duration", "to_millis"]
