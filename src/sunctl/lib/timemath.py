"""Wall-clock and duration helpers for alarm scheduling."""

from __future__ import annotations

import math
import re

MS_PER_MINUTE = 60_000
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR
DEFAULT_RAMP_MS = MS_PER_HOUR
DURATION_PLACEHOLDER = "—"

CLOCK_PATTERN = re.compile(r"^(\d{1,2}):(\d{1,2})$")


class InvalidFormatError(ValueError):
    """Raised when a wall-clock string is not in HH:MM form."""


def round_half_up(value: float) -> int:
    """Round like a browser does: halves go towards positive infinity."""
    return math.floor(value + 0.5)


def parse_clock(value: str) -> int:
    """Convert "HH:MM" to milliseconds since midnight.

    Hour and minute ranges are not checked, so "25:00" parses fine.
    """
    match = CLOCK_PATTERN.match(value.strip())
    if not match:
        raise InvalidFormatError(f"Expected HH:MM, got {value!r}.")
    hour, minute = (int(part) for part in match.groups())
    return (hour * 60 + minute) * MS_PER_MINUTE


def split_clock(value: str) -> tuple[int, int]:
    ms = parse_clock(value)
    return ms // MS_PER_HOUR, (ms % MS_PER_HOUR) // MS_PER_MINUTE


def format_clock(hour: int, minute: int) -> str:
    return f"{hour:02d}:{minute:02d}"


def format_duration(ms: float) -> str:
    total = round_half_up(ms / MS_PER_MINUTE)
    if total <= 0:
        return DURATION_PLACEHOLDER
    if total < 60:
        return f"{total} min"
    hours, minutes = divmod(total, 60)
    return f"{hours}h {minutes}m" if minutes else f"{hours}h"


def resolve_ramp_duration(start: str, end: str) -> int:
    """Ramp length in ms from start to end, rolling end over midnight once."""
    duration = parse_clock(end) - parse_clock(start)
    if duration <= 0:
        duration += MS_PER_DAY
    return duration
