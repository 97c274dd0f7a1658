from __future__ import annotations

import re
from datetime import timedelta

# Seconds per unit.
_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
    "d": 86400.0,
    "w": 604800.0,
}

# Longest units first so "ms" is never read as "m" followed by "s".
_PART_PTN = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h|d|w)")


class DurationError(ValueError):
    """Raised when a duration string cannot be parsed."""


def parse_duration(text: str) -> timedelta:
    """
    Parse a duration string such as "3m", "90d", "24h" or "1h30m".

    Args:
        text: One or more number/unit pairs. A lone "0" is accepted.

    Returns:
        The parsed duration.

    Raises:
        DurationError: If the string is empty, negative, or malformed.
    """
    value = text.strip()
    if value.startswith("-"):
        raise DurationError(f"negative duration {text!r}")

    value = value.removeprefix("+")
    if value == "0":
        return timedelta(0)

    if not value:
        raise DurationError(f"invalid duration {text!r}")

    seconds = 0.0
    position = 0
    while position < len(value):
        match = _PART_PTN.match(value, position)
        if not match:
            raise DurationError(f"invalid duration {text!r}")

        number, unit = match.groups()
        seconds += float(number) * _UNITS[unit]
        position = match.end()

    try:
        return timedelta(seconds=seconds)

    except OverflowError as err:
        raise DurationError(f"duration out of range {text!r}") from err


def format_duration(delta: timedelta) -> str:
    """Return a compact representation of a duration, e.g. "2d4h0m0s"."""
    if delta < timedelta(0):
        return "-" + format_duration(-delta)

    seconds = delta.total_seconds()
    if seconds < 1:
        if seconds == 0:
            return "0s"
        return f"{seconds * 1000:g}ms"

    days, remainder = divmod(seconds, 86400)
    hours, remainder = divmod(remainder, 3600)
    minutes, remainder = divmod(remainder, 60)

    parts: list[str] = []
    if days:
        parts.append(f"{int(days)}d")
    if days or hours:
        parts.append(f"{int(hours)}h")
    if days or hours or minutes:
        parts.append(f"{int(minutes)}m")
    parts.append(f"{round(remainder, 3):g}s")

    return "".join(parts)
