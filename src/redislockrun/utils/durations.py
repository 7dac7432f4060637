"""Parse Go-style duration strings such as ``30m``, ``1h30m`` or ``1.5s``."""

from __future__ import annotations

import datetime as dt
import re

_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_COMPONENT = r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)"
_COMPONENT_RE = re.compile(_COMPONENT)
_DURATION_RE = re.compile(rf"([+-]?)((?:{_COMPONENT})+)")


def parse_duration(text: str) -> dt.timedelta:
    """Convert ``text`` into a :class:`datetime.timedelta`.

    A bare ``0`` is accepted; every other value needs a unit.
    """
    value = text.strip()
    if value in {"0", "+0", "-0"}:
        return dt.timedelta(0)
    match = _DURATION_RE.fullmatch(value)
    if not match:
        raise ValueError(f"invalid duration {text!r}")
    sign, body = match.group(1), match.group(2)
    seconds = sum(float(amount) * _UNIT_SECONDS[unit] for amount, unit in _COMPONENT_RE.findall(body))
    if sign == "-":
        seconds = -seconds
    try:
        return dt.timedelta(seconds=seconds)
    except OverflowError as exc:
        raise ValueError(f"duration {text!r} out of range") from exc


def format_duration(value: dt.timedelta) -> str:
    total = int(value.total_seconds())
    hours, rest = divmod(abs(total), 3600)
    minutes, seconds = divmod(rest, 60)
    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if seconds or not parts:
        parts.append(f"{seconds}s")
    return ("-" if total < 0 else "") + "".join(parts)
