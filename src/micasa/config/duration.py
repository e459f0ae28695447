from __future__ import annotations

import re
from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal

from micasa.config.errors import ParseError

_BARE_INT_RE = re.compile(r"^[-+]?[0-9]+$")
_DAY_RE = re.compile(r"^(?P<days>[0-9]+)\s*d$")
_UNIT_GROUP = r"(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:ns|us|µs|μs|ms|s|m|h)"
_STANDARD_RE = re.compile(rf"^(?P<sign>[-+]?)(?P<groups>(?:{_UNIT_GROUP})+)$")
_GROUP_RE = re.compile(r"(?P<number>[0-9]*(?:\.[0-9]*)?)(?P<unit>ns|us|µs|μs|ms|s|m|h)")

# Microseconds per unit; timedelta cannot hold anything finer.
_UNIT_MICROSECONDS = {
    "ns": Decimal("0.001"),
    "us": Decimal(1),
    "µs": Decimal(1),
    "μs": Decimal(1),
    "ms": Decimal(1_000),
    "s": Decimal(1_000_000),
    "m": Decimal(60_000_000),
    "h": Decimal(3_600_000_000),
}

_MAX_MICROSECONDS = Decimal(timedelta.max.days * 86_400 * 1_000_000)

_FORMS_HELP = 'use "30d", unit syntax like "720h" or "1h30m", or a bare integer (seconds)'


def parse_duration(text: str) -> timedelta:
    """Parse a duration string.

    Accepts, in order: a bare integer (seconds), unit-suffixed groups such as
    "10s", "90m", "1h30m" or "500ms", and a whole number of days like "30d".
    Negative values are returned as-is; callers decide whether they are legal.
    """
    value = text.strip()
    try:
        if _BARE_INT_RE.match(value):
            return timedelta(seconds=int(value))
        standard = _STANDARD_RE.match(value)
        if standard:
            return _parse_unit_groups(standard.group("sign"), standard.group("groups"))
        day = _DAY_RE.match(value)
        if day:
            return timedelta(days=int(day.group("days")))
    except OverflowError as exc:
        raise ParseError(f"duration {text!r} is out of range") from exc
    raise ParseError(f"invalid duration {text!r} -- {_FORMS_HELP}")


def _parse_unit_groups(sign: str, groups: str) -> timedelta:
    total = Decimal(0)
    for group in _GROUP_RE.finditer(groups):
        total += Decimal(group.group("number") or "0") * _UNIT_MICROSECONDS[group.group("unit")]
    if total > _MAX_MICROSECONDS:
        raise OverflowError(f"{total} microseconds exceeds timedelta range")
    micros = int(total.quantize(Decimal(1), rounding=ROUND_HALF_UP))
    if sign == "-":
        micros = -micros
    return timedelta(microseconds=micros)


def coerce_duration(value: object, *, field: str) -> timedelta:
    """Route a settings-file value: integers are seconds, strings are parsed."""
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ParseError(f"{field}: expected integer or string, got {type(value).__name__}")
    if isinstance(value, int):
        try:
            return timedelta(seconds=value)
        except OverflowError as exc:
            raise ParseError(f"{field}: duration {value} is out of range") from exc
    try:
        return parse_duration(value)
    except ParseError as exc:
        raise ParseError(f"{field}: {exc}") from exc


def format_duration(value: timedelta) -> str:
    """Render a timedelta compactly, e.g. "30d", "1h30m", "500ms"."""
    micros = (value.days * 86_400 + value.seconds) * 1_000_000 + value.microseconds
    if micros == 0:
        return "0s"
    sign = "-" if micros < 0 else ""
    micros = abs(micros)
    day = 86_400 * 1_000_000
    if micros % day == 0:
        return f"{sign}{micros // day}d"

    parts: list[str] = []
    for unit, size in (("h", 3_600_000_000), ("m", 60_000_000), ("s", 1_000_000), ("ms", 1_000), ("us", 1)):
        count, micros = divmod(micros, size)
        if count:
            parts.append(f"{count}{unit}")
    return sign + "".join(parts)
