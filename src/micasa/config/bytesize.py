from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal

from micasa.config.errors import ParseError, SizeOverflowError

MAX_INT64 = 2**63 - 1
MIN_INT64 = -(2**63)

KIB = 1 << 10
MIB = 1 << 20
GIB = 1 << 30
TIB = 1 << 40

_BYTE_SIZE_RE = re.compile(
    r"^\s*(?P<number>[0-9]+(?:\.[0-9]+)?)\s*(?P<unit>[a-z]+)?\s*$",
    re.IGNORECASE,
)

# Keys are lowercase unit suffixes.
_UNIT_MULTIPLIERS = {
    "": 1,
    "b": 1,
    "kb": 1000,
    "kib": KIB,
    "mb": 1000**2,
    "mib": MIB,
    "gb": 1000**3,
    "gib": GIB,
    "tb": 1000**4,
    "tib": TIB,
}

_UNIT_HELP = "B, KiB, MiB, GiB, TiB, KB, MB, GB, TB"


class ByteSize(int):
    """A size in bytes, parsed from strings like "50 MiB" or bare integers."""

    @property
    def bytes(self) -> int:
        return int(self)

    def __str__(self) -> str:
        n = int(self)
        for unit, size in (("TiB", TIB), ("GiB", GIB), ("MiB", MIB), ("KiB", KIB)):
            if n >= size and n % size == 0:
                return f"{n // size} {unit}"
        return f"{n} B"

    def __repr__(self) -> str:
        return f"ByteSize({int(self)})"


def parse_byte_size(text: str) -> ByteSize:
    """Parse "50 MiB", "1.5 GiB", or "1024" (bytes) into an exact byte count."""
    match = _BYTE_SIZE_RE.match(text)
    if not match:
        raise ParseError(
            f"invalid byte size {text!r} -- use a number with optional unit "
            f"({_UNIT_HELP}), e.g. \"50 MiB\""
        )

    unit = (match.group("unit") or "").lower()
    multiplier = _UNIT_MULTIPLIERS.get(unit)
    if multiplier is None:
        raise ParseError(
            f"unknown byte size unit {match.group('unit')!r} in {text!r} -- "
            f"expected one of {_UNIT_HELP}"
        )

    product = Decimal(match.group("number")) * multiplier
    # Anything at or past MAX_INT64 + 0.5 rounds out of range.
    if product >= Decimal(MAX_INT64) + Decimal("0.5"):
        raise SizeOverflowError(f"byte size {text!r} overflows a 64-bit integer")
    return ByteSize(int(product.quantize(Decimal(1), rounding=ROUND_HALF_UP)))


def byte_size_from_int(value: int) -> ByteSize:
    """Accept an already-typed integer as a byte count."""
    if value > MAX_INT64 or value < MIN_INT64:
        raise SizeOverflowError(f"byte size {value} overflows a 64-bit integer")
    return ByteSize(value)


def coerce_byte_size(value: object, *, field: str) -> ByteSize:
    """Route a settings-file value to the integer or string decoder."""
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ParseError(f"{field}: expected integer or string, got {type(value).__name__}")
    if isinstance(value, int):
        return byte_size_from_int(value)
    try:
        return parse_byte_size(value)
    except ParseError as exc:
        raise ParseError(f"{field}: {exc}") from exc
