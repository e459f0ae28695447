from __future__ import annotations

from typing import Any


class ConfigError(RuntimeError):
    """Raised when configuration cannot be resolved."""


class ParseError(ConfigError):
    """Malformed settings file, byte size, or duration."""


class SizeOverflowError(ConfigError):
    """A byte size does not fit in a signed 64-bit integer."""


class ValidationError(ConfigError):
    """A resolved value violates its constraint."""

    def __init__(self, field: str, value: Any, constraint: str):
        self.field = field
        self.value = value
        self.constraint = constraint
        super().__init__(f"{field} {constraint}, got {value}")


class ConflictError(ConfigError):
    """Two mutually exclusive settings were both supplied."""
