"""
Configuration engine: resolves defaults, the TOML settings file, and
environment variables into one immutable ``Config``.
"""

from __future__ import annotations

from .bytesize import ByteSize, byte_size_from_int, coerce_byte_size, parse_byte_size
from .duration import coerce_duration, format_duration, parse_duration
from .errors import ConfigError, ConflictError, ParseError, SizeOverflowError, ValidationError
from .settings import (
    DEFAULT_BASE_URL,
    DEFAULT_CACHE_TTL,
    DEFAULT_LLM_TIMEOUT,
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_MODEL,
    Config,
    ConfigLayer,
    DocumentsSettings,
    LLMSettings,
    apply_env_overrides,
    config_path,
    default_config,
    load,
    load_from_path,
    read_config_file,
    resolve_cache_ttl,
)
from .template import example_toml

__all__ = [
    "ByteSize",
    "Config",
    "ConfigError",
    "ConfigLayer",
    "ConflictError",
    "DEFAULT_BASE_URL",
    "DEFAULT_CACHE_TTL",
    "DEFAULT_LLM_TIMEOUT",
    "DEFAULT_MAX_FILE_SIZE",
    "DEFAULT_MODEL",
    "DocumentsSettings",
    "LLMSettings",
    "ParseError",
    "SizeOverflowError",
    "ValidationError",
    "apply_env_overrides",
    "byte_size_from_int",
    "coerce_byte_size",
    "coerce_duration",
    "config_path",
    "default_config",
    "example_toml",
    "format_duration",
    "load",
    "load_from_path",
    "parse_byte_size",
    "parse_duration",
    "read_config_file",
    "resolve_cache_ttl",
]
