"""
Configuration resolver: layers built-in defaults, the TOML settings file, and
environment variables into one frozen ``Config`` snapshot.

Every value read from the file or the environment lands in a ``ConfigLayer``
where ``None`` means "not supplied". Defaults are only filled in during final
assembly, so an explicit zero is never confused with an absent value.
"""

from __future__ import annotations

import logging
import os
import re
import tomllib
from dataclasses import dataclass, fields, replace
from datetime import timedelta
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr
from pydantic import ValidationError as PydanticValidationError

from micasa.config.bytesize import MIB, ByteSize, coerce_byte_size, parse_byte_size
from micasa.config.duration import coerce_duration, format_duration, parse_duration
from micasa.config.errors import ConfigError, ConflictError, ParseError, ValidationError

LOGGER = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:11434/v1"
DEFAULT_MODEL = "qwen3"
DEFAULT_LLM_TIMEOUT = timedelta(seconds=5)
DEFAULT_MAX_FILE_SIZE = ByteSize(50 * MIB)
DEFAULT_CACHE_TTL = timedelta(days=30)

API_PATH_SUFFIX = "/v1"
CONFIG_REL_PATH = Path("micasa") / "config.toml"

ENV_OLLAMA_HOST = "OLLAMA_HOST"
ENV_LLM_MODEL = "MICASA_LLM_MODEL"
ENV_LLM_TIMEOUT = "MICASA_LLM_TIMEOUT"
ENV_MAX_DOCUMENT_SIZE = "MICASA_MAX_DOCUMENT_SIZE"
ENV_CACHE_TTL = "MICASA_CACHE_TTL"
ENV_CACHE_TTL_DAYS = "MICASA_CACHE_TTL_DAYS"

_PLAIN_INT_RE = re.compile(r"^[-+]?[0-9]+$", re.ASCII)


@dataclass(frozen=True)
class LLMSettings:
    base_url: str
    model: str
    extra_context: str
    timeout: timedelta


@dataclass(frozen=True)
class DocumentsSettings:
    max_file_size: ByteSize
    cache_ttl: timedelta

    @property
    def eviction_enabled(self) -> bool:
        return self.cache_ttl > timedelta(0)


@dataclass(frozen=True)
class Config:
    llm: LLMSettings
    documents: DocumentsSettings

    def to_dict(self) -> dict[str, Any]:
        return {
            "llm": {
                "base_url": self.llm.base_url,
                "model": self.llm.model,
                "extra_context": self.llm.extra_context,
                "timeout": format_duration(self.llm.timeout),
            },
            "documents": {
                "max_file_size": self.documents.max_file_size.bytes,
                "cache_ttl": format_duration(self.documents.cache_ttl),
            },
        }


@dataclass(frozen=True)
class ConfigLayer:
    """Values supplied by one source; ``None`` means the source left it unset."""

    base_url: str | None = None
    model: str | None = None
    extra_context: str | None = None
    timeout: str | None = None
    max_file_size: ByteSize | None = None
    cache_ttl: timedelta | None = None
    cache_ttl_days: int | None = None

    def merged(self, other: ConfigLayer) -> ConfigLayer:
        """Return a layer where every value set in ``other`` wins."""
        overrides = {
            item.name: getattr(other, item.name)
            for item in fields(other)
            if getattr(other, item.name) is not None
        }
        return replace(self, **overrides)


class _LLMSection(BaseModel):
    base_url: StrictStr | None = None
    model: StrictStr | None = None
    extra_context: StrictStr | None = None
    timeout: StrictStr | None = None

    model_config = ConfigDict(extra="ignore")


class _DocumentsSection(BaseModel):
    max_file_size: StrictInt | StrictStr | None = None
    cache_ttl: StrictInt | StrictStr | None = None
    cache_ttl_days: StrictInt | None = None

    model_config = ConfigDict(extra="ignore")


class _SettingsFile(BaseModel):
    llm: _LLMSection = Field(default_factory=_LLMSection)
    documents: _DocumentsSection = Field(default_factory=_DocumentsSection)

    model_config = ConfigDict(extra="ignore")


def default_config() -> Config:
    """Build a Config holding only built-in defaults."""
    return Config(
        llm=LLMSettings(
            base_url=DEFAULT_BASE_URL,
            model=DEFAULT_MODEL,
            extra_context="",
            timeout=DEFAULT_LLM_TIMEOUT,
        ),
        documents=DocumentsSettings(
            max_file_size=DEFAULT_MAX_FILE_SIZE,
            cache_ttl=DEFAULT_CACHE_TTL,
        ),
    )


def config_path() -> Path:
    """Expected settings file location: $XDG_CONFIG_HOME/micasa/config.toml."""
    base = os.getenv("XDG_CONFIG_HOME")
    config_home = Path(base) if base else Path.home() / ".config"
    return config_home / CONFIG_REL_PATH


def load() -> Config:
    return load_from_path(config_path())


def load_from_path(path: Path | str, environ: Mapping[str, str] | None = None) -> Config:
    """Resolve defaults, the settings file at ``path``, then environment overrides."""
    env = os.environ if environ is None else environ
    layer = read_config_file(Path(path))
    layer = apply_env_overrides(layer, env)
    return _assemble(layer)


def read_config_file(path: Path) -> ConfigLayer:
    """Decode the TOML settings file; a missing file yields an empty layer."""
    if not path.exists():
        LOGGER.debug("No settings file at %s; using defaults", path)
        return ConfigLayer()

    try:
        with path.open("rb") as handle:
            raw = tomllib.load(handle)
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
        raise ParseError(f"parse {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"read {path}: {exc}") from exc

    try:
        document = _SettingsFile.model_validate(raw)
    except PydanticValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
        )
        raise ParseError(f"parse {path}: {problems}") from exc

    llm = document.llm
    docs = document.documents
    try:
        max_file_size = (
            None
            if docs.max_file_size is None
            else coerce_byte_size(docs.max_file_size, field="documents.max_file_size")
        )
        cache_ttl = (
            None if docs.cache_ttl is None else coerce_duration(docs.cache_ttl, field="documents.cache_ttl")
        )
    except ParseError as exc:
        raise ParseError(f"parse {path}: {exc}") from exc

    LOGGER.debug("Loaded settings file %s", path)
    return ConfigLayer(
        base_url=llm.base_url,
        model=llm.model,
        extra_context=llm.extra_context,
        timeout=llm.timeout,
        max_file_size=max_file_size,
        cache_ttl=cache_ttl,
        cache_ttl_days=docs.cache_ttl_days,
    )


def apply_env_overrides(layer: ConfigLayer, environ: Mapping[str, str]) -> ConfigLayer:
    """Overlay recognized environment variables on ``layer``.

    Malformed size and TTL overrides are ignored with a warning and the
    earlier value is kept. The timeout is carried as a raw string and
    validated later, same as the file value.
    """
    overrides: dict[str, Any] = {}

    host = environ.get(ENV_OLLAMA_HOST, "")
    if host:
        host = host.rstrip("/")
        if not host.endswith(API_PATH_SUFFIX):
            host += API_PATH_SUFFIX
        overrides["base_url"] = host

    model = environ.get(ENV_LLM_MODEL, "")
    if model:
        overrides["model"] = model

    timeout = environ.get(ENV_LLM_TIMEOUT, "")
    if timeout:
        overrides["timeout"] = timeout

    max_size = environ.get(ENV_MAX_DOCUMENT_SIZE, "")
    if max_size:
        try:
            overrides["max_file_size"] = parse_byte_size(max_size)
        except ConfigError as exc:
            LOGGER.warning("Ignoring %s=%r: %s", ENV_MAX_DOCUMENT_SIZE, max_size, exc)

    ttl = environ.get(ENV_CACHE_TTL, "")
    if ttl:
        try:
            overrides["cache_ttl"] = parse_duration(ttl)
        except ConfigError as exc:
            LOGGER.warning("Ignoring %s=%r: %s", ENV_CACHE_TTL, ttl, exc)

    ttl_days = environ.get(ENV_CACHE_TTL_DAYS, "")
    if ttl_days:
        if _PLAIN_INT_RE.fullmatch(ttl_days):
            overrides["cache_ttl_days"] = int(ttl_days)
        else:
            LOGGER.warning("Ignoring %s=%r: not an integer", ENV_CACHE_TTL_DAYS, ttl_days)

    if overrides:
        LOGGER.debug("Environment overrides: %s", ", ".join(sorted(overrides)))
    return layer.merged(ConfigLayer(**overrides))


def resolve_cache_ttl(cache_ttl: timedelta | None, cache_ttl_days: int | None) -> timedelta:
    """Reconcile ``cache_ttl`` with the deprecated ``cache_ttl_days``."""
    if cache_ttl is not None and cache_ttl_days is not None:
        raise ConflictError(
            "documents.cache_ttl and documents.cache_ttl_days cannot both be set -- "
            "remove cache_ttl_days (deprecated) and use cache_ttl instead"
        )
    if cache_ttl_days is not None:
        LOGGER.warning(
            'documents.cache_ttl_days is deprecated -- use documents.cache_ttl (e.g. "30d") instead'
        )
        if cache_ttl_days < 0:
            raise ValidationError("documents.cache_ttl_days", cache_ttl_days, "must be non-negative")
        try:
            return timedelta(days=cache_ttl_days)
        except OverflowError as exc:
            raise ValidationError("documents.cache_ttl_days", cache_ttl_days, "is out of range") from exc
    if cache_ttl is not None:
        return cache_ttl
    return DEFAULT_CACHE_TTL


def _resolve_timeout(raw: str | None) -> timedelta:
    if not raw:
        return DEFAULT_LLM_TIMEOUT
    try:
        timeout = parse_duration(raw)
    except ParseError as exc:
        raise ParseError(
            f'llm.timeout: invalid duration {raw!r} -- use syntax like "5s" or "10s"'
        ) from exc
    if timeout <= timedelta(0):
        raise ValidationError("llm.timeout", raw, "must be positive")
    return timeout


def _assemble(layer: ConfigLayer) -> Config:
    base_url = (layer.base_url if layer.base_url is not None else DEFAULT_BASE_URL).rstrip("/")
    cache_ttl = resolve_cache_ttl(layer.cache_ttl, layer.cache_ttl_days)

    timeout = _resolve_timeout(layer.timeout)

    max_file_size = layer.max_file_size if layer.max_file_size is not None else DEFAULT_MAX_FILE_SIZE
    if max_file_size <= 0:
        raise ValidationError("documents.max_file_size", int(max_file_size), "must be positive")

    if cache_ttl < timedelta(0):
        raise ValidationError("documents.cache_ttl", format_duration(cache_ttl), "must be non-negative")

    return Config(
        llm=LLMSettings(
            base_url=base_url,
            model=layer.model if layer.model is not None else DEFAULT_MODEL,
            extra_context=layer.extra_context if layer.extra_context is not None else "",
            timeout=timeout,
        ),
        documents=DocumentsSettings(max_file_size=max_file_size, cache_ttl=cache_ttl),
    )
