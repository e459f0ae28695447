from __future__ import annotations

from pathlib import Path

from micasa.config.duration import format_duration
from micasa.config.settings import (
    DEFAULT_BASE_URL,
    DEFAULT_CACHE_TTL,
    DEFAULT_LLM_TIMEOUT,
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_MODEL,
    config_path,
)


def example_toml(path: Path | None = None) -> str:
    """Return a commented starter config. Offered on demand, never written automatically."""
    target = path if path is not None else config_path()
    timeout = format_duration(DEFAULT_LLM_TIMEOUT)
    cache_ttl = format_duration(DEFAULT_CACHE_TTL)
    return f"""# micasa configuration
# Place this file at: {target}

[llm]
# Base URL for an OpenAI-compatible API endpoint.
# Ollama (default): http://localhost:11434/v1
# llama.cpp:        http://localhost:8080/v1
# LM Studio:        http://localhost:1234/v1
# Overridden by OLLAMA_HOST (/v1 is appended when missing).
base_url = "{DEFAULT_BASE_URL}"

# Model name passed in chat requests. Overridden by MICASA_LLM_MODEL.
model = "{DEFAULT_MODEL}"

# Optional: custom context appended to all system prompts.
# Use this to inject domain-specific details about your house, currency, etc.
# extra_context = "My house is a 1920s craftsman in Portland, OR. All budgets are in CAD."

# Timeout for quick LLM server operations (ping, model listing).
# Duration syntax: "5s", "10s", "500ms", "1m30s", a bare integer (seconds),
# or whole days like "1d". Must be positive. Default: "{timeout}".
# Increase if your LLM server is slow to respond. Overridden by MICASA_LLM_TIMEOUT.
# timeout = "{timeout}"

[documents]
# Maximum file size for document imports. Accepts unitized strings
# (B, KB, KiB, MB, MiB, GB, GiB, TB, TiB) or bare integers (bytes).
# Default: {DEFAULT_MAX_FILE_SIZE}. Overridden by MICASA_MAX_DOCUMENT_SIZE.
# max_file_size = "{DEFAULT_MAX_FILE_SIZE}"

# How long to keep extracted document cache entries before evicting on startup.
# Accepts "30d", "720h", or bare integers (seconds). Set to "0s" to disable.
# Default: {cache_ttl}. Overridden by MICASA_CACHE_TTL.
# cache_ttl = "{cache_ttl}"

# Deprecated: whole days to keep cache entries. Use cache_ttl instead;
# setting both is an error. Overridden by MICASA_CACHE_TTL_DAYS.
# cache_ttl_days = {DEFAULT_CACHE_TTL.days}
"""
