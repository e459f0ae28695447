from __future__ import annotations

import pytest

MICASA_ENV_VARS = (
    "OLLAMA_HOST",
    "MICASA_LLM_MODEL",
    "MICASA_LLM_TIMEOUT",
    "MICASA_MAX_DOCUMENT_SIZE",
    "MICASA_CACHE_TTL",
    "MICASA_CACHE_TTL_DAYS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in MICASA_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
