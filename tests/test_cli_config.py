from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from micasa.cli import app

runner = CliRunner()


def test_config_path_command(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    result = runner.invoke(app, ["config", "path"])
    assert result.exit_code == 0
    assert result.output.strip() == str(tmp_path / "micasa" / "config.toml")


def test_config_example_prints_template() -> None:
    result = runner.invoke(app, ["config", "example"])
    assert result.exit_code == 0
    assert "[llm]" in result.output
    assert "[documents]" in result.output


def test_config_example_writes_file(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "config.toml"
    result = runner.invoke(app, ["config", "example", "--output", str(target)])
    assert result.exit_code == 0
    assert target.read_text(encoding="utf-8").startswith("# micasa configuration")


def test_config_example_refuses_to_overwrite(tmp_path: Path) -> None:
    target = tmp_path / "config.toml"
    target.write_text("keep me", encoding="utf-8")
    result = runner.invoke(app, ["config", "example", "--output", str(target)])
    assert result.exit_code == 1
    assert target.read_text(encoding="utf-8") == "keep me"


def test_config_show_json(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text('[llm]\nmodel = "llama3"\n\n[documents]\nmax_file_size = "1 MiB"\n', encoding="utf-8")
    result = runner.invoke(
        app,
        ["config", "show", "--file", str(path), "--json"],
        env={"OLLAMA_HOST": "http://gpu-box:11434/"},
    )
    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["llm"] == {
        "base_url": "http://gpu-box:11434/v1",
        "model": "llama3",
        "extra_context": "",
        "timeout": "5s",
    }
    assert payload["documents"] == {"max_file_size": 1_048_576, "cache_ttl": "30d"}


def test_config_show_summary_without_file(tmp_path: Path) -> None:
    result = runner.invoke(app, ["config", "show", "--file", str(tmp_path / "nope.toml")])
    assert result.exit_code == 0
    assert "not found, using defaults" in result.output
    assert "max_file_size = 50 MiB (52428800 bytes)" in result.output
    assert "cache_ttl = 30d" in result.output


def test_config_show_reports_disabled_eviction(tmp_path: Path) -> None:
    result = runner.invoke(
        app,
        ["config", "show", "--file", str(tmp_path / "nope.toml")],
        env={"MICASA_CACHE_TTL": "0"},
    )
    assert result.exit_code == 0
    assert "eviction disabled" in result.output


def test_config_show_error_exits_nonzero(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text('[documents]\ncache_ttl = "1d"\ncache_ttl_days = 1\n', encoding="utf-8")
    result = runner.invoke(app, ["config", "show", "--file", str(path)])
    assert result.exit_code == 1
    assert "cannot both be set" in result.output


def test_config_show_undecodable_file_exits_nonzero(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_bytes(b'[llm]\nmodel = "\xff"\n')
    result = runner.invoke(app, ["config", "show", "--file", str(path)])
    assert result.exit_code == 1
    assert "parse" in result.output
