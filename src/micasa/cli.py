from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv

from micasa.config import Config, ConfigError, config_path, example_toml, format_duration, load_from_path

app = typer.Typer(help="micasa CLI")
config_app = typer.Typer(help="Inspect and bootstrap the micasa settings file")


def main() -> None:
    """Allow `python -m micasa` execution."""
    app()


app.add_typer(config_app, name="config")


@config_app.command("path")
def show_path() -> None:
    """Print where micasa looks for its settings file."""
    typer.echo(str(config_path()))


@config_app.command("example")
def show_example(
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the example to this file instead of stdout."
    ),
) -> None:
    """Print a commented starter settings file."""
    content = example_toml()
    if output is None:
        typer.echo(content, nl=False)
        return
    if output.exists():
        typer.secho(
            f"{output} already exists -- remove it first or choose a different path",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content, encoding="utf-8")
    typer.echo(f"Wrote example settings to {output}")


@config_app.command("show")
def show_config(
    file: Optional[Path] = typer.Option(
        None, "--file", "-f", help="Settings file to read (default: the standard location)."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the resolved settings as JSON."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging."),
) -> None:
    """Resolve defaults, the settings file, and environment overrides, then print the result."""
    _configure_logging(verbose)
    load_dotenv()
    path = file if file is not None else config_path()
    try:
        cfg = load_from_path(path)
    except ConfigError as exc:
        typer.secho(f"micasa: load config: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    if as_json:
        typer.echo(json.dumps(cfg.to_dict(), indent=2))
        return
    _print_config(cfg, path)


def _print_config(cfg: Config, path: Path) -> None:
    source = "found" if path.exists() else "not found, using defaults"
    typer.echo(f"Settings file: {path} ({source})")
    typer.echo("[llm]")
    typer.echo(f"  base_url = {cfg.llm.base_url}")
    typer.echo(f"  model = {cfg.llm.model}")
    typer.echo(f"  extra_context = {cfg.llm.extra_context or '(none)'}")
    typer.echo(f"  timeout = {format_duration(cfg.llm.timeout)}")
    typer.echo("[documents]")
    typer.echo(f"  max_file_size = {cfg.documents.max_file_size} ({cfg.documents.max_file_size.bytes} bytes)")
    if cfg.documents.eviction_enabled:
        typer.echo(f"  cache_ttl = {format_duration(cfg.documents.cache_ttl)}")
    else:
        typer.echo("  cache_ttl = 0s (eviction disabled)")


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")
