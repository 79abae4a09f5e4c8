"""Config command group for mfa-cache CLI.

Provides configuration management subcommands.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from mfa_cache.config import AppConfig, get_config_path

from ..context import CliState, pass_state


@click.group()
def config() -> None:
    """Configuration management commands."""
    pass


@config.command("show")
@click.option("--field", "field_name", help="Print only this top-level field")
@pass_state
def config_show(state: CliState, field_name: str | None) -> None:
    """Display effective configuration.

    Shows the config file merged with defaults and command-line overrides.
    """
    data = state.load_config().model_dump()
    if field_name is None:
        click.echo(json.dumps(data, indent=2))
        return
    if field_name not in data:
        click.echo(f"✗ Unknown field: {field_name}", err=True)
        sys.exit(1)
    value = data[field_name]
    click.echo(json.dumps(value, indent=2) if isinstance(value, dict) else str(value))


@config.command("path")
@pass_state
def config_path_cmd(state: CliState) -> None:
    """Show config file path."""
    path = state.config_path or get_config_path()
    click.echo(str(path))

    if not path.exists():
        click.echo("(file does not exist - built-in defaults apply)", err=True)


@config.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
@click.option("--ttl-minutes", type=click.IntRange(min=0), help="Default freshness window")
@click.option("--audit-log", type=click.Path(dir_okay=False), help="JSONL audit log path")
@pass_state
def config_init(state: CliState, force: bool, ttl_minutes: int | None, audit_log: str | None) -> None:
    """Write a configuration file with default values."""
    path: Path = state.config_path or get_config_path()
    if path.exists() and not force:
        raise click.ClickException(f"Config already exists at {path}. Use --force to overwrite.")

    app_config = AppConfig()
    if state.cache_dir is not None:
        app_config.cache_dir = str(state.cache_dir)
    if ttl_minutes is not None:
        app_config.ttl_minutes = ttl_minutes
    if audit_log is not None:
        app_config.logging.audit_log = audit_log

    try:
        app_config.save_to_file(path)
    except OSError as e:
        raise click.ClickException(f"Cannot write {path}: {e}") from e
    click.echo(f"✓ Configuration written to {path}")
