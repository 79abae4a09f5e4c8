"""Main CLI entry point for mfa-cache.

Defines the CLI group and registers all subcommands.

Commands:
    check   - Exit 0 if a fresh token exists for the login (PAM stack)
    add     - Record a successful challenge for the login (PAM stack)
    remove  - Revoke cached tokens (operator)
    hash    - Print the salted hash of a string
    config  - Configuration management commands
        show - Display effective configuration
        path - Show config file path
        init - Write a default configuration file

Usage:
    mfa-cache -h, --help      Show help message
    mfa-cache -v, --version   Show version

Subcommand help:
    mfa-cache COMMAND -h      Show help for a specific command
"""

import sys
from pathlib import Path

import click

from mfa_cache import __version__
from mfa_cache.constants import CACHE_DIR_ENV, CONFIG_ENV

from .commands.add import add
from .commands.check import check
from .commands.config import config
from .commands.hash import hash_cmd
from .commands.remove import remove
from .context import CliState


class ReorderedGroup(click.Group):
    """Custom group that shows commands before custom help text."""

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """Add extra help after commands section."""
        formatter.write(
            """
PAM Setup (e.g. /etc/pam.d/sshd):
  auth [success=1 default=ignore]  pam_exec.so quiet /usr/local/bin/mfa-cache check 60
  auth required                    pam_google_authenticator.so
  auth optional                    pam_exec.so quiet /usr/local/bin/mfa-cache add

  check and add read the login from PAM_USER and PAM_RHOST when the
  user and host are not given as arguments.

Examples:
  mfa-cache check doe 192.168.1.2 60    Is doe's token from 192.168.1.2 under 60 min old?
  mfa-cache add doe 192.168.1.2         Record a token for doe from 192.168.1.2
  mfa-cache remove doe 192.168.1.2      Remove that one token
  mfa-cache remove doe --force          Remove all of doe's tokens
  mfa-cache remove --force              Remove all tokens for all users
"""
        )


@click.group(
    cls=ReorderedGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.option(
    "--config",
    "config_path",
    envvar=CONFIG_ENV,
    type=click.Path(dir_okay=False, path_type=Path),
    help=f"Config file (default: system config location) [env: {CONFIG_ENV}]",
)
@click.option(
    "--cache-dir",
    envvar=CACHE_DIR_ENV,
    type=click.Path(file_okay=False, path_type=Path),
    help=f"Token cache directory, overrides the config [env: {CACHE_DIR_ENV}]",
)
@click.pass_context
def cli(ctx: click.Context, version: bool, config_path: Path | None, cache_dir: Path | None) -> None:
    """mfa-cache: local cache of recent multi-factor logins."""
    if version:
        click.echo(f"mfa-cache {__version__}")
        sys.exit(0)
    ctx.obj = CliState(config_path=config_path, cache_dir=cache_dir)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Register commands
cli.add_command(check)
cli.add_command(add)
cli.add_command(remove)
cli.add_command(hash_cmd)
cli.add_command(config)


def main() -> None:
    """CLI entry point."""
    cli()
