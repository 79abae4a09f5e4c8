"""Add command: record a successful challenge."""

from __future__ import annotations

import click

from mfa_cache.exceptions import CacheStorageError, UsageError
from mfa_cache.security.identity import resolve_identity

from ..context import CliState, pass_state, usage_error


@click.command()
@click.argument("args", nargs=-1, metavar="[USER RHOST]")
@pass_state
def add(state: CliState, args: tuple[str, ...]) -> None:
    """Add a token for USER from RHOST.

    Without arguments the login is read from PAM_USER and PAM_RHOST. An
    existing token keeps its original timestamp.

    Exit codes:
        0: Token present
        1: The cache could not be written
        2: Usage error
    """
    try:
        if len(args) not in (0, 2):
            raise UsageError(f"Expected 0 or 2 arguments, got {len(args)}")
        login = resolve_identity(*args) if args else resolve_identity(None, None)
        cache = state.build_cache()
        cache.add(login.user, login.remote_host)
    except UsageError as e:
        raise usage_error(e) from e
    except CacheStorageError as e:
        raise click.ClickException(str(e)) from e
