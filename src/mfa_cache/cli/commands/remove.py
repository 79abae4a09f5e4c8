"""Remove command: revoke cached tokens.

Removing more than one token or more than one user's directory requires
--force; without it nothing is deleted.
"""

from __future__ import annotations

import click

from mfa_cache.constants import PAM_RHOST_ENV, PAM_USER_ENV
from mfa_cache.exceptions import CacheStorageError, MultipleTargetsError, UsageError

from ..context import CliState, pass_state, usage_error


@click.command()
@click.option("--force", "-f", is_flag=True, help="Required when removing more than 1 token.")
@click.argument("user", required=False, envvar=PAM_USER_ENV)
@click.argument("rhost", required=False, envvar=PAM_RHOST_ENV)
@pass_state
def remove(state: CliState, force: bool, user: str | None, rhost: str | None) -> None:
    """Remove tokens.

    \b
    mfa-cache remove --force            Remove all tokens for all users
    mfa-cache remove doe --force        Remove all tokens for doe
    mfa-cache remove doe                Remove doe's tokens, error if more than 1
    mfa-cache remove doe 192.168.1.2    Remove the token for doe and that host

    Exit codes:
        0: Removed (or nothing to remove)
        1: Refused (multiple targets without --force) or storage error
        2: Usage error
    """
    try:
        cache = state.build_cache()
        result = cache.remove(user or None, rhost or None, force=force)
    except UsageError as e:
        raise usage_error(e) from e
    except MultipleTargetsError as e:
        raise click.ClickException(str(e)) from e
    except CacheStorageError as e:
        raise click.ClickException(str(e)) from e

    if result.plan.is_empty:
        click.echo("Nothing to remove.")
        return
    click.echo(
        f"Removed {result.markers_removed} token{'s' if result.markers_removed != 1 else ''}"
        f" and {result.namespaces_removed} user director"
        f"{'ies' if result.namespaces_removed != 1 else 'y'}."
    )
    if result.kept_namespaces:
        kept = len(result.kept_namespaces)
        click.echo(f"{kept} user director{'ies' if kept != 1 else 'y'} not empty, kept.", err=True)
