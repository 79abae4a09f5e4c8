"""Check command: gate for the PAM stack.

Exit codes:
    0: A fresh token exists, the challenge can be skipped
    1: No fresh token (missing, expired, no cache) or a storage error
    2: Usage error
"""

from __future__ import annotations

import sys

import click

from mfa_cache.exceptions import CacheStorageError, UsageError
from mfa_cache.security.identity import resolve_identity
from mfa_cache.utils.validation import parse_minutes

from ..context import CliState, pass_state, usage_error


def split_check_args(args: tuple[str, ...]) -> tuple[str | None, str | None, str | None]:
    """Map positional arguments to (user, remote host, minutes).

    0 args: PAM environment, configured TTL
    1 arg:  PAM environment, MINUTES
    2 args: USER RHOST, configured TTL
    3 args: USER RHOST MINUTES

    Raises:
        UsageError: On any other argument count.
    """
    if len(args) == 0:
        return None, None, None
    if len(args) == 1:
        return None, None, args[0]
    if len(args) == 2:
        return args[0], args[1], None
    if len(args) == 3:
        return args[0], args[1], args[2]
    raise UsageError(f"Expected at most 3 arguments, got {len(args)}")


@click.command()
@click.argument("args", nargs=-1, metavar="[USER RHOST] [MINUTES]")
@pass_state
def check(state: CliState, args: tuple[str, ...]) -> None:
    """Check for a fresh token for USER from RHOST.

    Succeeds if a token for the pair is at most MINUTES old. An older token
    is deleted. USER and RHOST default to PAM_USER and PAM_RHOST, MINUTES to
    the configured ttl_minutes.

    Exit codes:
        0: Token is fresh
        1: No fresh token, or the cache could not be read
        2: Usage error
    """
    try:
        user, remote_host, minutes_arg = split_check_args(args)
        login = resolve_identity(user, remote_host)
        config = state.load_config()
        max_minutes = config.ttl_minutes if minutes_arg is None else parse_minutes(minutes_arg)
        cache = state.build_cache()
        result = cache.check(login.user, login.remote_host, max_minutes)
    except UsageError as e:
        raise usage_error(e) from e
    except CacheStorageError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if not result.valid:
        sys.exit(1)
