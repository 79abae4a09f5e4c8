"""Hash command: print the salted hash of a string.

Helps an operator find a user's directory under the cache root:
    ls "$(mfa-cache config show --field cache_dir)/$(mfa-cache hash doe)"
"""

import click

from mfa_cache.exceptions import UsageError

from ..context import CliState, pass_state, usage_error


@click.command("hash")
@click.argument("value", metavar="STRING")
@pass_state
def hash_cmd(state: CliState, value: str) -> None:
    """Hash STRING (typically a username) with the host name as salt."""
    try:
        digest = state.hasher().hash(value)
    except UsageError as e:
        raise usage_error(e) from e
    click.echo(digest)
