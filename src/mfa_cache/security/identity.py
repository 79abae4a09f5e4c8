"""Login identity from the PAM ambient context.

pam_exec.so exports the login being authenticated as environment variables:
- PAM_USER: the account name
- PAM_RHOST: the remote host, unset or empty for local logins

Commands accept the same values positionally; this module resolves the
positional values against the environment fallback.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from mfa_cache.constants import PAM_RHOST_ENV, PAM_USER_ENV
from mfa_cache.exceptions import UsageError

__all__ = [
    "LoginIdentity",
    "identity_from_environment",
    "resolve_identity",
]


@dataclass(frozen=True)
class LoginIdentity:
    """A (user, remote host) pair as seen by the PAM stack.

    Attributes:
        user: Account name, never empty.
        remote_host: Originating host, empty for local logins.
    """

    user: str
    remote_host: str = ""


def identity_from_environment(environ: Mapping[str, str] | None = None) -> LoginIdentity:
    """Read the login identity exported by pam_exec.

    Args:
        environ: Environment mapping (defaults to os.environ).

    Returns:
        LoginIdentity from PAM_USER and PAM_RHOST.

    Raises:
        UsageError: If PAM_USER is unset or empty.
    """
    env = os.environ if environ is None else environ
    user = env.get(PAM_USER_ENV, "")
    if not user:
        raise UsageError(f"No user given and {PAM_USER_ENV} is not set")
    return LoginIdentity(user=user, remote_host=env.get(PAM_RHOST_ENV, ""))


def resolve_identity(
    user: str | None,
    remote_host: str | None,
    environ: Mapping[str, str] | None = None,
) -> LoginIdentity:
    """Use positional values when given, otherwise the PAM environment.

    Args:
        user: Explicit user, or None to read PAM_USER.
        remote_host: Explicit remote host, or None to read PAM_RHOST.
        environ: Environment mapping (defaults to os.environ).

    Raises:
        UsageError: If no user can be determined.
    """
    if user is None:
        ambient = identity_from_environment(environ)
        return LoginIdentity(
            user=ambient.user,
            remote_host=ambient.remote_host if remote_host is None else remote_host,
        )
    if not user:
        raise UsageError("User must not be empty")
    return LoginIdentity(user=user, remote_host=remote_host or "")
