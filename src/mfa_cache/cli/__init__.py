"""Command-line interface for mfa-cache.

Provides the check/add/remove commands called from the PAM stack and by
operators, plus hashing and configuration helpers.
"""

from .main import cli, main

__all__ = ["cli", "main"]
