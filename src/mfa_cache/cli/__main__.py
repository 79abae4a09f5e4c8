"""Allow running as ``python -m mfa_cache.cli``."""

from .main import main

main()
