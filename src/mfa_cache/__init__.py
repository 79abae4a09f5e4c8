"""mfa-cache: time-bounded success cache for a PAM multi-factor gate."""

__version__ = "0.1.0"
