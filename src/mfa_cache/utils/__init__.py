"""Utility helpers for mfa-cache."""
