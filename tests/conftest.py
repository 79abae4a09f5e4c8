"""Shared pytest fixtures."""

from __future__ import annotations

import logging

import pytest

from mfa_cache.constants import SYSTEM_LOGGER_NAME


@pytest.fixture(autouse=True)
def reset_system_logger():
    """Drop handlers the CLI attached to streams that no longer exist."""
    yield
    logger = logging.getLogger(SYSTEM_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
