"""Shared fixtures."""

import logging

import pytest

from polyhedral_geometry import config
from polyhedral_geometry.logging_config import PACKAGE_LOGGER


@pytest.fixture
def restore_settings():
    """Put the process-wide settings back after the test."""
    saved = config.get_settings()
    yield
    config._settings = saved


@pytest.fixture
def restore_logger():
    """Undo handler and level changes on the package logger."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    handlers = list(logger.handlers)
    level = logger.level
    yield logger
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)
