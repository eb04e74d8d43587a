"""Shared fixtures for CLI tests."""

import sys

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def restore_logger():
    """The CLI callback rebinds loguru to the runner's stderr; point it back afterwards."""
    yield
    logger.remove()
    logger.add(sys.stderr, level="INFO")
