"""Shared fixtures."""

import logging

import pytest
import structlog

from shared.config import VitalsConfig


@pytest.fixture(autouse=True)
def _reset_logging():
    """Undo logging setup done by CLI runs."""
    yield
    structlog.reset_defaults()
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)


@pytest.fixture()
def config():
    return VitalsConfig()
