"""Shared fixtures for the hashcalc test suite"""

import logging
import os

import pytest

from hashcalc.config import ENV_PREFIX
from hashcalc.logger import ROOT_LOGGER


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep HASHCALC_* variables from the developer shell out of the tests."""
    for name in list(os.environ):
        if name.startswith(ENV_PREFIX):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_hashcalc_logger():
    """Drop handlers bound to streams that CliRunner closes after each invoke."""
    logger = logging.getLogger(ROOT_LOGGER)
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
