"""
Logging for hashcalc.

Importing the package never touches the root logger. Entry points (the CLI
callback and ``create_app``) call ``configure_logging`` once, which attaches
a single stderr handler to the ``hashcalc`` logger so stdout stays reserved
for command output.
"""

import logging
import os
import sys

from dotenv import load_dotenv

ROOT_LOGGER = "hashcalc"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

RESET = "\033[0m"

# level -> (terminal color, GitHub Actions annotation prefix)
LEVEL_STYLES = {
    logging.DEBUG: ("\033[36m", "::debug::"),
    logging.INFO: ("\033[32m", ""),
    logging.WARNING: ("\033[33m", "::warning::"),
    logging.ERROR: ("\033[31m", "::error::"),
    logging.CRITICAL: ("\033[1;31m", "::error::"),
}


def resolve_level(value: str | None) -> str:
    """Normalize a level name, falling back to INFO for unknown values."""
    level = (value or "INFO").upper()
    return level if level in VALID_LOG_LEVELS else "INFO"


def running_in_github_actions() -> bool:
    return os.getenv("GITHUB_ACTIONS") == "true"


class LevelFormatter(logging.Formatter):
    """Colors each record by level, or emits workflow annotations on GitHub Actions."""

    def __init__(self, fmt: str = LOG_FORMAT, github_actions: bool | None = None):
        super().__init__(fmt)
        if github_actions is None:
            github_actions = running_in_github_actions()
        self.github_actions = github_actions

    def format(self, record):
        message = super().format(record)
        color, annotation = LEVEL_STYLES.get(record.levelno, (RESET, ""))
        if self.github_actions:
            return f"{annotation}{message}"
        return f"{color}{message}{RESET}"


class _HashcalcHandler(logging.StreamHandler):
    """Marker type so repeated configuration replaces our handler only."""


def configure_logging(level: str | None = None, stream=None) -> logging.Logger:
    """
    Attach a stderr handler to the ``hashcalc`` logger.

    ``level`` falls back to the LOG_LEVEL environment variable (a ``.env``
    file is honoured), then INFO. Calling again rebinds the handler to the
    current ``sys.stderr``, so the most recent call wins.
    """
    load_dotenv()
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        if isinstance(handler, _HashcalcHandler):
            logger.removeHandler(handler)

    handler = _HashcalcHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(LevelFormatter())
    logger.addHandler(handler)
    logger.setLevel(resolve_level(level or os.getenv("LOG_LEVEL")))
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return the ``hashcalc.<module>`` logger for a dotted module name."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name.split('.')[-1]}")
