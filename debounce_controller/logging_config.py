import logging
import os
import sys

from debounce_controller.domain.constants import LOG_LEVEL_ENV_VAR, PACKAGE_LOGGER_NAME

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: int | str | None = None) -> logging.Logger:
    """Configure the package logger shared by all debounce controllers.

    Only the ``debounce_controller`` logger is touched, so a host
    application's root configuration is left alone. When `level` is
    omitted, ``DEBOUNCE_LOG_LEVEL`` is consulted, falling back to INFO.
    A stdout handler is attached only when nothing upstream would print
    the records already.
    """
    if level is None:
        level = os.getenv(LOG_LEVEL_ENV_VAR, "INFO").upper()
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(level)
    if not package_logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
        package_logger.addHandler(handler)
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Return a named logger. Use as: logger = get_logger(__name__)."""
    return logging.getLogger(name)
