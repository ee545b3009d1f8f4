"""Logging configuration for the ``sv`` command."""

import logging
import sys

from .core.constants import PROGRAM_NAME

LOGGER_NAME = "SequenceViewer"

_DEFAULT_FORMAT = PROGRAM_NAME + ": %(levelname)s: %(message)s"
_DEBUG_FORMAT = "%(asctime)s %(threadName)s %(name)s %(levelname)s: %(message)s"


def setup_logging(debug: bool = False) -> logging.Logger:
    """Route package log records to stderr.

    Calling it again replaces the handler, so the level can be raised once
    ``-debug`` has been seen.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, "_sequenceviewer", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler._sequenceviewer = True
    handler.setFormatter(logging.Formatter(_DEBUG_FORMAT if debug else _DEFAULT_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    return logger
