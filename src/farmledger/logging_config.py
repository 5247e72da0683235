"""Logging setup for the command line."""

import logging
import sys

_LOGGER_PREFIX = "farmledger"
_FORMAT = "%(levelname)s %(name)s: %(message)s"

LEVELS = {0: logging.WARNING, 1: logging.INFO}


class _StderrHandler(logging.Handler):
    """Write to whatever sys.stderr currently is.

    Click's test runner swaps sys.stderr per invocation, so the stream is
    looked up on every record instead of being bound once.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            sys.stderr.write(self.format(record) + "\n")
        except Exception:
            self.handleError(record)


def configure_logging(verbosity: int = 0) -> logging.Logger:
    """Configure the farmledger logger hierarchy.

    Args:
        verbosity: 0 for warnings only, 1 for info, 2 or more for debug

    Returns:
        The package root logger
    """
    root_logger = logging.getLogger(_LOGGER_PREFIX)
    root_logger.setLevel(LEVELS.get(verbosity, logging.DEBUG))

    if not any(isinstance(h, _StderrHandler) for h in root_logger.handlers):
        handler = _StderrHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        root_logger.addHandler(handler)
    return root_logger
