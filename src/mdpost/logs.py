"""Logging setup for CLI runs"""

import logging


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_handler: logging.Handler | None = None


def setup_logging(level: str = "WARNING") -> logging.Handler:
    """Route package logs to the current stderr at the given level.

    Replaces the handler added by a previous call, so repeated CLI invocations
    in one process never write to a stale stream.
    """
    global _handler
    logger = logging.getLogger("mdpost")
    if _handler is not None:
        logger.removeHandler(_handler)
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(_handler)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    return _handler
