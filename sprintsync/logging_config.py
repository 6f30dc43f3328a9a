"""Logging setup for the API process."""

import logging
import sys

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are too chatty at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "passlib", "sqlalchemy.engine")


class _SprintSyncHandler(logging.StreamHandler):
    """Marker subclass so repeated configuration does not stack handlers."""


def configure_logging(level: str | int = logging.INFO) -> None:
    """Send application logs to stderr with timestamps.

    Safe to call more than once (the app factory runs once per app instance).
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    if not any(isinstance(h, _SprintSyncHandler) for h in root.handlers):
        handler = _SprintSyncHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
