"""Singleton logging configuration for applications embedding clmetrics.

setup_logging() configures the root logger once; a second call is a
no-op (guarded by a module-level flag). Library modules never call it
themselves, they only log through ``logging.getLogger(__name__)``.
"""

import logging

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] - %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"

_configured = False


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger and quiet the resolver internals.

    Stack and function resolution log at DEBUG on every report; those
    loggers stay at WARNING unless the requested level is DEBUG.
    """
    global _configured  # noqa: PLW0603
    if _configured:
        return
    _configured = True

    numeric = getattr(logging, level.upper())
    logging.basicConfig(
        level=numeric,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )

    if numeric > logging.DEBUG:
        for name in ("clmetrics.location", "clmetrics.options"):
            logging.getLogger(name).setLevel(logging.WARNING)
