"""
Logging configuration.

Modules log through ``logging.getLogger(__name__)``. While the TUI owns the
terminal, records are routed to the Textual devtools console (``textual
console``) through Textual's own handler instead of stderr.
"""

from __future__ import annotations

import logging

from textual.logging import TextualHandler

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "WARNING") -> logging.Logger:
    """Attach a TextualHandler to the ``datalens`` logger.

    Calling this more than once replaces the previous handler rather than
    stacking duplicates.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR).

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger("datalens")
    logger.setLevel(level.upper())

    for handler in list(logger.handlers):
        if isinstance(handler, TextualHandler):
            logger.removeHandler(handler)

    handler = TextualHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
