"""
Logging setup for command-line use of CipherCompat.

Library modules only create named loggers under the ``CipherCompat``
namespace; attaching handlers is left to the application, or to
:func:`configure_logging` for the bundled tools.
"""

import logging

from ..config import Settings

ROOT_LOGGER = "CipherCompat"


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """Attach a stream handler to the ``CipherCompat`` logger."""
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level if level is not None else Settings.LOG_LEVEL)

    if not any(getattr(h, "_ciphercompat", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            Settings.LOG_FORMAT, datefmt=Settings.LOG_DATE_FORMAT,
        ))
        handler._ciphercompat = True
        logger.addHandler(handler)
    return logger
