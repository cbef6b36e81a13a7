"""Logging helpers for gherkin-format.

Wraps the standard library logging module so every logger shares the
``gherkin_format`` namespace.

Example:
    >>> from gherkin_format.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Aligning table block")
"""

from __future__ import annotations

import logging

ROOT_LOGGER_NAME = "gherkin_format"


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Args:
        name: Logger name (typically __name__).

    Returns:
        logging.Logger: Logger under the ``gherkin_format.`` prefix.

    Example:
        >>> get_logger("cli").name
        'gherkin_format.cli'
    """
    if not (name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}.")):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(verbose: bool = False) -> None:
    """Attach a stderr handler to the package logger.

    Args:
        verbose: Emit DEBUG records when True, otherwise only warnings.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    # Replace our handler so it always targets the current sys.stderr
    for handler in list(logger.handlers):
        if getattr(handler, "_gherkin_format", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    handler._gherkin_format = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
