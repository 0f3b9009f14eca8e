"""
Logging configuration for the jesterEOS package.

All package modules log through children of the ``"jesterEOS"`` logger, for
example ``"jesterEOS.eos.spline"``. Only the package logger owns a handler,
so a single call to :func:`set_log_level` controls the output of every
module, e.g. the join corrections computed while building spline EOS.
"""

import logging
import sys
from typing import IO, Optional

PACKAGE_LOGGER = "jesterEOS"
DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def setup_logger(
    name: str = PACKAGE_LOGGER,
    level: int = logging.INFO,
    fmt: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """
    Attach a stream handler to a logger unless it already has one.

    Parameters
    ----------
    name : str, optional
        Name of the logger. Default is "jesterEOS".
    level : int, optional
        Level of the logger and its handler. Default is INFO.
    fmt : str, optional
        Format string. If None, uses :data:`DEFAULT_FORMAT`.
    stream : file-like, optional
        Output stream of the handler. Default is ``sys.stdout``.

    Returns
    -------
    logging.Logger
        Configured logger instance.

    Examples
    --------
    >>> from jesterEOS.logging_config import setup_logger
    >>> logger = setup_logger()
    >>> logger.info("Building spline EOS...")
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(level)
    handler = logging.StreamHandler(sys.stdout if stream is None else stream)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(DEFAULT_FORMAT if fmt is None else fmt))
    logger.addHandler(handler)
    # Keep package output out of the root logger
    logger.propagate = False
    return logger


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    """
    Get the logger of a jesterEOS module.

    Modules pass ``__name__``. Loggers below ``"jesterEOS"`` get no handler of
    their own and propagate to the package logger; any other name is set up
    with :func:`setup_logger`.

    Parameters
    ----------
    name : str, optional
        Name of the logger. Default is "jesterEOS".

    Returns
    -------
    logging.Logger
        Logger instance.
    """
    if name.startswith(PACKAGE_LOGGER + "."):
        setup_logger(PACKAGE_LOGGER)
        return logging.getLogger(name)
    return setup_logger(name)


def set_log_level(level: int, name: str = PACKAGE_LOGGER) -> None:
    """
    Change the logging level of a logger and its handlers.

    Parameters
    ----------
    level : int
        New logging level (e.g., logging.DEBUG, logging.WARNING).
    name : str, optional
        Name of the logger to modify. Default is "jesterEOS".

    Examples
    --------
    >>> import logging
    >>> from jesterEOS.logging_config import set_log_level
    >>> set_log_level(logging.DEBUG)  # show join corrections and sample counts
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)


_main_logger = setup_logger(PACKAGE_LOGGER)
