"""Logging utilities for mtpx modules."""

import logging
from typing import Optional

ROOT_LOGGER_NAME = 'mtpx'


def get_logger(name: str) -> logging.Logger:
    """Get a package logger that inherits from the root logger.

    Names outside the package namespace (for example a bare component
    name like ``'walker'``) are placed under ``mtpx.`` so that
    setup_logging() reaches them.

    The logger propagates to the root logger and only gets a default
    WARNING level when basicConfig() hasn't installed a handler yet.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + '.'):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    logger = logging.getLogger(name)
    logger.propagate = True

    if not logging.getLogger().handlers:
        logger.setLevel(logging.WARNING)

    return logger


def setup_logging(level: int = logging.INFO, handler: Optional[logging.Handler] = None) -> logging.Logger:
    """
    Configure the ``mtpx`` logger tree.

    Child loggers created through get_logger() are reset to NOTSET so
    they follow the level set here.

    Args:
        level: Logging level (default: logging.INFO)
        handler: Optional handler attached to the package logger

    Returns:
        The package root logger
    """
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(level)
    package_logger.propagate = True

    if handler is not None and handler not in package_logger.handlers:
        package_logger.addHandler(handler)

    prefix = ROOT_LOGGER_NAME + '.'
    for logger_name, logger in logging.Logger.manager.loggerDict.items():
        if logger_name.startswith(prefix) and isinstance(logger, logging.Logger):
            logger.setLevel(logging.NOTSET)

    return package_logger
