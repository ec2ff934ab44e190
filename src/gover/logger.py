"""
Logging configuration for the gover package.

Provides centralized logging with a configurable level. Console output goes
to stderr so that command output on stdout stays clean.
"""

import logging
import sys
from typing import Optional


LOG_FORMAT = "%(levelname)s: %(message)s"


def setup_logger(name: str = "gover", level: str = "WARNING") -> logging.Logger:
    """
    Set up and configure a logger that writes to stderr.

    Args:
        name: Logger name (default: "gover")
        level: Logging level as string ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

    Returns:
        Configured logger instance

    Example:
        >>> logger = setup_logger("gover", level="INFO")
        >>> logger.info("cp src dst")
    """
    logger = logging.getLogger(name)

    # Clear any existing handlers to avoid duplicates
    logger.handlers.clear()

    log_level = getattr(logging, level.upper(), logging.WARNING)
    logger.setLevel(log_level)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))
    logger.addHandler(console_handler)

    logger.propagate = False

    return logger


_default_logger: Optional[logging.Logger] = None


def get_default_logger() -> logging.Logger:
    """
    Get or create the default gover logger.

    Returns:
        Default logger instance with WARNING level and stderr output
    """
    global _default_logger
    if _default_logger is None:
        _default_logger = setup_logger()
    return _default_logger


def configure_logging(level: str = "WARNING") -> None:
    """
    Configure the default gover logger.

    The logger object is reconfigured in place, so module-level references
    obtained earlier through get_default_logger() pick up the new settings.

    Args:
        level: Logging level as string ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
    """
    global _default_logger
    _default_logger = setup_logger(name="gover", level=level)
