"""Centralized logging configuration for Fretboard Trainer.

This module provides a consistent way to configure logging across the application.
The curses console renderer owns the terminal while a session runs, so logs go
to a file whenever a log path is configured.
"""

import logging
import sys
from typing import Optional

# Log levels for different modules
MODULE_LOG_LEVELS = {
    # Core modules
    "fretboard_trainer": logging.INFO,
    "fretboard_trainer.main": logging.INFO,
    "fretboard_trainer.app": logging.INFO,
    "fretboard_trainer.core": logging.INFO,
    # Signal processing runs once per audio block, keep it quiet by default
    "fretboard_trainer.audio": logging.WARNING,
    "fretboard_trainer.game": logging.INFO,
    "fretboard_trainer.ui": logging.WARNING,
    "fretboard_trainer.logger": logging.WARNING,
    # Root logger
    "": logging.ERROR,
}

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Shared handler
_handler: Optional[logging.Handler] = None


def _create_handler(log_path: Optional[str]) -> logging.Handler:
    if log_path:
        handler: logging.Handler = logging.FileHandler(log_path, mode="a")
    else:
        handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
    return handler


def setup_logging(level: Optional[str] = None, log_path: Optional[str] = None) -> None:
    """Set up logging configuration for the application.

    Args:
        level: If provided, override all 'fretboard_trainer' log levels with this level (e.g., "DEBUG").
        log_path: Append log records to this file instead of writing them to stdout.
    """
    global _handler

    # Replace the shared handler so a new destination takes effect
    if _handler is not None:
        _handler.close()
    _handler = _create_handler(log_path)

    # Determine log levels
    log_levels = MODULE_LOG_LEVELS.copy()
    if level:
        numeric_level = logging.getLevelName(level.upper())
        if isinstance(numeric_level, int):
            for module_name in log_levels:
                if module_name.startswith("fretboard_trainer"):
                    log_levels[module_name] = numeric_level
        else:
            logging.getLogger(__name__).error(f"Invalid log level: {level}")

    # Apply module-specific levels
    for module_name, module_level in log_levels.items():
        logger = logging.getLogger(module_name if module_name else "")
        logger.setLevel(module_level)

        # Clear existing handlers and add the shared one
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        logger.addHandler(_handler)
        logger.propagate = False

    logging.getLogger("fretboard_trainer").info("Logging configuration complete")
