"""
Logging Configuration

The package only attaches a NullHandler on import; applications call
setup_logging() to get console (and optionally file) output.
"""
import logging
import sys

from .config import get_settings

PACKAGE_LOGGER = "polyhedral_geometry"


def setup_logging(level: int | str | None = None, log_file: str | None = None) -> logging.Logger:
    """
    Configures the logger for the 'polyhedral_geometry' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG or "DEBUG"). Defaults to the
            configured log_level setting.
        log_file: Optional path to save logs to a file.

    Returns:
        The package logger.
    """
    if level is None:
        level = get_settings().log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # Repeated calls replace handlers instead of stacking them
    if logger.hasHandlers():
        logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
    return logger
