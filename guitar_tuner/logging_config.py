"""Logging setup for scripts and host applications.

Library modules only create module-level loggers; nothing is configured until
the host calls setup_logging().
"""

import logging
import sys

# Default levels per logger
MODULE_LOG_LEVELS = {
    "guitar_tuner": logging.INFO,
    "guitar_tuner.session": logging.INFO,
    "guitar_tuner.detection_stabilizer": logging.INFO,  # DEBUG shows every vote
    "guitar_tuner.autocorrelation_detector": logging.WARNING,
    # Third-party
    "matplotlib": logging.WARNING,
}

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_console_handler: logging.Handler | None = None


def setup_logging(level: str | None = None) -> None:
    """Install a shared stdout handler and apply per-module levels.

    Args:
        level: If provided, override every guitar_tuner level (e.g. "DEBUG")
    """
    global _console_handler

    if _console_handler is None:
        _console_handler = logging.StreamHandler(sys.stdout)
        _console_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    log_levels = MODULE_LOG_LEVELS.copy()
    if level:
        numeric_level = logging.getLevelName(level.upper())
        if isinstance(numeric_level, int):
            for module_name in log_levels:
                if module_name.startswith("guitar_tuner"):
                    log_levels[module_name] = numeric_level
        else:
            logging.getLogger(__name__).error("Invalid log level: %s", level)

    for module_name, module_level in log_levels.items():
        logger = logging.getLogger(module_name)
        logger.setLevel(module_level)

    # Child loggers propagate to the package logger, so one handler is enough
    package_logger = logging.getLogger("guitar_tuner")
    if _console_handler not in package_logger.handlers:
        package_logger.addHandler(_console_handler)
    package_logger.propagate = False

    package_logger.debug("Logging configuration complete")
