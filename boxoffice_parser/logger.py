"""
Package logging: one stderr handler on "boxoffice_parser", child loggers per module.

stdout stays free for the JSON written by run_parser.py.
"""

import logging
import sys

PACKAGE_LOGGER = "boxoffice_parser"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(level: int = logging.INFO) -> logging.Logger:
    """
    Attach the stderr handler once and set the package log level.

    Later calls (e.g. BoxOfficeParser(log_level=logging.DEBUG)) only change
    the level.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)

    return logger


logger = setup_logger()


def get_module_logger(module_name: str) -> logging.Logger:
    """Child logger such as "boxoffice_parser.page_cache"; inherits the handler and level."""
    return logging.getLogger(f"{PACKAGE_LOGGER}.{module_name}")
