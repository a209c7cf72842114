"""Logging configuration for modelmatch.

Modules log through ``logging.getLogger(__name__)``; this module only decides
where those records go and at what level.
"""

import logging
import os
import sys


def configure_logging(level=None, format_string=None):
    """Configure logging for modelmatch.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string for log messages
    """
    # Get level from environment, then from the active configuration
    if level is None:
        from modelmatch.config import get_config

        config = get_config()
        default_level = "DEBUG" if config["debug"] else config["log_level"]
        level = os.environ.get("MODELMATCH_LOG_LEVEL", default_level)

    numeric_level = getattr(logging, str(level).upper(), logging.INFO)

    if format_string is None:
        if numeric_level == logging.DEBUG:
            # More detailed format for debug mode
            format_string = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        else:
            format_string = "%(asctime)s %(levelname)s: %(message)s"

    logging.basicConfig(
        level=numeric_level,
        format=format_string,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,  # Replace any existing configuration
    )

    # Matchers are chatty at DEBUG; keep them quiet unless asked for
    if numeric_level == logging.DEBUG:
        logging.getLogger("modelmatch").setLevel(logging.DEBUG)
    else:
        logging.getLogger("modelmatch.matchers").setLevel(logging.WARNING)
        logging.getLogger("modelmatch.model").setLevel(logging.WARNING)


def get_logger(name):
    """Get a logger instance with the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
