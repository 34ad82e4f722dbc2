"""Logging configuration for fsk.

Usage in other modules:
    import logging
    log = logging.getLogger(__name__)

    log.debug("Detailed info for debugging")
    log.info("General operational info")

The log level can be configured via the FSK_LOG_LEVEL environment variable
(DEBUG, INFO, WARNING, ERROR). The default is WARNING so that normal command
output is not interleaved with diagnostics. ``fsk --verbose`` forces DEBUG.
"""

import logging
import os
import sys

PACKAGE_LOGGER = "fsk"


def configure_logging(verbose: bool = False) -> None:
    """Configure logging for the fsk package.

    Call this once at application startup (the CLI group callback does).
    Calling it again replaces the previous handler, so the package logger
    always has exactly one handler bound to the current sys.stderr.
    """
    root_logger = logging.getLogger(PACKAGE_LOGGER)

    if verbose:
        level = logging.DEBUG
    else:
        level_name = os.environ.get("FSK_LOG_LEVEL", "WARNING").upper()
        level = getattr(logging, level_name, logging.WARNING)

    for existing in list(root_logger.handlers):
        root_logger.removeHandler(existing)

    # Use a clean format: [level] logger: message
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt="[%(levelname)s] %(name)s: %(message)s"))

    root_logger.setLevel(level)
    root_logger.addHandler(handler)

    # Prevent propagation to root logger (avoids duplicate messages)
    root_logger.propagate = False
