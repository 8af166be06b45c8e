"""Logging configuration for vaultbridge.

Modules log through the standard library:

    import logging
    log = logging.getLogger(__name__)

The level is read from the VAULTBRIDGE_LOG_LEVEL environment variable
(DEBUG, INFO, WARNING, ERROR; default INFO).
"""

import logging
import os
import sys


def configure_logging() -> None:
    """Attach a stderr handler to the package logger.

    Call once at application startup (cli.py); later calls are no-ops.
    """
    root_logger = logging.getLogger("vaultbridge")
    if root_logger.handlers:
        return

    level_name = os.environ.get("VAULTBRIDGE_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            fmt="[%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root_logger.setLevel(level)
    root_logger.addHandler(handler)
    root_logger.propagate = False
