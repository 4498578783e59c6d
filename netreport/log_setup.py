"""Logging setup for the command line entry point.

Library modules only create loggers; handlers are configured here, once,
by whoever runs the program.
"""

import logging
import sys

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(filename)s:%(lineno)d %(message)s"
DEFAULT_DATEFMT = "%H:%M:%S"


def ensure_logging(level: int = logging.INFO, *, force: bool = False) -> None:
    """Ensure the root logger is configured with a StreamHandler to stdout.

    - If the root logger has no handlers, configure one via basicConfig.
    - If handlers exist and `force` is True, replace them.
    - Otherwise, set the root logger level to `level` without replacing handlers.

    This is safe to call multiple times.
    """
    root = logging.getLogger()
    if force or not root.handlers:
        logging.basicConfig(level=level, format=DEFAULT_FORMAT, datefmt=DEFAULT_DATEFMT,
                            stream=sys.stdout, force=force)
    else:
        root.setLevel(level)
    # reportlab is chatty at DEBUG
    logging.getLogger("reportlab").setLevel(logging.WARNING)


def configure_debug(debug: bool) -> None:
    """Set DEBUG level when requested, INFO otherwise."""
    ensure_logging(logging.DEBUG if debug else logging.INFO)
