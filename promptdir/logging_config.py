"""
Logging configuration for promptdir.

Everything goes to stderr: stdout carries the MCP stdio transport.
"""

import logging
import sys
import warnings

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _has_stderr_handler(logger: logging.Logger) -> bool:
    return any(isinstance(h, logging.StreamHandler) and h.stream == sys.stderr
               for h in logger.handlers)


def configure_quiet_mode(quiet: bool = True):
    """
    Configure logging for normal operation.

    Cache and watcher activity (prompt added/updated/deleted) is reported at
    INFO; in quiet mode only warnings and errors reach stderr.

    Args:
        quiet: If True, show warnings and above. If False, show INFO too.
    """
    if quiet:
        warnings.filterwarnings("ignore", category=DeprecationWarning)

    level = logging.WARNING if quiet else logging.INFO
    logger = logging.getLogger("promptdir")
    logger.setLevel(level)

    if not _has_stderr_handler(logger):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))
        logger.addHandler(handler)

    # watchdog logs every inotify event at DEBUG
    logging.getLogger("watchdog").setLevel(logging.WARNING)


def enable_debug_mode():
    """Enable debug-level logging to stderr."""
    warnings.filterwarnings("default")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    if not _has_stderr_handler(root_logger):
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))
        root_logger.addHandler(handler)

    logging.getLogger("promptdir").setLevel(logging.DEBUG)
    # Propagate to the root handler instead of printing twice
    for h in list(logging.getLogger("promptdir").handlers):
        if isinstance(h, logging.StreamHandler) and h.stream == sys.stderr:
            logging.getLogger("promptdir").removeHandler(h)
    for name in ("mcp", "watchdog"):
        logging.getLogger(name).setLevel(logging.DEBUG)
