"""
Logging configuration for zettel.

Quiet by default; --verbose (or ZETTEL_VERBOSE=1) turns on debug output
to stderr. Stores on disk also keep an operations log of every mutation.
"""

import logging
import sys
import warnings
from logging.handlers import RotatingFileHandler
from pathlib import Path


def configure_quiet_mode(quiet: bool = True):
    """
    Keep library chatter out of the terminal.

    Args:
        quiet: If True, suppress warnings and debug output. If False, leave
            the logging configuration alone.
    """
    if quiet:
        warnings.filterwarnings("ignore")
        logging.getLogger("zettel").setLevel(logging.WARNING)


def enable_debug_mode():
    """Enable debug-level logging to stderr."""
    warnings.filterwarnings("default")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Add stderr handler if not already present
    if not any(isinstance(h, logging.StreamHandler) and h.stream == sys.stderr
               for h in root_logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%H:%M:%S"
        ))
        root_logger.addHandler(handler)

    logging.getLogger("zettel").setLevel(logging.DEBUG)


def configure_ops_log(store_path):
    """Configure a persistent operations log for a zettel store.

    Writes to {store_path}/zettel-ops.log using a rotating file handler
    (1MB max, 3 backups). Always active regardless of --verbose.
    Returns the handler so it can be removed on close().
    """
    log_path = Path(store_path) / "zettel-ops.log"
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        str(log_path),
        maxBytes=1_000_000,
        backupCount=3,
    )
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s %(levelname)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))

    zettel_logger = logging.getLogger("zettel")
    zettel_logger.addHandler(handler)
    # Let INFO through to the ops log even in quiet mode
    if zettel_logger.level == logging.NOTSET or zettel_logger.level > logging.INFO:
        zettel_logger.setLevel(logging.INFO)

    return handler
