"""Per-run debug logging."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

DEBUG_LOG = "debug.log"

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def setup_logger(run_dir: Path, verbose: bool = False, logger_name: str = "pestle") -> logging.Logger:
    """
    Point ``logger_name`` at ``run_dir/debug.log`` and return it.

    Handlers left over from a previous run are closed first, so each run
    writes only to its own file. Modules under ``pestle`` log through child
    loggers and reach these handlers by propagation.

    Args:
        run_dir: Run directory; created if missing.
        verbose: Also echo records to stderr.
        logger_name: Logger to configure.
    """
    logger = logging.getLogger(logger_name)
    detach_logger(logger)

    logger.disabled = False
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    run_dir.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(run_dir / DEBUG_LOG, mode="a", encoding="utf-8")
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if verbose:
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setFormatter(formatter)
        logger.addHandler(stderr_handler)

    return logger


def detach_logger(logger: logging.Logger) -> None:
    """Close and remove every handler on ``logger``."""
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
