"""Logging setup."""

import logging
from pathlib import Path
from typing import Optional

_HANDLER_MARK = "_phx_handler"


def setup_logging(log_dir: Optional[Path] = None, verbose: bool = False):
    """Setup logging configuration.

    Safe to call more than once: handlers installed by a previous call are
    replaced rather than stacked.
    """
    log_dir = log_dir or (Path.home() / ".cache" / "phx")

    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            logger.removeHandler(handler)
            handler.close()

    # File handler; a read-only home must not stop the CLI from working
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / "phx.log")
    except OSError:
        file_handler = None
    if file_handler is not None:
        file_handler.setLevel(logging.DEBUG)
        file_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        file_handler.setFormatter(file_formatter)
        setattr(file_handler, _HANDLER_MARK, True)
        logger.addHandler(file_handler)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO if verbose else logging.WARNING)
    console_formatter = logging.Formatter('%(levelname)s: %(message)s')
    console_handler.setFormatter(console_formatter)
    setattr(console_handler, _HANDLER_MARK, True)
    logger.addHandler(console_handler)
