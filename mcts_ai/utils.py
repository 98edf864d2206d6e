"""Logging setup for the command-line scripts."""

import logging
import sys
from typing import Optional


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """Setup logging configuration.

    Search summaries from the engine are logged at DEBUG, so `verbose`
    makes them visible.

    Args:
        verbose: Log at DEBUG instead of INFO
        log_file: Optional log file path
    """
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )
