"""
Logging Configuration

Sets up the `salespage` logger hierarchy. Records go to stderr so that
extraction reports and JSON dumps on stdout stay machine-readable.
"""

import logging
import sys

# HTTP/browser libraries that chatter at INFO/DEBUG on every page load
_NOISY_LOGGERS = ("urllib3", "asyncio")

LOG_FORMAT = "%(levelname)-8s %(name)s: %(message)s"


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Configure logging for the application.

    Args:
        verbose: If True, DEBUG for salespage and INFO for HTTP libraries
        quiet: If True, only warnings and errors are shown
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger = logging.getLogger("salespage")
    logger.setLevel(level)
    logger.propagate = False

    # Repeated calls (tests, CLI re-entry) must not stack handlers
    logger.handlers.clear()
    logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.INFO if verbose else logging.WARNING)
