"""Helper utilities for command line scripts."""

import logging


def configure_logging(verbose: bool = False) -> None:
    """Send engine logs to stderr, at debug level when ``verbose``."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
