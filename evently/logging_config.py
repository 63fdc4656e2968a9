"""Logging setup for the API process."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Send application logs to stderr at the configured level.

    Leaves existing root handlers alone (e.g. pytest's capture handler).
    """
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger().setLevel(level.upper())
