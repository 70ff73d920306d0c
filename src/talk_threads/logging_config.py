"""Logging configuration for the talk-threads CLI."""

import sys

from loguru import logger

from talk_threads.config import LOG_FORMAT


def configure_logging(*, verbose: bool = False) -> None:
    """Send talk-threads logs to stderr at INFO, or DEBUG when verbose.

    Records from other modules are shown only when verbose.
    """
    logger.remove()
    level = "DEBUG" if verbose else "INFO"

    def only_ours(record: dict) -> bool:
        return verbose or (record["name"] or "").startswith("talk_threads")

    logger.add(sys.stderr, level=level, format=LOG_FORMAT, filter=only_ours)
