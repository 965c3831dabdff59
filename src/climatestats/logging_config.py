"""Shared structlog configuration for the CLI and worker processes."""

import logging
import sys

import structlog


def configure_logging(verbose: bool = False) -> None:
    """Configure structured logging to stderr so reports on stdout stay clean.

    Also used as the process-pool initializer, so workers started with spawn
    or forkserver log at the same level and to the same stream as the parent.
    """
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if verbose else logging.INFO
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
