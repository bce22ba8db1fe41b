"""Logging setup.

Configures standard library logging for the CLI and binds structlog's
filtering logger to the same level so both report consistently. Log output
goes to stderr; stdout is reserved for the preview table and the prompts.
"""

from __future__ import annotations

import logging

import structlog

_QUIET_LOGGERS = ("botocore", "boto3", "urllib3", "s3transfer")


def setup_logging(level: str = "WARNING") -> None:
    """Configure application logging.

    Parameters
    ----------
    level: str
        Logging level name (e.g., "DEBUG", "INFO"). Unknown names fall back
        to WARNING.

    Behavior
    --------
    - Initializes Python's logging with the requested level.
    - Configures structlog with a filtering bound logger at the same level,
      routed through the standard library handlers.
    - Keeps the AWS SDK loggers at WARNING unless DEBUG was requested, since
      botocore logs every request at INFO.
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(
        level=numeric_level,
        format=("%(asctime)s %(levelname)s %(name)s - %(message)s"),
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    logging.getLogger().setLevel(numeric_level)

    sdk_level = logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING
    for logger_name in _QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(sdk_level)

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.KeyValueRenderer(key_order=["event"]),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
    )
