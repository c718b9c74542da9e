"""
Logging configuration for the application.

One line per record, pipe-separated, on stdout. Money movements and
lifecycle changes are logged by id only: never log passwords, tokens,
broker credentials or uploaded bytes.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers and the level they are held at.
QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "uvicorn.error": logging.WARNING,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "multipart": logging.WARNING,
    "passlib": logging.ERROR,
}


def configure_logging(level: str = "INFO", sql_echo: bool = False) -> None:
    """Configure application logging.

    Args:
        level: The log level string (DEBUG, INFO, WARNING, ERROR).
        sql_echo: Log every SQL statement (debug deployments only).
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if sql_echo else logging.WARNING
    )
