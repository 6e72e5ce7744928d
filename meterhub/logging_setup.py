"""Logging configuration utilities."""

import logging

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Third-party loggers that are too verbose at INFO.
QUIET_LOGGERS = ("sqlalchemy.engine", "asyncio", "uvicorn.access")


def setup_logging(
    level: str = "INFO",
    format_string: str | None = None,
    quiet_loggers: list[str] | None = None,
) -> None:
    """Configure root logging for the MeterHub API.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Unknown names fall back to INFO.
        format_string: Custom format string for log messages.
        quiet_loggers: Extra logger names to raise to WARNING.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=log_level, format=format_string or DEFAULT_FORMAT)

    for logger_name in (*QUIET_LOGGERS, *(quiet_loggers or [])):
        logging.getLogger(logger_name).setLevel(logging.WARNING)
