"""File logging helpers shared by every module."""

from functools import cache
from logging import INFO, Logger
from logging.handlers import RotatingFileHandler
from pathlib import Path

from pythonjsonlogger.json import JsonFormatter

from content_api.configs.settings import settings

_FILE_HANDLER_NAME = "content_api_file"


@cache
def _build_file_handler() -> RotatingFileHandler:
    log_file = Path(settings.LOG_FILE)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024, backupCount=5)
    handler.set_name(_FILE_HANDLER_NAME)
    handler.setLevel(INFO)
    handler.setFormatter(
        JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s"),
    )
    return handler


def file_logger(logger: Logger) -> Logger:
    """
    Attach the rotating JSON file handler to a logger.

    The handler is added at most once per logger, and only when
    ``LOG_TO_FILE`` is enabled.

    Args:
        logger: Logger to configure.

    Returns:
        The same logger, for chaining at module import time.
    """
    if not settings.LOG_TO_FILE:
        return logger
    if any(h.get_name() == _FILE_HANDLER_NAME for h in logger.handlers):
        return logger
    logger.addHandler(_build_file_handler())
    return logger


def redact_email(address: str | None) -> str:
    """Reduce an email address to its domain for log output."""
    if not address or "@" not in address:
        return "[unknown]"
    return f"***@{address.rsplit('@', 1)[-1]}"
