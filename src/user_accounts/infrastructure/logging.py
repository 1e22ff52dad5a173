"""Shared logging configuration helpers for account service processes."""

from __future__ import annotations

import logging

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_SQL_LOGGER_NAME = "sqlalchemy.engine"


def resolve_log_level(level: str) -> int:
    """Map a level name such as `debug` to its numeric value, defaulting to INFO."""

    normalized_level = level.strip().upper() or "INFO"
    resolved = logging.getLevelName(normalized_level)
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(*, level: str, sql_echo: bool = False) -> None:
    """Configure process logging; optionally trace every SQL statement issued."""

    logging.basicConfig(
        level=resolve_log_level(level),
        format=_LOG_FORMAT,
    )
    logging.getLogger(_SQL_LOGGER_NAME).setLevel(logging.INFO if sql_echo else logging.WARNING)
