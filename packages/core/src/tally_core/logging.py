"""Structured logging configuration using structlog."""

import logging
import sys
from typing import Any, Optional

import orjson
import structlog
from structlog.types import Processor

from .config import TallyConfig
from .exceptions import ConfigurationError

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _orjson_serializer(obj: Any, **kwargs: Any) -> str:
    """Serialize a log event to JSON; Decimals and enums fall back to str."""
    return orjson.dumps(obj, default=str).decode("utf-8")


def configure_logging(
    config: Optional[TallyConfig] = None,
    log_level: Optional[str] = None,
) -> None:
    """Configure structlog for the computation core.

    Development mode: ConsoleRenderer with colors for readability.
    Other environments: JSONRenderer with orjson for structured logging.

    Args:
        config: Settings to configure from. Loaded from the environment
            when omitted.
        log_level: Level name overriding the configured one.

    Raises:
        ConfigurationError: If the configured log level is unknown.
    """
    config = config or TallyConfig()

    level_name = (log_level or config.log_level).upper().strip()
    level = _LEVELS.get(level_name)
    if level is None:
        raise ConfigurationError(
            f"Unknown log level: {level_name}",
            config_key="TALLY_LOG_LEVEL",
            expected=", ".join(_LEVELS),
            actual=level_name,
        )

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if config.use_json_logs:
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.EventRenamer("message"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(serializer=_orjson_serializer),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Get a configured structlog logger."""
    return structlog.get_logger(name)
