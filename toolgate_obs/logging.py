"""
Structured Logging (structlog).

Invocation context (tool_id, user_id, stage, request_id) travels as bound
key/value pairs rather than string prefixes. Request ids bound by the API
middleware reach every log line through structlog's contextvars.
"""

import logging
import sys

import structlog

from toolgate_config.settings import Settings

# Libraries that log full request URLs at INFO
_NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging(settings: Settings) -> None:
    """
    Configure structlog for structured logging.

    Output format: JSON (default) or text (dev)
    Includes: request_id (when bound), logger name, level, timestamp
    """
    level = settings.LOG_LEVEL.upper()
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    # Outbound URLs are logged by the executor without header values
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, logging.getLevelName(level)))

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.LOG_FORMAT == "json"
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[*shared_processors, renderer],
        context_class=dict,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get configured logger."""
    return structlog.get_logger(name)
