"""structlog setup for Chat Relay.

Log lines from structlog and from stdlib loggers (uvicorn, httpx) go through
the same processor chain and a single stdout handler.
"""

import logging
import sys

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

# Event keys whose values must never reach a log sink
SECRET_KEYS = frozenset({"api_key", "gemini_api_key", "x-goog-api-key", "authorization"})

QUIET_LOGGERS = ("httpx", "httpcore", "asyncio")


def redact_secrets(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    for key in event_dict.keys() & SECRET_KEYS:
        event_dict[key] = "***"
    return event_dict


def add_service_name(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    event_dict.setdefault("service", "chat-relay")
    return event_dict


def _pre_chain() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_service_name,
        redact_secrets,
    ]


def _renderer(environment: str) -> tuple[list[Processor], Processor]:
    """Extra processors and final renderer for the environment."""
    if environment.lower() == "production":
        return [structlog.processors.format_exc_info], structlog.processors.JSONRenderer()
    return [], structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def configure_logging(log_level: str = "INFO", environment: str = "development") -> None:
    """Route structlog and stdlib logging to stdout.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        environment: "production" renders JSON lines, anything else a console format
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    extra, renderer = _renderer(environment)
    pre_chain = _pre_chain() + extra

    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)

    # httpx logs every request line at INFO
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.get_logger(__name__).debug(
        "Logging configured", log_level=log_level, environment=environment
    )
