"""structlog configuration for the rewards API."""

import logging

import structlog

from verdict_path.config import Settings

SERVICE_NAME = "verdict-path-rewards"

# Per-statement SQL logs are only wanted while debugging.
_NOISY_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncio")


def service_context(settings: Settings) -> structlog.types.Processor:
    """Processor stamping every event with the service and deployment environment."""

    def _add(_logger: object, _method: str, event_dict: dict) -> dict:
        event_dict.setdefault("service", SERVICE_NAME)
        event_dict.setdefault("environment", settings.environment)
        return event_dict

    return _add


def setup_logging(settings: Settings) -> None:
    """Configure structlog with a JSON renderer in production and console output otherwise."""
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if settings.log_format == "json" else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            service_context(settings),
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if settings.debug else max(level, logging.WARNING))
