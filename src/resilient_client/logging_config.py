"""Structured logging for integration test runs.

Local runs get colored console output; CI runs (ENVIRONMENT=production) get
one JSON object per line. Every event is stamped with the application name,
its version and the target service, so logs of several suites running
against different instances can be told apart after collection.
"""

import logging
import sys

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from resilient_client.config import Settings
from resilient_client.config import settings as default_settings


class AppContext:
    """structlog processor adding application and target service fields.

    Fields already bound on the event are left untouched.
    """

    def __init__(self, settings: Settings):
        self.fields = {
            "app": settings.APP_NAME,
            "app_version": settings.APP_VERSION,
            "target": settings.BASE_URL,
        }

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        for key, value in self.fields.items():
            event_dict.setdefault(key, value)
        return event_dict


def _renderer(environment: str) -> tuple[list[Processor], Processor]:
    """Extra shared processors and the final renderer for an environment."""
    if environment.lower() == "production":
        return [structlog.processors.format_exc_info], structlog.processors.JSONRenderer()
    # ConsoleRenderer formats exc_info itself
    return [], structlog.dev.ConsoleRenderer(colors=True)


def configure_logging(
    settings: Settings | None = None,
    log_level: str | None = None,
    environment: str | None = None,
) -> None:
    """Route structlog and stdlib logging through one handler on stdout.

    Args:
        settings: Source of LOG_LEVEL, ENVIRONMENT and the app context
            (default: global settings)
        log_level: Overrides settings.LOG_LEVEL
        environment: Overrides settings.ENVIRONMENT

    Loggers are not cached, so structlog.testing.capture_logs keeps working
    in suites that call this from a conftest.
    """
    settings = settings or default_settings
    log_level = log_level or settings.LOG_LEVEL
    environment = environment or settings.ENVIRONMENT
    level = getattr(logging, log_level.upper(), logging.INFO)

    extra_processors, renderer = _renderer(environment)
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        AppContext(settings),
        *extra_processors,
    ]

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=shared_processors)
    )
    handler.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    # HttpLoggingHook already logs every exchange
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    structlog.get_logger(__name__).info(
        "Logging configured",
        log_level=log_level,
        environment=environment,
        http_logging=settings.HTTP_LOGGING_ENABLED,
    )
