"""Structured logging setup for the ticketStub service, using structlog.

One shared processor chain (context vars, service name, log level,
timestamps, stack info) feeds either a coloured ConsoleRenderer for local
development or a JSONRenderer in production.  The renderer follows
``APP_ENV`` (default ``"development"``) unless ``json_output`` forces JSON.

Standard-library ``logging`` goes through the same formatter, so uvicorn
records look like ticketStub's own events.  Per-request INFO lines from
httpx/httpcore and uvicorn's access log are raised to WARNING: every
listing lookup and every request is already logged once by the service
or by RequestLoggingMiddleware.
"""

import logging
import os
import sys

import structlog

SERVICE_NAME = "ticket_stub"

# stdlib loggers that would duplicate ticketStub's own request/lookup events.
_QUIET_LOGGERS: dict[str, int] = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "uvicorn.access": logging.WARNING,
}


def _add_service(
    logger: object, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """Stamp every event with the emitting service's name."""
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def configure_logging(log_level: str = "INFO", json_output: bool = False) -> structlog.BoundLogger:
    """Configure structlog and the stdlib bridge for ticketStub.

    Args:
        log_level: Logging level string (DEBUG, INFO, WARNING, ERROR).
        json_output: Force JSON output. When False, uses console rendering in
                     development and JSON when ``APP_ENV=production``.

    Returns:
        A configured structlog BoundLogger.
    """
    level_name = log_level.upper()
    use_json = json_output or os.environ.get("APP_ENV", "development") == "production"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        _add_service,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    renderer: structlog.types.Processor
    if use_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level_name)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *shared_processors,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level_name)

    # DEBUG keeps the transport chatter for troubleshooting.
    for name, level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(logging.NOTSET if level_name == "DEBUG" else level)

    return structlog.get_logger()


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a named structlog logger.

    Calls :func:`configure_logging` with defaults if structlog has not been
    configured yet, so modules can grab a logger at import time.
    """
    if not structlog.is_configured():
        configure_logging()

    return structlog.get_logger(logger_name=name)
