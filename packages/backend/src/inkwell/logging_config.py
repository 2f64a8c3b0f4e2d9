"""structlog configuration.

Learn: Every module does `logger = structlog.get_logger()` and logs
dotted event names with key/value context, e.g.

    logger.info("auth.login_succeeded", user_id=user.id)

configure_logging() decides how those events are rendered: colored
console output in development, one JSON object per line when
INKWELL_LOG_JSON is set. The request_id bound by RequestIdMiddleware is
merged into every event through structlog's contextvars processor.
"""

import logging

import structlog

from inkwell.config import Settings


def configure_logging(settings: Settings) -> None:
    """Configure structlog (and the stdlib root logger it sits on)."""
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(format="%(message)s", level=level)

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_json
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )
