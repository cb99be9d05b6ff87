"""
structlog setup for the package.

Log calls are event-named with keyword context, e.g.
    logger.info("event_created", event_id=1, slug="cloud-next-2026")
In production each call renders as one JSON line; elsewhere as coloured
console output. Context bound with structlog.contextvars is merged in.
"""

import logging
import sys

import structlog

from devevent.core.config import get_settings

HANDLER_NAME = "devevent"


def setup_logging() -> None:
    settings = get_settings()

    production = settings.ENVIRONMENT == "production"

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if production:
        processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=[
            *processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ]
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(formatter)

    # Calling setup_logging() again replaces the handler instead of doubling output
    root_logger = logging.getLogger()
    for existing in [h for h in root_logger.handlers if h.get_name() == HANDLER_NAME]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    # The engine logs every statement at INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
