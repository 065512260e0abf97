"""Process-wide logging setup for stdlib logging and structlog."""
import logging
import sys

import structlog

from core.settings import AppSettings


def configure_logging(app_settings: AppSettings) -> None:
    """Route stdlib and structlog records through one stdout handler.

    JSON lines when JSON_LOGS is set (container deployments), a readable
    console renderer otherwise.
    """
    level = getattr(logging, app_settings.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if app_settings.JSON_LOGS
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
