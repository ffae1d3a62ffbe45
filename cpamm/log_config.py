"""structlog configuration for the service entrypoint."""

import logging

import structlog


def configure_logging(level: int = logging.INFO, json: bool = False) -> None:
    """Configure structlog for the process.

    Args:
        level: Minimum level to emit
        json: Render JSON lines instead of the console renderer
    """
    renderer = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )
