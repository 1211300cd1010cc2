"""
Logging configuration for the ShopStore state layer.

Configures structlog on top of the standard library logging module so that
every component logs through the same pipeline. The signed-in user's uid is
carried in a context variable and merged into each event, which lets log
lines from repository and query code be attributed to a session.
"""

import logging
import sys
from typing import Optional

import structlog

SERVICE_NAME = "shopstore"


def setup_logging(
    log_level: str = "INFO",
    service_name: str = SERVICE_NAME,
    use_json: bool = False,
) -> structlog.stdlib.BoundLogger:
    """
    Configure application logging.

    JSON rendering is meant for log aggregation, console rendering for
    local development.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        service_name: Name bound onto every log event
        use_json: Render JSON lines instead of console output

    Returns:
        Logger bound to the service name
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    renderer = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger(service_name).bind(service=service_name)


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Name for the logger (typically __name__ of the module)

    Returns:
        Logger instance
    """
    return structlog.get_logger(name or SERVICE_NAME)


def bind_session_uid(uid: Optional[str]) -> None:
    """
    Attach the signed-in user's uid to subsequent log events.

    Passing None clears it (anonymous session).

    Args:
        uid: Identity uid, or None when nobody is signed in
    """
    if uid is None:
        structlog.contextvars.unbind_contextvars("session_uid")
    else:
        structlog.contextvars.bind_contextvars(session_uid=uid)


def get_session_uid() -> Optional[str]:
    """
    Get the uid currently bound to the logging context.

    Returns:
        Bound uid or None
    """
    return structlog.contextvars.get_contextvars().get("session_uid")
