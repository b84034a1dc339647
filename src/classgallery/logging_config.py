"""
Centralized logging configuration for classgallery.

Sets up structlog once for the whole application and exposes small helpers
for the recurring log shapes (errors, user actions, security events).
"""

import logging
import os
import sys
from typing import Any

import structlog

LEVEL_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}


class ColoredJSONRenderer:
    """JSON renderer that tints each line by level when writing to a terminal."""

    def __init__(self, colors: bool = False):
        self.colors = colors
        self.json_renderer = structlog.processors.JSONRenderer()

    def __call__(self, logger: Any, method_name: str, event_dict: dict[str, Any]) -> str:
        rendered = str(self.json_renderer(logger, method_name, event_dict))
        if not self.colors:
            return rendered

        color = LEVEL_COLORS.get(str(event_dict.get("level", "")).upper(), "")
        return f"{color}{rendered}\033[0m"


def get_log_level() -> int:
    """
    Get log level from the LOG_LEVEL environment variable.

    Returns:
        int: Log level constant from the logging module (INFO when unset or unknown)
    """
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(level_name)
    return level if isinstance(level, int) else logging.INFO


def is_development_environment() -> bool:
    """Check if running in a development environment."""
    return os.getenv("ENVIRONMENT", "development").lower() in ["development", "dev", "local"]


def configure_structured_logging() -> None:
    """
    Configure structured logging for the entire application.

    Development gets a console renderer (or colored JSON on a TTY),
    everything else gets one JSON object per line.
    """
    log_level = get_log_level()
    is_dev = is_development_environment()
    use_colors = is_dev and sys.stderr.isatty()

    logging.basicConfig(level=log_level, format="%(message)s", stream=sys.stderr)

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if is_dev:
        processors.append(ColoredJSONRenderer(colors=True) if use_colors else structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.getLogger().setLevel(log_level)

    structlog.get_logger("classgallery.logging").info(
        "logging_configured",
        log_level=logging.getLevelName(log_level),
        environment="development" if is_dev else "production",
        colors_enabled=use_colors,
    )


def get_logger(name: str | None = None) -> Any:
    """
    Get a structured logger instance.

    Args:
        name: Logger name, usually ``__name__``

    Returns:
        structlog.BoundLogger: Configured logger instance
    """
    return structlog.get_logger(name or "classgallery")


def log_performance(operation: str, duration: float, **context: Any) -> None:
    """
    Log how long an operation took.

    Args:
        operation: Name of the operation
        duration: Duration in seconds
        **context: Additional context information
    """
    logger = get_logger("classgallery.performance")
    logger.info("performance_metric", operation=operation, duration_seconds=round(duration, 4), **context)


def log_user_action(user_id: str, action: str, **context: Any) -> None:
    """
    Log user actions for the audit trail.

    Args:
        user_id: Acting user ("admin" or a student identifier)
        action: Action performed
        **context: Additional context information
    """
    logger = get_logger("classgallery.user_actions")
    logger.info("user_action", user_id=user_id, action=action, **context)


def log_error(error: Exception, context: dict[str, Any] | None = None) -> None:
    """
    Log errors with structured context.

    Args:
        error: Exception that occurred
        context: Additional context information
    """
    logger = get_logger("classgallery.errors")

    error_context = {
        "error_type": type(error).__name__,
        "error_message": str(error),
    }
    if context:
        error_context.update(context)

    logger.error("error_occurred", **error_context)


def log_security_event(event_type: str, user_id: str | None = None, **context: Any) -> None:
    """
    Log security-related events such as failed logins.

    Args:
        event_type: Type of security event
        user_id: User identifier (if applicable)
        **context: Additional context information
    """
    logger = get_logger("classgallery.security")
    logger.warning("security_event", event_type=event_type, user_id=user_id, **context)
