"""Logging setup using structlog with level-based filtering and PII redaction."""

import logging
import sys

import structlog

from config.settings import settings

# Map string log levels to logging constants
LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Event keys whose values are email addresses
EMAIL_KEYS = ("email", "to", "lead_email", "owner_email")


def redact_email(email: str | None) -> str:
    """Mask the local part of an email address for logging.

    Example:
        "jane.doe@example.com" -> "ja***@example.com"
    """
    if not email or "@" not in email:
        return "[REDACTED]"
    local, domain = email.split("@", 1)
    masked = local[:2] + "***" if len(local) > 2 else "***"
    return f"{masked}@{domain}"


def _redact_emails(logger, method_name, event_dict):
    """structlog processor masking email-valued keys."""
    for key in EMAIL_KEYS:
        value = event_dict.get(key)
        if isinstance(value, str):
            event_dict[key] = redact_email(value)
    return event_dict


def setup_logging() -> None:
    """Configure structured logging with level-based filtering.

    Reads LOG_LEVEL and LOG_FORMAT from settings:
    - LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: INFO)
    - LOG_FORMAT: console (colored dev output) or json (production) (default: console)
    """
    log_level = LOG_LEVEL_MAP.get(settings.log_level, logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=log_level,
    )

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        _redact_emails,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Quiet the HTTP stacks used by supabase and the Brevo client
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("hpack").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger instance.

    Args:
        name: Optional logger name for context.

    Returns:
        Configured logger instance.
    """
    if name:
        return structlog.get_logger(name)
    return structlog.get_logger()


# Auto-initialize logging on import
setup_logging()
