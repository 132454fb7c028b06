"""Utility modules."""

from src.utils.errors import (
    ConditionalCheckFailed,
    DemoServiceError,
    ForbiddenError,
    MirrorInconsistency,
    NotFoundError,
    UpstreamFailure,
    ValidationFailure,
)
from src.utils.logger import get_logger, redact_email, setup_logging

__all__ = [
    "setup_logging",
    "get_logger",
    "redact_email",
    "DemoServiceError",
    "ForbiddenError",
    "NotFoundError",
    "ValidationFailure",
    "ConditionalCheckFailed",
    "UpstreamFailure",
    "MirrorInconsistency",
]
