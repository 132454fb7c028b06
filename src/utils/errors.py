"""Error taxonomy shared by the store, services and API layers.

Every error carries an HTTP-ish ``status`` so the API layer (and the lead
fallback logic) can branch on it without string matching.
"""

from typing import Any


class DemoServiceError(Exception):
    """Base exception for all demo service errors."""

    status: int = 500

    def __init__(
        self,
        message: str,
        status: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "status": self.status,
            "message": self.message,
            "details": self.details,
        }


class ForbiddenError(DemoServiceError):
    """Caller is not signed in (401) or does not own the resource (403)."""

    status = 403


class NotFoundError(DemoServiceError):
    """Requested item does not exist."""

    status = 404


class ValidationFailure(DemoServiceError):
    """Input failed validation, or a write returned no data."""

    status = 400


class ConditionalCheckFailed(DemoServiceError):
    """A create hit an item that already exists."""

    status = 409


class UpstreamFailure(DemoServiceError):
    """Third-party (CRM/email/network) call failed."""

    status = 502


class MirrorInconsistency(DemoServiceError):
    """Public mirror could not be brought in line with the private demo."""

    status = 500


def not_signed_in() -> ForbiddenError:
    return ForbiddenError("Forbidden: not signed in", status=401)
