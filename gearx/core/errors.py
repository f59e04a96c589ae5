from __future__ import annotations

"""Domain-specific exception hierarchy for the percentile service."""

from typing import Any

__all__ = [
    "DomainError",
    "ValidationError",
    "InvalidPercentileInput",
    "PercentileParseError",
    "PermissionDeniedError",
    "NotFoundError",
    "PercentileMapNotFoundError",
]


class DomainError(Exception):
    """Base class for recoverable domain-level errors."""

    status_code: int = 400
    error_code: str = "domain_error"
    default_message: str = "Domain error"

    def __init__(
        self,
        message: str | None = None,
        *,
        detail: Any | None = None,
        status_code: int | None = None,
    ) -> None:
        final_message = message or self.default_message
        super().__init__(final_message)
        self.message = final_message
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class ValidationError(DomainError, ValueError):
    """Raised when caller-provided data fails validation."""

    error_code = "validation_error"
    default_message = "Invalid data"
    status_code = 400


class InvalidPercentileInput(ValidationError):
    """Raised when percentile map parameters (max marks, table) are unusable."""

    error_code = "invalid_percentile_input"
    default_message = "Invalid percentile map input"


class PercentileParseError(ValidationError):
    """Raised when percentile text yields no usable anchors.

    ``detail`` carries the list of per-line error messages.
    """

    error_code = "percentile_parse_failed"
    status_code = 422
    default_message = "No valid percentile rows found."


class PermissionDeniedError(DomainError):
    """Raised when caller lacks the required privilege."""

    error_code = "permission_denied"
    status_code = 403
    default_message = "Access denied"


class NotFoundError(DomainError):
    """Base class for missing domain resources."""

    error_code = "not_found"
    status_code = 404
    default_message = "Resource not found"


class PercentileMapNotFoundError(NotFoundError):
    """Raised when a test has no stored percentile map."""

    error_code = "percentile_map_not_found"
    default_message = "Percentile map not found"
