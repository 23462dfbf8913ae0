"""
Domain exceptions for the booking core.

Every failure the core reports is one of these kinds. They are raised by the
policy, state machine and services, and translated to HTTP responses in one
place (see shareit.main).
"""

from typing import Any

from fastapi import status


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_payload(self) -> dict[str, Any]:
        return {
            "error": self.message,
            "code": self.code,
            "status": self.status_code,
            "details": self.details,
        }


class NotFoundException(DomainException):
    """Referenced booking, item or user does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class AccessDeniedException(DomainException):
    """Requester lacks the role required for the action."""

    status_code = status.HTTP_403_FORBIDDEN


class SelfBookingException(AccessDeniedException):
    """Owner tried to book their own item."""


class InvalidStateException(DomainException):
    """Transition attempted on a booking that is no longer WAITING."""

    status_code = status.HTTP_409_CONFLICT


class ValidationException(DomainException):
    """Business validation failed (time window, unknown state, comment eligibility)."""

    status_code = status.HTTP_400_BAD_REQUEST


class ItemUnavailableException(ValidationException):
    """Item is flagged as not available for booking."""


class ConflictException(DomainException):
    """Booking window overlaps an approved booking of the same item."""

    status_code = status.HTTP_409_CONFLICT
