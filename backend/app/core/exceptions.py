# backend/app/core/exceptions.py
"""
Domain-specific exceptions for the SkillBridge platform.

These exceptions carry business-focused messages that are caught at the API
layer and converted into the standard error envelope.
"""

from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        """Convert to an HTTPException carrying message, code and details."""
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """
    Raised when input fails validation beyond schema checks.

    When ``field`` names the offending request parameter the envelope carries
    ``errors: [{field, message}]`` like schema validation failures do.
    """

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        field: Optional[str] = None,
    ) -> None:
        super().__init__(message, code=code, details=details)
        self.field = field

    def field_errors(self) -> List[Dict[str, str]]:
        if not self.field:
            return []
        return [{"field": self.field, "message": self.message}]

    def to_http_exception(self) -> HTTPException:
        http_exc = super().to_http_exception()
        errors = self.field_errors()
        if errors:
            http_exc.detail["errors"] = errors
        return http_exc


class BusinessRuleException(DomainException):
    """Raised when a business rule is violated (illegal transition, bad timing)."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT


class UnauthorizedException(DomainException):
    """Raised when user is not authenticated."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def to_http_exception(self) -> HTTPException:
        exc = super().to_http_exception()
        exc.headers = {"WWW-Authenticate": "Bearer"}
        return exc


class ForbiddenException(DomainException):
    """Raised when user lacks permission for an action."""

    status_code = status.HTTP_403_FORBIDDEN


class ServiceException(DomainException):
    """Raised when a service operation fails."""

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "message": "An error occurred processing your request",
                "code": self.code,
                "details": {},
            },
        )


class RepositoryException(Exception):
    """Raised when a repository operation fails."""


# Specific business exceptions


class BookingConflictException(ConflictException):
    """Raised when a booking overlaps another non-terminal booking."""

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        conflicting_booking_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        payload = dict(details or {})
        if conflicting_booking_id:
            payload["conflicting_booking_id"] = conflicting_booking_id
        super().__init__(
            message
            or "Consultant is not available at this time. Please choose another time slot.",
            code="BOOKING_CONFLICT",
            details=payload,
        )


class InvalidStatusTransitionException(BusinessRuleException):
    """Raised when a status change is not present in the transition table."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(
            f"Cannot change status from {current} to {target}",
            code="INVALID_STATUS_TRANSITION",
            details={"from": current, "to": target},
        )


class DuplicateEnrollmentException(ConflictException):
    """Raised when an active or completed enrollment already exists."""

    def __init__(self, message: str = "You are already enrolled in this course") -> None:
        super().__init__(message, code="DUPLICATE_ENROLLMENT")
