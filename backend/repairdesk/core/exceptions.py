# backend/repairdesk/core/exceptions.py
"""
Domain-specific exceptions for the RepairDesk scheduling backend.

These exceptions provide clear, business-focused error messages
that can be caught and handled appropriately at the API layer.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)


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
        """Convert to an HTTPException carrying the structured payload."""
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when input or business validation fails."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT


class BusinessRuleException(DomainException):
    """Raised when a business rule is violated."""

    status_code = HTTP_422_UNPROCESSABLE


class UnauthorizedException(DomainException):
    """Raised when the caller is not authenticated."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ServiceException(DomainException):
    """Raised when a service operation fails."""

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message or "An error occurred processing your request",
                "code": self.code,
                "details": self.details if self.details else {},
            },
        )


# Specific business exceptions


class InvalidFieldException(ValidationException):
    """Raised when a single input field cannot be parsed."""

    def __init__(self, field: str, value: Any, expected: str):
        super().__init__(
            message=f"Invalid value for '{field}': expected {expected}",
            code="INVALID_FIELD",
            details={"field": field, "value": str(value), "expected": expected},
        )


class SlotUnavailableException(ConflictException):
    """Raised when a requested slot is taken or no longer exists."""

    def __init__(
        self,
        slot_date: str,
        slot_time: str,
        message: Optional[str] = None,
    ):
        super().__init__(
            message=message
            or "The selected time slot is no longer available. Please choose another time.",
            code="SLOT_UNAVAILABLE",
            details={"date": slot_date, "time": slot_time},
        )


class SpecialDateExistsException(ConflictException):
    """Raised when a special date is added twice."""

    def __init__(self, special_date: str):
        super().__init__(
            message=f"A special date already exists for {special_date}",
            code="SPECIAL_DATE_EXISTS",
            details={"date": special_date},
        )


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    This exception is used when data access operations fail,
    such as database connection issues, query failures, or
    constraint violations.
    """


def is_db_pool_exhaustion(exc: Exception) -> bool:
    """Check if an exception indicates DB connection pool exhaustion."""
    error_str = str(exc).lower()
    return "queuepool" in error_str or (
        "timeout" in error_str and ("connection" in error_str or "pool" in error_str)
    )
