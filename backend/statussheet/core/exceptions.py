"""
Custom exceptions for the application.
"""

from typing import Any, Optional


class StatusSheetError(Exception):
    """Base exception for statussheet."""

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class NotFoundError(StatusSheetError):
    """Resource not found."""

    pass


class ValidationError(StatusSheetError):
    """Validation error."""

    pass


class AuthenticationError(StatusSheetError):
    """Authentication failed."""

    pass
