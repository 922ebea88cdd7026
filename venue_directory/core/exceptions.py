"""Custom exception classes for the application."""
from typing import Any


class AppException(Exception):
    """Base exception for the application."""

    def __init__(self, message: str, detail: Any = None):
        self.message = message
        self.detail = detail
        super().__init__(message)


class NotFoundError(AppException):
    """Resource not found."""
    pass


class InvalidInputError(AppException):
    """Caller supplied malformed query parameters (pagination, sort key)."""
    pass


class StoreUnavailableError(AppException):
    """The database could not be reached, a query failed, or it timed out."""
    pass
