"""
Custom Exceptions for the PG Reporting Engine

This module defines the exception classes raised by repositories and
report services so callers can tell period, storage and cache failures apart.
"""

from typing import Any, Dict, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Standard error codes for the reporting engine"""
    INTERNAL_ERROR = "INTERNAL_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_PERIOD = "INVALID_PERIOD"

    # Database errors
    DATABASE_ERROR = "DATABASE_ERROR"

    # Cache errors
    CACHE_ERROR = "CACHE_ERROR"
    CACHE_SCHEMA_MISMATCH = "CACHE_SCHEMA_MISMATCH"


class BaseAppException(Exception):
    """
    Base exception class for all reporting engine exceptions.

    Provides consistent error handling with structured error information.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format"""
        return {
            "error": {
                "message": self.message,
                "code": self.error_code.value,
                "details": self.details,
                "type": self.__class__.__name__
            }
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


class InvalidPeriodError(BaseAppException):
    """Raised when a report period index or year is out of range"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.INVALID_PERIOD, details)


class DatabaseError(BaseAppException):
    """Raised when the relational store rejects or fails a query"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.DATABASE_ERROR, details)


class ReportCacheError(BaseAppException):
    """Raised when a cached report bundle cannot be read or written"""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: ErrorCode = ErrorCode.CACHE_ERROR,
    ):
        super().__init__(message, error_code, details)


class CacheSchemaError(ReportCacheError):
    """Raised when a cached bundle was written with an unknown serialization version"""

    def __init__(self, found_version: Any, expected_version: int):
        super().__init__(
            f"Cached report schema version {found_version!r} is not supported "
            f"(expected {expected_version})",
            details={"found_version": found_version, "expected_version": expected_version},
            error_code=ErrorCode.CACHE_SCHEMA_MISMATCH,
        )
