"""querycache Error Handling Module

This module defines the error handling system for querycache, providing
structured error classes with context information.

The error hierarchy follows these principles:
- One Source of Truth: All error codes are defined in ErrorCode enum
- Structured Context: ErrorContext provides additional information
- Database vs cache: DatabaseError is converted into failure envelopes at
  the public boundary, CacheStoreError always propagates to the caller
- Proper Exception Chaining: Original exceptions are preserved
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Union

# Type alias for primitive context values (str, int, float, bool only)
PrimitiveContextValue = Union[str, int, float, bool]

# Default keys to mask in safe_dict
SAFE_DICT_MASK_KEYS: tuple[str, ...] = ("bound_values",)


class ErrorCode(str, Enum):
    """Error codes for querycache.

    This enum serves as the single source of truth for all error codes
    used throughout the package.
    """

    # Input Errors
    INVALID_OPTIONS = "INVALID_OPTIONS"

    # Database Errors
    DATABASE_ERROR = "DATABASE_ERROR"
    DATABASE_CONNECTION_ERROR = "DATABASE_CONNECTION_ERROR"

    # Cache Errors
    CACHE_ERROR = "CACHE_ERROR"
    CACHE_READ_FAILED = "CACHE_READ_FAILED"
    CACHE_WRITE_FAILED = "CACHE_WRITE_FAILED"
    CACHE_SERIALIZATION_ERROR = "CACHE_SERIALIZATION_ERROR"

    # Configuration Errors
    CONFIG_MISSING = "CONFIG_MISSING"
    CONFIG_INVALID = "CONFIG_INVALID"
    FILE_READ_ERROR = "FILE_READ_ERROR"



def _coerce_primitives(value: Any | None) -> dict[str, PrimitiveContextValue] | None:
    """Coerce additional_data values to primitives.

    Converts Path, Enum, Decimal to primitive types.

    Args:
        value: Input dictionary or None

    Returns:
        Dictionary with primitive values only, or None

    Raises:
        TypeError: If value is not a dict or contains unconvertible types
    """
    if value is None:
        return None

    if not isinstance(value, dict):
        error_msg = f"additional_data must be dict, got {type(value).__name__}"
        raise TypeError(error_msg)

    coerced: dict[str, PrimitiveContextValue] = {}
    for key, val in value.items():
        if isinstance(val, (str, int, float, bool)):
            coerced[key] = val
        elif isinstance(val, Path):
            coerced[key] = str(val)
        elif isinstance(val, Enum):
            coerced[key] = val.value
        elif isinstance(val, Decimal):
            coerced[key] = float(val)
        else:
            error_msg = (
                f"Cannot coerce {type(val).__name__} to primitive type. "
                f"Only str, int, float, bool, Path, Enum, Decimal are allowed."
            )
            raise TypeError(error_msg)

    return coerced


@dataclass(frozen=True)
class ErrorContext:
    """Context information for errors.

    Only primitive types (str, int, float, bool) are allowed in
    additional_data so that contexts serialize safely into structured logs.

    Attributes:
        operation: Optional operation name that caused the error
        query: Optional SQL text involved in the error
        cache_key: Optional cache key involved in the error
        additional_data: Optional dict with primitive values only
    """

    operation: str | None = None
    query: str | None = None
    cache_key: str | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        """Post-initialization validation and coercion."""
        if self.additional_data is not None:
            coerced = _coerce_primitives(self.additional_data)
            object.__setattr__(self, "additional_data", coerced)

    def safe_dict(self, *, mask_keys: tuple[str, ...] | None = None) -> dict[str, Any]:
        """Export context as dict, dropping masked keys from additional_data.

        Args:
            mask_keys: additional_data keys to exclude. Defaults to SAFE_DICT_MASK_KEYS.

        Returns:
            Dictionary with a guaranteed additional_data key.

        Example:
            >>> ErrorContext(operation="fetch_row").safe_dict()
            {'operation': 'fetch_row', 'additional_data': {}}
        """
        if mask_keys is None:
            mask_keys = SAFE_DICT_MASK_KEYS

        data: dict[str, Any] = {}
        if self.operation is not None:
            data["operation"] = self.operation
        if self.query is not None:
            data["query"] = self.query
        if self.cache_key is not None:
            data["cache_key"] = self.cache_key

        additional = self.additional_data or {}
        data["additional_data"] = {
            key: val for key, val in additional.items() if key not in mask_keys
        }

        return data


class QueryCacheError(Exception):
    """Base exception class for all querycache errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize QueryCacheError.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            context: Additional context information
            original_error: Original exception that caused this error
        """
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.original_error = original_error

        formatted_message = f"{code.value}: {message}"
        super().__init__(formatted_message)

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging.

        Returns:
            Dictionary representation of the error with code, message,
            masked context, and original_error (if present)
        """
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class InfrastructureError(QueryCacheError):
    """Infrastructure-related errors.

    These errors occur when interacting with the database or the cache
    store collaborators.
    """


class DatabaseError(InfrastructureError):
    """Failure reported by the database collaborator.

    Carries the driver's numeric error code (if any) so it can be copied
    into a failure ResultEnvelope.

    Examples:
    - Malformed SQL
    - Constraint violation
    - Connectivity loss
    """

    def __init__(
        self,
        message: str,
        error_code: int | None = None,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
        code: ErrorCode = ErrorCode.DATABASE_ERROR,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            context=context,
            original_error=original_error,
        )
        self.error_code = error_code


class CacheStoreError(InfrastructureError):
    """Failure reported by the cache store collaborator.

    Never converted into a failure envelope: a cache fault reaches the
    caller uncaught.
    """


class ApplicationError(QueryCacheError):
    """Application-level errors (configuration, call options)."""


class ConfigurationError(ApplicationError):
    """Invalid configuration or invalid combination of call options."""


def create_config_error(
    message: str,
    operation: str | None = None,
    original_error: Exception | None = None,
    **additional_data: PrimitiveContextValue,
) -> ConfigurationError:
    """Create a configuration error.

    Args:
        message: Human-readable error message
        operation: Operation name that was being validated
        original_error: Original exception (e.g. pydantic ValidationError)
        **additional_data: Extra primitive context values

    Returns:
        ConfigurationError instance
    """
    context = ErrorContext(
        operation=operation,
        additional_data=dict(additional_data) if additional_data else None,
    )
    return ConfigurationError(
        code=ErrorCode.INVALID_OPTIONS,
        message=message,
        context=context,
        original_error=original_error,
    )


def create_database_error(
    error: Exception,
    operation: str,
    query: str | None = None,
) -> DatabaseError:
    """Wrap a driver exception into a DatabaseError.

    Args:
        error: Driver exception
        operation: Operation that failed
        query: SQL text being executed

    Returns:
        DatabaseError carrying the driver's error code when it exposes one
    """
    error_code = getattr(error, "sqlite_errorcode", None)
    return DatabaseError(
        message=str(error) or type(error).__name__,
        error_code=error_code if isinstance(error_code, int) else None,
        context=ErrorContext(operation=operation, query=query),
        original_error=error,
    )


def create_cache_error(
    error: Exception,
    operation: str,
    cache_key: str | None = None,
    code: ErrorCode = ErrorCode.CACHE_ERROR,
) -> CacheStoreError:
    """Wrap a cache store exception into a CacheStoreError.

    Args:
        error: Underlying exception
        operation: Operation that failed
        cache_key: Key being read or written
        code: Specific cache error code

    Returns:
        CacheStoreError instance
    """
    return CacheStoreError(
        code=code,
        message=f"Cache store failure: {error}",
        context=ErrorContext(operation=operation, cache_key=cache_key),
        original_error=error,
    )


__all__ = [
    "ApplicationError",
    "CacheStoreError",
    "ConfigurationError",
    "DatabaseError",
    "ErrorCode",
    "ErrorContext",
    "InfrastructureError",
    "QueryCacheError",
    "create_cache_error",
    "create_config_error",
    "create_database_error",
]
