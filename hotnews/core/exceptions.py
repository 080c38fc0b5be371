"""Custom exceptions for the hotnews application.

All exceptions inherit from HotNewsError for easy catching.

Exception classes include context dictionaries for structured logging
and debugging. Use the `context` property to access additional details.
"""

from typing import Any


class HotNewsError(Exception):
    """Base exception for all hotnews errors.

    Provides a context dictionary for structured error information.

    Attributes:
        context: Dictionary with additional error context

    Example:
        >>> try:
        ...     raise HotNewsError("Something went wrong", context={"source": "rss"})
        ... except HotNewsError as e:
        ...     print(f"Error: {e}, Context: {e.context}")
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        """Initialize HotNewsError.

        Args:
            message: Error message
            context: Optional dictionary with additional context
        """
        self.context = context or {}
        super().__init__(message)

    def with_context(self, **kwargs: Any) -> "HotNewsError":
        """Add additional context to the exception.

        Args:
            **kwargs: Key-value pairs to add to context

        Returns:
            Self for method chaining
        """
        self.context.update(kwargs)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/serialization.

        Returns:
            Dictionary with error type, message, and context
        """
        return {
            "error_type": self.__class__.__name__,
            "message": str(self),
            "context": self.context,
        }


# ============================================
# Database Errors
# ============================================


class DatabaseError(HotNewsError):
    """Base exception for database-related errors."""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        operation: str | None = None,
    ) -> None:
        """Initialize DatabaseError.

        Args:
            message: Error message
            context: Additional context
            operation: Database operation that failed (e.g., "insert", "delete")
        """
        ctx = context or {}
        if operation:
            ctx["operation"] = operation
        super().__init__(message, context=ctx)


# ============================================
# Configuration Errors
# ============================================


class ConfigError(HotNewsError):
    """Base exception for configuration-related errors."""

    def __init__(
        self,
        message: str,
        config_path: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize ConfigError.

        Args:
            message: Error message
            config_path: Path to the config key
            context: Additional context
        """
        ctx = context or {}
        if config_path:
            ctx["config_path"] = config_path
        super().__init__(message, context=ctx)


class ConfigValidationError(ConfigError):
    """Raised when configuration validation fails.

    Attributes:
        field: Field that failed validation (optional)
        value: Invalid value (optional)
        reason: Validation failure reason (optional)
    """

    def __init__(
        self,
        message: str | None = None,
        *,
        field: str | None = None,
        value: Any = None,
        reason: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize ConfigValidationError.

        Args:
            message: Error message (for simple usage)
            field: Field that failed validation
            value: Invalid value
            reason: Validation failure reason
            context: Additional context
        """
        ctx = context or {}

        self.field = field
        self.value = value
        self.reason = reason

        if field and reason:
            ctx.update({"field": field, "reason": reason})
            if value is not None:
                ctx["value"] = str(value)
            final_message = f"Config validation failed for '{field}': {reason}"
        elif message:
            final_message = message
        else:
            final_message = "Configuration validation failed"

        super().__init__(final_message, context=ctx)


# ============================================
# Service Errors
# ============================================


class ServiceError(HotNewsError):
    """Base exception for service-related errors."""

    def __init__(
        self,
        message: str,
        service_name: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize ServiceError.

        Args:
            message: Error message
            service_name: Name of the service
            context: Additional context
        """
        ctx = context or {}
        if service_name:
            ctx["service_name"] = service_name
        super().__init__(message, context=ctx)


class ExternalAPIError(ServiceError):
    """Raised when an upstream API call returns an unusable response.

    Attributes:
        service: Name of the external service
        status_code: HTTP status code (if applicable)
        endpoint: API endpoint that was called
    """

    def __init__(
        self,
        service: str,
        message: str,
        status_code: int | None = None,
        endpoint: str | None = None,
        response_body: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize ExternalAPIError.

        Args:
            service: Name of the external service
            message: Error message
            status_code: HTTP status code (optional)
            endpoint: API endpoint (optional)
            response_body: Response body for debugging (optional)
            context: Additional context
        """
        ctx = context or {}
        ctx["service"] = service
        if status_code is not None:
            ctx["status_code"] = status_code
        if endpoint:
            ctx["endpoint"] = endpoint
        if response_body:
            ctx["response_body"] = response_body[:500]

        self.service = service
        self.status_code = status_code
        self.endpoint = endpoint

        super().__init__(f"{service} API error: {message}", service_name=service, context=ctx)


class RateLimitError(ExternalAPIError):
    """Raised when an upstream API reports its rate limit is exhausted.

    Attributes:
        retry_after: Seconds to wait before retrying
    """

    def __init__(
        self,
        service: str,
        retry_after: int | None = None,
        endpoint: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize RateLimitError.

        Args:
            service: Service that rate limited
            retry_after: Seconds to wait before retrying
            endpoint: API endpoint that was called
            context: Additional context
        """
        ctx = context or {}
        if retry_after is not None:
            ctx["retry_after"] = retry_after

        self.retry_after = retry_after

        message = "rate limit exceeded"
        if retry_after:
            message += f" (retry after {retry_after}s)"

        super().__init__(service, message, status_code=403, endpoint=endpoint, context=ctx)


class CollectionError(ServiceError):
    """Raised when a collector run cannot proceed at all.

    Attributes:
        source_type: Collector that failed
    """

    def __init__(
        self,
        message: str,
        source_type: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize CollectionError.

        Args:
            message: Error message
            source_type: Collector that failed
            context: Additional context
        """
        ctx = context or {}
        ctx["source_type"] = source_type
        self.source_type = source_type
        super().__init__(message, service_name=f"collector:{source_type}", context=ctx)


__all__ = [
    "HotNewsError",
    "DatabaseError",
    "ConfigError",
    "ConfigValidationError",
    "ServiceError",
    "ExternalAPIError",
    "RateLimitError",
    "CollectionError",
]
