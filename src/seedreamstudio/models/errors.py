"""Error codes and exception taxonomy for Seedream Studio."""

from enum import Enum
from typing import Any, Optional


class ErrorCode(str, Enum):
    """Error category codes for studio operations."""

    # Retryable errors (retryable=True)
    PROVIDER_TIMEOUT = "PROVIDER_TIMEOUT"
    PROVIDER_OVERLOADED = "PROVIDER_OVERLOADED"
    RATE_LIMITED = "RATE_LIMITED"

    # Not retryable errors (retryable=False)
    INVALID_INPUT = "INVALID_INPUT"
    AUTHENTICATION_REQUIRED = "AUTHENTICATION_REQUIRED"
    PROVIDER_REJECTED = "PROVIDER_REJECTED"
    GENERATION_FAILED = "GENERATION_FAILED"
    POLL_TIMEOUT = "POLL_TIMEOUT"
    UNSUPPORTED_OPERATION = "UNSUPPORTED_OPERATION"
    UNSUPPORTED_PROVIDER = "UNSUPPORTED_PROVIDER"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# Set of retryable error codes
RETRYABLE_ERRORS = {
    ErrorCode.PROVIDER_TIMEOUT,
    ErrorCode.PROVIDER_OVERLOADED,
    ErrorCode.RATE_LIMITED,
}


def is_retryable(code: ErrorCode) -> bool:
    """Check if an error code indicates a retryable error."""
    return code in RETRYABLE_ERRORS


class StudioError(Exception):
    """Base exception for every error raised by the studio core."""

    default_code = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        error_code: ErrorCode | None = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.details = details or {}

    @property
    def retryable(self) -> bool:
        """Whether calling code may safely offer the user a retry."""
        return is_retryable(self.error_code)


class ValidationError(StudioError, ValueError):
    """Malformed or out-of-range input, caught before anything is sent to a vendor."""

    default_code = ErrorCode.INVALID_INPUT


class ProviderError(StudioError):
    """A vendor call failed or returned a response the adapter cannot parse."""

    default_code = ErrorCode.PROVIDER_REJECTED

    def __init__(
        self,
        provider: str,
        message: str,
        error_code: ErrorCode | None = None,
        status_code: int | None = None,
        body: str | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(
            f"{provider} API error: {message}",
            error_code=error_code,
            details={"status_code": status_code, "body": body},
        )
        self.provider = provider
        self.status_code = status_code
        self.body = body
        self.original_exception = original_exception


class UnsupportedOperation(StudioError):
    """The active provider does not implement the requested capability."""

    default_code = ErrorCode.UNSUPPORTED_OPERATION

    def __init__(self, provider: str, operation: str):
        super().__init__(
            f"Provider {provider} does not support {operation}",
            details={"provider": provider, "operation": operation},
        )
        self.provider = provider
        self.operation = operation


class UnsupportedProvider(StudioError, ValueError):
    """No adapter is registered for the requested provider type."""

    default_code = ErrorCode.UNSUPPORTED_PROVIDER

    def __init__(self, provider: Any, available: list[str] | None = None):
        message = f"Unsupported API provider: {provider}"
        if available:
            message += f". Available: {available}"
        super().__init__(message, details={"provider": str(provider)})
        self.provider = provider


class PollTimeoutError(StudioError, TimeoutError):
    """A bounded poll loop ran out of attempts before the job reached a terminal state."""

    default_code = ErrorCode.POLL_TIMEOUT

    def __init__(self, request_id: str, attempts: int, interval_seconds: float):
        super().__init__(
            f"Image generation timed out: request {request_id} still pending "
            f"after {attempts} status checks ({attempts * interval_seconds:g}s)",
            details={"request_id": request_id, "attempts": attempts},
        )
        self.request_id = request_id
        self.attempts = attempts


class GenerationFailed(StudioError):
    """The vendor explicitly reported the job as failed."""

    default_code = ErrorCode.GENERATION_FAILED

    def __init__(self, provider: str, error: str | None, request_id: str | None = None):
        super().__init__(
            f"{provider} generation failed: {error or 'no error message returned'}",
            details={"request_id": request_id, "error": error},
        )
        self.provider = provider
        self.error = error
        self.request_id = request_id
