from fastapi import HTTPException, status
from typing import Optional, Dict, Any


class BaseAPIException(HTTPException):
    """Base exception for API errors"""
    def __init__(
        self,
        status_code: int,
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.error_code = error_code
        self.message = message
        self.details = details or {}

        super().__init__(
            status_code=status_code,
            detail={
                "ok": False,
                "code": error_code,
                "error": message,
                "details": self.details,
            }
        )

    def __str__(self) -> str:  # Ensure str(e) returns the human message
        return self.message


class ValidationError(BaseAPIException):
    """Missing or invalid request parameters"""
    def __init__(self, message: str = "Validation failed", error_code: str = "VALIDATION_001", details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code=error_code,
            message=message,
            details=details
        )


class NotFoundError(BaseAPIException):
    """Resource not found errors"""
    def __init__(self, message: str = "Resource not found", details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="NOT_FOUND_001",
            message=message,
            details=details
        )


class ConfigurationError(BaseAPIException):
    """A provider key or setting needed by the handler is missing"""
    def __init__(self, message: str = "Service not configured", details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="CONFIG_001",
            message=message,
            details=details
        )


class UpstreamError(BaseAPIException):
    """A third-party provider answered with an error or could not be reached.

    ``upstream_status`` is the provider's HTTP status (None for network
    failures) and ``body`` the first part of its response text, kept for
    diagnostics.
    """
    error_code_default = "UPSTREAM_ERROR"

    def __init__(
        self,
        message: str,
        provider: str = "upstream",
        upstream_status: Optional[int] = None,
        body: str = "",
        error_code: Optional[str] = None,
    ):
        self.provider = provider
        self.upstream_status = upstream_status
        self.body = body
        details: Dict[str, Any] = {"provider": provider}
        if upstream_status is not None:
            details["upstreamStatus"] = upstream_status
        if body:
            details["body"] = body
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            error_code=error_code or self.error_code_default,
            message=message,
            details=details
        )


class UpstreamRateLimitError(UpstreamError):
    """Provider answered 429"""
    error_code_default = "UPSTREAM_RATE_LIMIT"


class UpstreamTimeoutError(UpstreamError):
    """Provider did not answer within the configured timeout"""
    error_code_default = "UPSTREAM_TIMEOUT"


# Errors a route converts into its own error envelope
ProviderFailure = (ConfigurationError, UpstreamError)
