"""
Shared error handling for the properties cache service.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel

from shared.logging import request_id_var


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class PropertiesServiceException(Exception):
    """Base exception for the properties service."""

    status_code: int = 400

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id_var.get(),
            code=self.code,
            message=self.message,
            details=self.details
        )


class ConfigurationError(PropertiesServiceException):
    """Missing or invalid startup configuration."""

    status_code = 500

    def __init__(self, message: str = "Invalid configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)


class ExternalServiceError(PropertiesServiceException):
    """External service errors."""

    status_code = 502

    def __init__(self, service: str, message: str = "External service error", details: Optional[Dict[str, Any]] = None):
        self.service = service
        super().__init__("EXTERNAL_SERVICE_ERROR", f"{service}: {message}", details)

    @property
    def reason(self) -> Optional[str]:
        """Failure category reported by the client (transport, status, invalid_json)."""
        return self.details.get("reason")


class PropertyNotFoundError(PropertiesServiceException):
    """No property in the current snapshot matches the requested slug."""

    status_code = 404

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__("NOT_FOUND", "Property not found", {"slug": slug})
