"""
Custom exceptions for consistent error reporting.

Mirrors the backend's standardized error codes so a failed API call and a
locally refused action surface the same way to the views.
"""

from typing import Any, Dict, Optional

import httpx


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, error_code: str, status_code: Optional[int] = None, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class NetworkError(AppException):
    """Raised when the backend cannot be reached or the request times out."""

    def __init__(self, message: str = "Could not reach the server", details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="ERR_NETWORK",
            details=details
        )


class ApiResponseError(AppException):
    """Raised for any non-2xx response from the backend."""

    def __init__(self, message: str, status_code: int, details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code=ERROR_CODE_MAP.get(status_code, "ERR_UNKNOWN"),
            status_code=status_code,
            details=details
        )


class ResourceNotFoundError(ApiResponseError):
    """Raised when the backend no longer knows the resource (stale data)."""

    def __init__(self, message: str = "Resource not found", details: Dict[str, Any] = None):
        super().__init__(message=message, status_code=404, details=details)


class InvalidPayloadError(AppException):
    """Raised when a response body does not match the expected schema."""

    def __init__(self, message: str = "Unexpected response from server", details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="ERR_PAYLOAD",
            details=details
        )


class InputValidationError(AppException):
    """Raised when local input is invalid; the request is never sent."""

    def __init__(self, message: str, details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="ERR_VALIDATION",
            details=details
        )


class ActionNotAllowedError(AppException):
    """Raised when an action is not offered for the package's current status."""

    def __init__(self, action: str, package_id: str, status: str):
        super().__init__(
            message=f"Action '{action}' is not available for package {package_id} in status {status}",
            error_code="ERR_ACTION_001",
            details={"action": action, "package_id": package_id, "status": status}
        )


class ActionInProgressError(AppException):
    """Raised when a mutation is requested while another one is in flight."""

    def __init__(self):
        super().__init__(
            message="Another operation is still in progress",
            error_code="ERR_ACTION_002"
        )


ERROR_CODE_MAP = {
    400: "ERR_BAD_REQUEST",
    401: "ERR_UNAUTHORIZED",
    403: "ERR_FORBIDDEN",
    404: "ERR_NOT_FOUND",
    409: "ERR_CONFLICT",
    500: "ERR_INTERNAL_SERVER"
}


def error_from_response(response: httpx.Response) -> ApiResponseError:
    """
    Build the exception for a failed response.

    The backend reports failures as ``{"message": ...}``; when the body is
    missing or not JSON the status line is used instead.

    Args:
        response: A response whose status code is not 2xx

    Returns:
        ResourceNotFoundError for 404, ApiResponseError otherwise
    """
    try:
        body = response.json()
    except ValueError:
        body = {}

    message = None
    if isinstance(body, dict):
        message = body.get("message") or body.get("detail")
    if not message:
        message = f"Error {response.status_code}: {response.reason_phrase}"

    details = {"method": response.request.method, "path": response.request.url.path}

    if response.status_code == 404:
        return ResourceNotFoundError(message=message, details=details)
    return ApiResponseError(message=message, status_code=response.status_code, details=details)
