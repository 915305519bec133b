"""
exceptions.py — Error Types for the Liters Service

Every failure a handler can answer is represented by a subclass of LitersError.
Each carries the HTTP status code and the message returned to the caller, so the
handlers only need a single translation point.
"""

from typing import Optional


class LitersError(Exception):
    """Base class for all errors translated into an HTTP response."""
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        if message is not None:
            self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ConfigurationError(LitersError):
    """Raised when the service is started without the required settings."""


class InvalidRequestError(LitersError):
    status_code = 400
    message = "Bad Request"


class MethodNotAllowedError(LitersError):
    status_code = 405
    message = "Method Not Allowed"


class ResourceNotFoundError(LitersError):
    """
    Raised when the upstream platform has no record for a resource.

    Args:
        resource (str): 'order' or 'customer'.
    """
    status_code = 404

    def __init__(self, resource: str):
        self.resource = resource
        super().__init__(f"{resource.capitalize()} not found")


class UpstreamStatusError(LitersError):
    """
    Raised when the Tienda Nube API answers with an error status.

    The status code is passed through to the caller. 404 is reported per
    resource, 401 and 403 get a fixed message, anything else a generic one.
    """

    def __init__(self, resource: str, status_code: int):
        self.resource = resource
        if status_code == 404:
            message = f"{resource.capitalize()} not found"
        elif status_code == 401:
            message = "Authentication failed"
        elif status_code == 403:
            message = "Access denied"
        else:
            message = f"External API error: {status_code}"
        super().__init__(message, status_code)


class UpstreamUnavailableError(LitersError):
    """Raised on timeouts and connection failures (including DNS resolution)."""
    status_code = 503
    message = "External service unavailable"

    def __init__(self, resource: str):
        self.resource = resource
        super().__init__()


class OrderWithoutCustomerError(InvalidRequestError):
    message = "Order has no associated customer"
