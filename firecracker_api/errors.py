"""Errors raised by the Firecracker API client.

Every failure surfaces as a subclass of :class:`FirecrackerError`. None of
them is retried or recovered from inside the library; the caller decides.
"""
from http import HTTPStatus
from typing import Optional

from .models import FaultBody


class FirecrackerError(Exception):
    """Base class for all client errors.

    Attributes:
        method (str, optional): HTTP method of the failed call
        path (str, optional): Resolved request path of the failed call
    """

    def __init__(self, message: str, method: Optional[str] = None, path: Optional[str] = None):
        super().__init__(message)
        self.method = method
        self.path = path


class TransportError(FirecrackerError):
    """The socket could not be reached, written to, or read from."""


class SerializationError(FirecrackerError):
    """A request body could not be encoded to JSON. Nothing was sent."""


class DeserializationError(FirecrackerError):
    """A successful response body did not decode into the expected type."""

    def __init__(self, message: str, status: int, content: str,
                 method: Optional[str] = None, path: Optional[str] = None):
        super().__init__(message, method=method, path=path)
        self.status = status
        self.content = content


class UriError(FirecrackerError):
    """The request URL could not be built from the socket path and request path."""


class ApiError(FirecrackerError):
    """Firecracker answered with a status outside the 2xx range.

    Attributes:
        status (int): Numeric HTTP status code
        content (str): Raw response body text, possibly empty
        entity (FaultBody, optional): Decoded error record, ``None`` when the
            body was not a valid ``{"fault_message": ...}`` object
    """

    def __init__(self, status: int, content: str, entity: Optional[FaultBody] = None,
                 method: Optional[str] = None, path: Optional[str] = None):
        self.status = status
        self.content = content
        self.entity = entity
        detail = self.fault_message or content or self.reason
        super().__init__(f"Firecracker API error {status}: {detail}", method=method, path=path)

    @property
    def fault_message(self) -> Optional[str]:
        if self.entity is None:
            return None
        return self.entity.fault_message

    @property
    def reason(self) -> str:
        try:
            return HTTPStatus(self.status).phrase
        except ValueError:
            return "Unknown"

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status < 500

    @property
    def is_server_error(self) -> bool:
        return 500 <= self.status < 600
