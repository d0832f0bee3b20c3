"""Unofficial client for the Firecracker microVM API over a Unix domain socket."""
from loguru import logger

from .client import ENDPOINTS, MicrovmClient
from .errors import (
    ApiError,
    DeserializationError,
    FirecrackerError,
    SerializationError,
    TransportError,
    UriError,
)
from .request import Endpoint, Request, create_session, execute

__version__ = "0.1.0"

# Silent by default; logging_manager.setup_logging() turns it on.
logger.disable(__name__)

__all__ = [
    "ENDPOINTS",
    "ApiError",
    "DeserializationError",
    "Endpoint",
    "FirecrackerError",
    "MicrovmClient",
    "Request",
    "SerializationError",
    "TransportError",
    "UriError",
    "create_session",
    "execute",
]
