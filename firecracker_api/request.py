"""Typed request execution against the Firecracker API Unix socket.

A single generic routine serves every endpoint: it serializes the request
body, sends it over a pooled ``http+unix`` session, and turns the response
into either a decoded value or one of the errors in :mod:`firecracker_api.errors`.

Example:
    session = create_session()
    req = Request("GET", "/version")
    version = execute(session, "/tmp/fc.sock", req, FirecrackerVersion)
"""
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional, Type, Union
from urllib.parse import quote

import requests
from loguru import logger
from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError
from requests_unixsocket import DEFAULT_SCHEME, UnixAdapter

from .errors import (
    ApiError,
    DeserializationError,
    SerializationError,
    TransportError,
    UriError,
)
from .models import FaultBody, to_json

APPLICATION_JSON = "application/json"

# Firecracker's micro-http server accepts at most 10 connections. Keeping one
# slot free avoids SERVER_FULL when a pooled connection is evicted and a new
# one opened before the server has seen the close.
DEFAULT_POOL_CONNECTIONS = 9


def create_session(pool_connections: int = DEFAULT_POOL_CONNECTIONS) -> requests.Session:
    """Create a requests session able to talk HTTP over Unix sockets."""
    session = requests.Session()
    session.mount(DEFAULT_SCHEME, UnixAdapter(pool_connections=pool_connections))
    return session


def unix_socket_url(socket_path: Union[str, Path], path: str) -> str:
    """Build the ``http+unix`` URL for ``path`` on the API socket.

    The socket path travels in the host part of the URL, so it is fully
    percent-encoded. ``path`` is used as given.
    """
    if not path.startswith("/"):
        raise UriError(f"Request path must start with '/': {path!r}", path=path)
    if not str(socket_path):
        raise UriError("Socket path is empty", path=path)
    sock = quote(Path(socket_path).as_posix(), safe="")
    return f"{DEFAULT_SCHEME}{sock}{path}"


@dataclass(frozen=True)
class Request:
    """One outbound API call.

    Attributes:
        method (str): GET, PUT or PATCH
        path (str): Resolved request path, identifiers already percent-encoded
        body (Any): Model or plain JSON value to send, ``None`` for no body
        expects_response_body (bool): Whether a 2xx answer carries a payload
    """

    method: str
    path: str
    body: Any = None
    expects_response_body: bool = True

    def serialized_body(self) -> Optional[bytes]:
        if self.body is None:
            return None
        try:
            return to_json(self.body).encode("utf-8")
        except (TypeError, ValueError, PydanticSerializationError) as exc:
            raise SerializationError(
                f"Cannot encode {type(self.body).__name__} body for {self.method} {self.path}: {exc}",
                method=self.method, path=self.path,
            ) from exc


@dataclass(frozen=True)
class Endpoint:
    """Static description of one API operation.

    ``path`` may hold a single ``{id}`` placeholder, filled in by
    :meth:`resolve` with a percent-encoded identifier.
    """

    name: str
    method: str
    path: str
    expects_body: bool = False
    expects_response_body: bool = False
    response_type: Optional[Type] = None

    @property
    def templated(self) -> bool:
        return "{id}" in self.path

    def resolve(self, resource_id: Optional[str] = None) -> str:
        if not self.templated:
            if resource_id is not None:
                raise UriError(f"{self.name} takes no identifier", method=self.method, path=self.path)
            return self.path
        if not resource_id:
            raise UriError(f"{self.name} requires a non-empty identifier", method=self.method, path=self.path)
        if str(resource_id) in (".", ".."):
            raise UriError(f"{self.name} identifier {resource_id!r} is a dot segment",
                           method=self.method, path=self.path)
        return self.path.replace("{id}", quote(str(resource_id), safe=""))

    def request(self, body: Any = None, resource_id: Optional[str] = None) -> Request:
        path = self.resolve(resource_id)
        if self.expects_body and body is None:
            raise SerializationError(f"{self.method} {path} requires a request body",
                                     method=self.method, path=path)
        if not self.expects_body and body is not None:
            raise SerializationError(f"{self.method} {path} does not take a request body",
                                     method=self.method, path=path)
        return Request(self.method, path, body, self.expects_response_body)


@lru_cache(maxsize=None)
def _adapter(response_type: Any) -> TypeAdapter:
    return TypeAdapter(response_type)


def _decode_fault(content: bytes) -> Optional[FaultBody]:
    try:
        return FaultBody.model_validate_json(content)
    except ValidationError:
        return None


def execute(session: requests.Session,
            socket_path: Union[str, Path],
            request: Request,
            response_type: Optional[Type] = None,
            timeout: Optional[float] = None) -> Any:
    """Send ``request`` to the API socket and decode the outcome.

    Args:
        session (requests.Session): Session with a Unix socket adapter mounted
        socket_path (str | Path): Path of the Firecracker API socket
        request (Request): The call to perform
        response_type (type, optional): Expected 2xx payload type; ``Any`` when omitted
        timeout (float, optional): Passed to requests; no timeout when ``None``

    Returns:
        The decoded payload, or ``None`` when the request expects no response body.

    Raises:
        SerializationError: body could not be encoded; nothing was sent
        UriError: the URL could not be built
        TransportError: the socket could not be used
        ApiError: Firecracker answered outside 2xx
        DeserializationError: a 2xx payload did not match ``response_type``
    """
    data = request.serialized_body()
    headers = {"Accept": APPLICATION_JSON}
    if data is not None:
        headers["Content-Type"] = APPLICATION_JSON
        headers["Content-Length"] = str(len(data))
    else:
        data = b""

    url = unix_socket_url(socket_path, request.path)
    try:
        prepared = session.prepare_request(
            requests.Request(request.method, url, headers=headers, data=data)
        )
    except (requests.RequestException, ValueError) as exc:
        raise UriError(f"Cannot build request URL {url!r}: {exc}",
                       method=request.method, path=request.path) from exc

    logger.debug("Firecracker API request", method=request.method, path=request.path,
                 body_bytes=len(data), socket=str(socket_path))
    try:
        response = session.send(prepared, timeout=timeout, allow_redirects=False)
    except requests.RequestException as exc:
        logger.warning("Firecracker API transport failure", method=request.method,
                       path=request.path, error=str(exc))
        raise TransportError(f"{request.method} {request.path} failed: {exc}",
                             method=request.method, path=request.path) from exc

    status = response.status_code
    if not 200 <= status < 300:
        raw = response.content or b""
        error = ApiError(status, raw.decode("utf-8", errors="replace"), _decode_fault(raw),
                         method=request.method, path=request.path)
        logger.warning("Firecracker API error", method=request.method, path=request.path,
                       status=status, fault_message=error.fault_message)
        raise error

    logger.debug("Firecracker API response", method=request.method, path=request.path, status=status)
    if not request.expects_response_body:
        return None

    raw = response.content or b""
    try:
        return _adapter(Any if response_type is None else response_type).validate_json(raw)
    except ValidationError as exc:
        raise DeserializationError(
            f"Cannot decode {request.method} {request.path} response: {exc}",
            status, raw.decode("utf-8", errors="replace"),
            method=request.method, path=request.path,
        ) from exc
