from enum import Enum
from typing import Optional

from .base import FirecrackerModel


class LogLevel(str, Enum):
    ERROR = "Error"
    WARNING = "Warning"
    INFO = "Info"
    DEBUG = "Debug"
    TRACE = "Trace"


class Logger(FirecrackerModel):
    """Configuration of Firecracker's own logging (not this library's).

    ``log_path`` may be a named pipe or a regular file on the host.
    """

    level: Optional[LogLevel] = None
    log_path: Optional[str] = None
    show_level: Optional[bool] = None
    show_log_origin: Optional[bool] = None
    module: Optional[str] = None


class Metrics(FirecrackerModel):
    """Named pipe or file where Firecracker flushes JSON metrics."""

    metrics_path: str
