from enum import Enum
from typing import Optional

from .base import FirecrackerModel
from .rate_limiter import RateLimiter


class CacheType(str, Enum):
    UNSAFE = "Unsafe"
    WRITEBACK = "Writeback"


class IoEngine(str, Enum):
    SYNC = "Sync"
    ASYNC = "Async"


class Drive(FirecrackerModel):
    """Guest block device.

    ``path_on_host`` and ``is_read_only`` are required for virtio-block and must
    be omitted for vhost-user-block, which uses ``socket`` instead.
    ``partuuid`` is only honoured when ``is_root_device`` is set.
    """

    drive_id: str
    is_root_device: bool
    partuuid: Optional[str] = None
    cache_type: Optional[CacheType] = None
    is_read_only: Optional[bool] = None
    path_on_host: Optional[str] = None
    rate_limiter: Optional[RateLimiter] = None
    io_engine: Optional[IoEngine] = None
    socket: Optional[str] = None


class PartialDrive(FirecrackerModel):
    drive_id: str
    path_on_host: Optional[str] = None
    rate_limiter: Optional[RateLimiter] = None
