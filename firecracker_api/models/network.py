from typing import Optional

from .base import FirecrackerModel
from .rate_limiter import RateLimiter


class NetworkInterface(FirecrackerModel):
    """Guest network interface backed by the host TAP device ``host_dev_name``."""

    iface_id: str
    host_dev_name: str
    guest_mac: Optional[str] = None
    rx_rate_limiter: Optional[RateLimiter] = None
    tx_rate_limiter: Optional[RateLimiter] = None


class PartialNetworkInterface(FirecrackerModel):
    iface_id: str
    rx_rate_limiter: Optional[RateLimiter] = None
    tx_rate_limiter: Optional[RateLimiter] = None


class NetworkOverride(FirecrackerModel):
    """Replaces the host TAP device of ``iface_id`` when loading a snapshot."""

    iface_id: str
    host_dev_name: str
