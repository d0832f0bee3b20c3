from typing import Optional

from .base import FirecrackerModel


class Vsock(FirecrackerModel):
    """Virtio-vsock device; host-side connections go through ``uds_path``."""

    guest_cid: int
    uds_path: str
    vsock_id: Optional[str] = None
