from enum import Enum
from typing import List, Optional

from .base import FirecrackerModel


class MmdsVersion(str, Enum):
    V1 = "V1"
    V2 = "V2"


class MmdsConfig(FirecrackerModel):
    """MMDS configuration.

    Every id in ``network_interfaces`` must name an interface that already
    exists when the request is made. ``imds_compat`` makes MMDS answer with
    ``text/plain`` like EC2 IMDS does.
    """

    network_interfaces: List[str]
    version: Optional[MmdsVersion] = None
    ipv4_address: Optional[str] = None
    imds_compat: Optional[bool] = None
