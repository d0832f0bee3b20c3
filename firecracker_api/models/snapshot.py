from enum import Enum
from typing import List, Optional

from .base import FirecrackerModel
from .network import NetworkOverride


class SnapshotType(str, Enum):
    FULL = "Full"
    DIFF = "Diff"


class SnapshotCreateParams(FirecrackerModel):
    """Parameters for ``PUT /snapshot/create``. The microVM must be paused."""

    snapshot_path: str
    mem_file_path: str
    snapshot_type: Optional[SnapshotType] = None


class BackendType(str, Enum):
    FILE = "File"
    UFFD = "Uffd"


class MemoryBackend(FirecrackerModel):
    """Guest memory source for snapshot loading.

    For ``File`` the path is the memory file itself; for ``Uffd`` it is the
    Unix socket of the process serving page faults.
    """

    backend_type: BackendType
    backend_path: str


class SnapshotLoadParams(FirecrackerModel):
    """Parameters for ``PUT /snapshot/load``.

    ``mem_file_path`` and ``mem_backend`` are mutually exclusive; Firecracker
    rejects requests carrying both.
    """

    snapshot_path: str
    mem_file_path: Optional[str] = None
    mem_backend: Optional[MemoryBackend] = None
    track_dirty_pages: Optional[bool] = None
    resume_vm: Optional[bool] = None
    network_overrides: Optional[List[NetworkOverride]] = None
