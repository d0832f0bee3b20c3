from enum import Enum
from typing import Optional

from .base import FirecrackerModel
from .cpu import CpuTemplate


class HugePages(str, Enum):
    NONE = "None"
    HUGE_2M = "2M"


class MachineConfiguration(FirecrackerModel):
    """Number of vCPUs, memory size, SMT and CPU template of the microVM.

    ``vcpu_count`` must be 1 or an even number. ``smt`` can only be enabled on
    x86_64. ``track_dirty_pages`` is needed to create diff snapshots.
    """

    vcpu_count: int
    mem_size_mib: int
    smt: Optional[bool] = None
    track_dirty_pages: Optional[bool] = None
    cpu_template: Optional[CpuTemplate] = None
    huge_pages: Optional[HugePages] = None
