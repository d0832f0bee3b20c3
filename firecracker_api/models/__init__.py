"""Resource models mirroring the Firecracker API schema."""
from .balloon import Balloon, BalloonStats, BalloonStatsUpdate, BalloonUpdate
from .base import FirecrackerModel, to_json, to_payload
from .boot_source import BootSource
from .cpu import CpuConfig, CpuTemplate
from .drive import CacheType, Drive, IoEngine, PartialDrive
from .entropy import EntropyDevice
from .fault import FaultBody
from .instance import (
    ActionType,
    FirecrackerVersion,
    InstanceActionInfo,
    InstanceInfo,
    InstanceState,
    Vm,
    VmState,
)
from .logger import Logger, LogLevel, Metrics
from .machine import HugePages, MachineConfiguration
from .mmds import MmdsConfig, MmdsVersion
from .network import NetworkInterface, NetworkOverride, PartialNetworkInterface
from .rate_limiter import RateLimiter, TokenBucket
from .snapshot import (
    BackendType,
    MemoryBackend,
    SnapshotCreateParams,
    SnapshotLoadParams,
    SnapshotType,
)
from .vm_config import FullVmConfiguration
from .vsock import Vsock

__all__ = [
    "ActionType",
    "BackendType",
    "Balloon",
    "BalloonStats",
    "BalloonStatsUpdate",
    "BalloonUpdate",
    "BootSource",
    "CacheType",
    "CpuConfig",
    "CpuTemplate",
    "Drive",
    "EntropyDevice",
    "FaultBody",
    "FirecrackerModel",
    "FirecrackerVersion",
    "FullVmConfiguration",
    "HugePages",
    "InstanceActionInfo",
    "InstanceInfo",
    "InstanceState",
    "IoEngine",
    "LogLevel",
    "Logger",
    "MachineConfiguration",
    "MemoryBackend",
    "Metrics",
    "MmdsConfig",
    "MmdsVersion",
    "NetworkInterface",
    "NetworkOverride",
    "PartialDrive",
    "PartialNetworkInterface",
    "RateLimiter",
    "SnapshotCreateParams",
    "SnapshotLoadParams",
    "SnapshotType",
    "TokenBucket",
    "Vm",
    "VmState",
    "Vsock",
    "to_json",
    "to_payload",
]
