from typing import List, Optional

from pydantic import Field

from .balloon import Balloon
from .base import FirecrackerModel
from .boot_source import BootSource
from .cpu import CpuConfig
from .drive import Drive
from .entropy import EntropyDevice
from .logger import Logger, Metrics
from .machine import MachineConfiguration
from .mmds import MmdsConfig
from .network import NetworkInterface
from .vsock import Vsock


class FullVmConfiguration(FirecrackerModel):
    """Complete microVM configuration as exported by ``GET /vm/config``.

    Keys on the wire are hyphenated (``boot-source``, ``machine-config``...);
    either form is accepted when constructing the model.
    """

    balloon: Optional[Balloon] = None
    drives: Optional[List[Drive]] = None
    boot_source: Optional[BootSource] = Field(default=None, alias="boot-source")
    cpu_config: Optional[CpuConfig] = Field(default=None, alias="cpu-config")
    logger: Optional[Logger] = None
    machine_config: Optional[MachineConfiguration] = Field(default=None, alias="machine-config")
    metrics: Optional[Metrics] = None
    mmds_config: Optional[MmdsConfig] = Field(default=None, alias="mmds-config")
    network_interfaces: Optional[List[NetworkInterface]] = Field(default=None, alias="network-interfaces")
    vsock: Optional[Vsock] = None
    entropy: Optional[EntropyDevice] = None
