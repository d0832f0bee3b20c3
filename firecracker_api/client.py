"""Client for the Firecracker API exposed on a Unix domain socket.

Each public method maps to one API operation through the ``ENDPOINTS`` table
and delegates to :func:`firecracker_api.request.execute`. No method validates
the model it sends; Firecracker does that and rejections come back as
:class:`~firecracker_api.errors.ApiError`.

Ordering between calls (boot source before ``InstanceStart``, pause before
snapshot) is the caller's responsibility.

Example:
    with MicrovmClient("/tmp/firecracker.socket") as fc:
        fc.put_guest_boot_source(BootSource(kernel_image_path="/vm/vmlinux"))
        fc.put_machine_configuration(MachineConfiguration(vcpu_count=2, mem_size_mib=1024))
        fc.put_guest_drive_by_id("rootfs", Drive(drive_id="rootfs", is_root_device=True,
                                                 path_on_host="/vm/rootfs.ext4",
                                                 is_read_only=False))
        fc.start_instance()
"""
from pathlib import Path
from typing import Any, Dict, Optional, Union

import requests
from loguru import logger
from omegaconf import DictConfig

from .models import (
    ActionType,
    Balloon,
    BalloonStats,
    BalloonStatsUpdate,
    BalloonUpdate,
    BootSource,
    CpuConfig,
    Drive,
    EntropyDevice,
    FirecrackerVersion,
    FullVmConfiguration,
    InstanceActionInfo,
    InstanceInfo,
    Logger,
    MachineConfiguration,
    Metrics,
    MmdsConfig,
    NetworkInterface,
    PartialDrive,
    PartialNetworkInterface,
    SnapshotCreateParams,
    SnapshotLoadParams,
    Vm,
    VmState,
    Vsock,
)
from .errors import UriError
from .request import DEFAULT_POOL_CONNECTIONS, Endpoint, create_session, execute


def _get(name: str, path: str, response_type: Any) -> Endpoint:
    return Endpoint(name, "GET", path, expects_body=False,
                    expects_response_body=True, response_type=response_type)


def _put(name: str, path: str) -> Endpoint:
    return Endpoint(name, "PUT", path, expects_body=True, expects_response_body=False)


def _patch(name: str, path: str) -> Endpoint:
    return Endpoint(name, "PATCH", path, expects_body=True, expects_response_body=False)


ENDPOINTS: Dict[str, Endpoint] = {e.name: e for e in (
    _get("describe_instance", "/", InstanceInfo),
    _get("get_firecracker_version", "/version", FirecrackerVersion),
    _get("get_machine_configuration", "/machine-config", MachineConfiguration),
    _put("put_machine_configuration", "/machine-config"),
    _patch("patch_machine_configuration", "/machine-config"),
    _put("put_guest_boot_source", "/boot-source"),
    _put("put_guest_drive_by_id", "/drives/{id}"),
    _patch("patch_guest_drive_by_id", "/drives/{id}"),
    _put("put_guest_network_interface_by_id", "/network-interfaces/{id}"),
    _patch("patch_guest_network_interface_by_id", "/network-interfaces/{id}"),
    _get("describe_balloon_config", "/balloon", Balloon),
    _put("put_balloon", "/balloon"),
    _patch("patch_balloon", "/balloon"),
    _get("describe_balloon_stats", "/balloon/statistics", BalloonStats),
    _patch("patch_balloon_stats_interval", "/balloon/statistics"),
    _put("put_guest_vsock", "/vsock"),
    _put("put_logger", "/logger"),
    _put("put_metrics", "/metrics"),
    _get("get_mmds", "/mmds", Any),
    _put("put_mmds", "/mmds"),
    _patch("patch_mmds", "/mmds"),
    _put("put_mmds_config", "/mmds/config"),
    _put("put_entropy_device", "/entropy"),
    _put("put_cpu_configuration", "/cpu-config"),
    _put("create_sync_action", "/actions"),
    _put("create_snapshot", "/snapshot/create"),
    _put("load_snapshot", "/snapshot/load"),
    _patch("patch_vm", "/vm"),
    _get("get_export_vm_config", "/vm/config", FullVmConfiguration),
)}


class MicrovmClient:
    """Client for the microVM listening on a given API socket.

    The underlying session pools connections to the socket and may be shared
    between threads. Calls block until Firecracker answers; no timeout is
    applied unless one is configured.

    Attributes:
        session (requests.Session): Session used for every call

    Example:
        fc = MicrovmClient("/tmp/firecracker.socket")
        print(fc.get_firecracker_version().firecracker_version)
    """

    def __init__(self, socket_path: Union[str, Path],
                 session: Optional[requests.Session] = None,
                 pool_connections: int = DEFAULT_POOL_CONNECTIONS,
                 timeout: Optional[float] = None):
        """Initialize the client.

        Args:
            socket_path (str | Path): Path of the Firecracker API socket
            session (requests.Session, optional): Pre-configured session with a
                Unix socket adapter; a pooled one is created when omitted
            pool_connections (int): Pool size for the default session
            timeout (float, optional): Per-call timeout in seconds
        """
        if not str(socket_path):
            raise UriError("Socket path is empty")
        self._socket_path = Path(socket_path)
        self._owns_session = session is None
        self.session = session if session is not None else create_session(pool_connections)
        self.timeout = timeout

    @classmethod
    def from_config(cls, cfg: DictConfig, session: Optional[requests.Session] = None) -> "MicrovmClient":
        """Build a client from the ``client`` section of a loaded configuration."""
        client_cfg = cfg.client
        return cls(client_cfg.socket_path, session=session,
                   pool_connections=client_cfg.pool_connections,
                   timeout=client_cfg.get("timeout"))

    @property
    def socket_path(self) -> Path:
        return self._socket_path

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "MicrovmClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"MicrovmClient(socket_path={str(self._socket_path)!r})"

    def _call(self, name: str, body: Any = None, resource_id: Optional[str] = None) -> Any:
        endpoint = ENDPOINTS[name]
        request = endpoint.request(body, resource_id)
        logger.trace("Dispatching operation", operation=name, path=request.path)
        return execute(self.session, self._socket_path, request,
                       endpoint.response_type, timeout=self.timeout)

    # Instance

    def describe_instance(self) -> InstanceInfo:
        return self._call("describe_instance")

    def get_firecracker_version(self) -> FirecrackerVersion:
        return self._call("get_firecracker_version")

    def create_sync_action(self, action_info: InstanceActionInfo) -> None:
        """Run a synchronous action such as ``InstanceStart`` or ``FlushMetrics``."""
        return self._call("create_sync_action", action_info)

    def start_instance(self) -> None:
        """Boot the microVM. Boot source, machine config and drives must be set first."""
        return self.create_sync_action(InstanceActionInfo(action_type=ActionType.INSTANCE_START))

    def flush_metrics(self) -> None:
        return self.create_sync_action(InstanceActionInfo(action_type=ActionType.FLUSH_METRICS))

    def send_ctrl_alt_del(self) -> None:
        return self.create_sync_action(InstanceActionInfo(action_type=ActionType.SEND_CTRL_ALT_DEL))

    # Machine configuration

    def get_machine_configuration(self) -> MachineConfiguration:
        return self._call("get_machine_configuration")

    def put_machine_configuration(self, machine_config: MachineConfiguration) -> None:
        """Replace the machine configuration. Only valid before boot.

        A body is always required; passing ``None`` raises SerializationError.
        """
        return self._call("put_machine_configuration", machine_config)

    def patch_machine_configuration(self, machine_config: MachineConfiguration) -> None:
        return self._call("patch_machine_configuration", machine_config)

    def put_cpu_configuration(self, cpu_config: CpuConfig) -> None:
        return self._call("put_cpu_configuration", cpu_config)

    def put_guest_boot_source(self, boot_source: BootSource) -> None:
        return self._call("put_guest_boot_source", boot_source)

    # Devices

    def put_guest_drive_by_id(self, drive_id: str, drive: Drive) -> None:
        """Create or replace the drive ``drive_id``. The id is percent-encoded into the path."""
        return self._call("put_guest_drive_by_id", drive, resource_id=drive_id)

    def patch_guest_drive_by_id(self, drive_id: str, drive: PartialDrive) -> None:
        """Update the backing file or rate limiter of a drive, before or after boot."""
        return self._call("patch_guest_drive_by_id", drive, resource_id=drive_id)

    def put_guest_network_interface_by_id(self, iface_id: str, iface: NetworkInterface) -> None:
        return self._call("put_guest_network_interface_by_id", iface, resource_id=iface_id)

    def patch_guest_network_interface_by_id(self, iface_id: str, iface: PartialNetworkInterface) -> None:
        return self._call("patch_guest_network_interface_by_id", iface, resource_id=iface_id)

    def put_guest_vsock(self, vsock: Vsock) -> None:
        return self._call("put_guest_vsock", vsock)

    def put_entropy_device(self, entropy_device: EntropyDevice) -> None:
        return self._call("put_entropy_device", entropy_device)

    # Balloon

    def describe_balloon_config(self) -> Balloon:
        return self._call("describe_balloon_config")

    def put_balloon(self, balloon: Balloon) -> None:
        return self._call("put_balloon", balloon)

    def patch_balloon(self, balloon_update: BalloonUpdate) -> None:
        return self._call("patch_balloon", balloon_update)

    def describe_balloon_stats(self) -> BalloonStats:
        return self._call("describe_balloon_stats")

    def patch_balloon_stats_interval(self, stats_update: BalloonStatsUpdate) -> None:
        return self._call("patch_balloon_stats_interval", stats_update)

    # Logging and metrics

    def put_logger(self, logger_config: Logger) -> None:
        return self._call("put_logger", logger_config)

    def put_metrics(self, metrics: Metrics) -> None:
        return self._call("put_metrics", metrics)

    # MMDS

    def get_mmds(self) -> Any:
        """Return the MMDS data store contents as plain JSON data."""
        return self._call("get_mmds")

    def put_mmds(self, data: Any) -> None:
        return self._call("put_mmds", data)

    def patch_mmds(self, data: Any) -> None:
        return self._call("patch_mmds", data)

    def put_mmds_config(self, mmds_config: MmdsConfig) -> None:
        return self._call("put_mmds_config", mmds_config)

    # Snapshots and VM state

    def create_snapshot(self, params: SnapshotCreateParams) -> None:
        """Write a snapshot of the microVM. The VM must be paused."""
        return self._call("create_snapshot", params)

    def load_snapshot(self, params: SnapshotLoadParams) -> None:
        """Load a snapshot. Only valid on a freshly started, unconfigured Firecracker."""
        return self._call("load_snapshot", params)

    def patch_vm(self, vm: Vm) -> None:
        return self._call("patch_vm", vm)

    def pause_vm(self) -> None:
        return self.patch_vm(Vm(state=VmState.PAUSED))

    def resume_vm(self) -> None:
        return self.patch_vm(Vm(state=VmState.RESUMED))

    def get_export_vm_config(self) -> FullVmConfiguration:
        return self._call("get_export_vm_config")
