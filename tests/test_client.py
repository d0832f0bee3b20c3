import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
import requests
from omegaconf import OmegaConf

from firecracker_api import ENDPOINTS, MicrovmClient
from firecracker_api.errors import ApiError, SerializationError, TransportError, UriError
from firecracker_api.models import (
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
    InstanceState,
    Logger,
    LogLevel,
    MachineConfiguration,
    Metrics,
    MmdsConfig,
    NetworkInterface,
    PartialDrive,
    PartialNetworkInterface,
    SnapshotCreateParams,
    SnapshotLoadParams,
    SnapshotType,
    Vm,
    VmState,
    Vsock,
)

ROOT_DRIVE = Drive(drive_id="rootfs", is_root_device=True, path_on_host="/vm/rootfs.ext4", is_read_only=False)

# operation -> (args, request path)
CALLS = {
    "describe_instance": ((), "/"),
    "get_firecracker_version": ((), "/version"),
    "get_machine_configuration": ((), "/machine-config"),
    "put_machine_configuration": ((MachineConfiguration(vcpu_count=2, mem_size_mib=256),), "/machine-config"),
    "patch_machine_configuration": ((MachineConfiguration(vcpu_count=2, mem_size_mib=512),), "/machine-config"),
    "put_guest_boot_source": ((BootSource(kernel_image_path="/vm/vmlinux"),), "/boot-source"),
    "put_guest_drive_by_id": (("rootfs", ROOT_DRIVE), "/drives/rootfs"),
    "patch_guest_drive_by_id": (("rootfs", PartialDrive(drive_id="rootfs", path_on_host="/vm/new.ext4")),
                                "/drives/rootfs"),
    "put_guest_network_interface_by_id": (("eth0", NetworkInterface(iface_id="eth0", host_dev_name="tap0")),
                                          "/network-interfaces/eth0"),
    "patch_guest_network_interface_by_id": (("eth0", PartialNetworkInterface(iface_id="eth0")),
                                            "/network-interfaces/eth0"),
    "describe_balloon_config": ((), "/balloon"),
    "put_balloon": ((Balloon(amount_mib=64, deflate_on_oom=True),), "/balloon"),
    "patch_balloon": ((BalloonUpdate(amount_mib=32),), "/balloon"),
    "describe_balloon_stats": ((), "/balloon/statistics"),
    "patch_balloon_stats_interval": ((BalloonStatsUpdate(stats_polling_interval_s=5),), "/balloon/statistics"),
    "put_guest_vsock": ((Vsock(guest_cid=3, uds_path="/tmp/v.sock"),), "/vsock"),
    "put_logger": ((Logger(level=LogLevel.DEBUG, log_path="/tmp/fc.log"),), "/logger"),
    "put_metrics": ((Metrics(metrics_path="/tmp/fc.metrics"),), "/metrics"),
    "get_mmds": ((), "/mmds"),
    "put_mmds": (({"latest": {"meta-data": {"ami-id": "ami-1"}}},), "/mmds"),
    "patch_mmds": (({"latest": {"meta-data": {"ami-id": "ami-2"}}},), "/mmds"),
    "put_mmds_config": ((MmdsConfig(network_interfaces=["eth0"]),), "/mmds/config"),
    "put_entropy_device": ((EntropyDevice(),), "/entropy"),
    "put_cpu_configuration": ((CpuConfig(),), "/cpu-config"),
    "create_sync_action": ((InstanceActionInfo(action_type=ActionType.INSTANCE_START),), "/actions"),
    "create_snapshot": ((SnapshotCreateParams(snapshot_path="/s/vm.snap", mem_file_path="/s/vm.mem"),),
                        "/snapshot/create"),
    "load_snapshot": ((SnapshotLoadParams(snapshot_path="/s/vm.snap", mem_file_path="/s/vm.mem"),),
                      "/snapshot/load"),
    "patch_vm": ((Vm(state=VmState.PAUSED),), "/vm"),
    "get_export_vm_config": ((), "/vm/config"),
}

GET_PAYLOADS = {
    "describe_instance": {"app_name": "Firecracker", "id": "vm-1", "state": "Not started", "vmm_version": "1.12.0"},
    "get_firecracker_version": {"firecracker_version": "1.12.0"},
    "get_machine_configuration": {"vcpu_count": 2, "mem_size_mib": 256, "smt": False},
    "describe_balloon_config": {"amount_mib": 64, "deflate_on_oom": True, "stats_polling_interval_s": 1},
    "describe_balloon_stats": {"target_pages": 1, "actual_pages": 1, "target_mib": 4, "actual_mib": 4},
    "get_mmds": {"latest": {"meta-data": {"ami-id": "ami-1"}}},
    "get_export_vm_config": {"boot-source": {"kernel_image_path": "/vm/vmlinux"}, "drives": []},
}

NO_CONTENT_OPS = [name for name, ep in ENDPOINTS.items() if not ep.expects_response_body]


def test_every_endpoint_has_a_client_method():
    assert set(CALLS) == set(ENDPOINTS)
    for name in ENDPOINTS:
        assert callable(getattr(MicrovmClient, name))


def test_endpoint_table_shape():
    for name, endpoint in ENDPOINTS.items():
        assert endpoint.method in ("GET", "PUT", "PATCH")
        if endpoint.method == "GET":
            assert not endpoint.expects_body and endpoint.expects_response_body
        else:
            assert endpoint.expects_body and not endpoint.expects_response_body


@pytest.mark.parametrize("name", NO_CONTENT_OPS)
def test_no_content_operations_return_none(fake_firecracker, fc_client, name):
    args, path = CALLS[name]
    endpoint = ENDPOINTS[name]
    fake_firecracker.reply(endpoint.method, path, 204)

    assert getattr(fc_client, name)(*args) is None

    recorded = fake_firecracker.requests[-1]
    assert recorded.method == endpoint.method
    assert recorded.path == path
    assert recorded.headers["Content-Type"] == "application/json"
    assert int(recorded.headers["Content-Length"]) == len(recorded.body)


@pytest.mark.parametrize("name", sorted(GET_PAYLOADS))
def test_get_operations_decode_payload(fake_firecracker, fc_client, name):
    _, path = CALLS[name]
    fake_firecracker.reply("GET", path, 200, GET_PAYLOADS[name])

    result = getattr(fc_client, name)()

    response_type = ENDPOINTS[name].response_type
    if name == "get_mmds":
        assert result == GET_PAYLOADS[name]
    else:
        assert result == response_type.model_validate(GET_PAYLOADS[name])


@pytest.mark.parametrize("name", sorted(CALLS))
@pytest.mark.parametrize("status", [400, 404, 500])
def test_every_operation_maps_failures_to_api_error(fake_firecracker, fc_client, name, status):
    args, path = CALLS[name]
    fake_firecracker.reply(ENDPOINTS[name].method, path, status, "")

    with pytest.raises(ApiError) as excinfo:
        getattr(fc_client, name)(*args)

    assert excinfo.value.status == status
    assert excinfo.value.entity is None


def test_put_boot_source_scenario(fake_firecracker, fc_client):
    fake_firecracker.reply("PUT", "/boot-source", 204)

    assert fc_client.put_guest_boot_source(BootSource(kernel_image_path="/vm/vmlinux")) is None
    assert fake_firecracker.requests[-1].json() == {"kernel_image_path": "/vm/vmlinux"}


def test_instance_start_rejected_scenario(fake_firecracker, fc_client):
    fake_firecracker.reply("PUT", "/actions", 400, {"fault_message": "bad state"})

    with pytest.raises(ApiError) as excinfo:
        fc_client.create_sync_action(InstanceActionInfo(action_type=ActionType.INSTANCE_START))

    assert excinfo.value.status == 400
    assert excinfo.value.fault_message == "bad state"
    assert excinfo.value.is_client_error
    assert fake_firecracker.requests[-1].json() == {"action_type": "InstanceStart"}


def test_get_version_scenario(fake_firecracker, fc_client):
    fake_firecracker.reply("GET", "/version", 200, {"firecracker_version": "1.12.0"})

    assert fc_client.get_firecracker_version() == FirecrackerVersion(firecracker_version="1.12.0")
    assert fake_firecracker.requests[-1].headers["Accept"] == "application/json"


def test_patch_drive_internal_error_scenario(fake_firecracker, fc_client):
    fake_firecracker.reply("PATCH", "/drives/rootfs", 500, "internal error", content_type="text/plain")

    with pytest.raises(ApiError) as excinfo:
        fc_client.patch_guest_drive_by_id("rootfs", PartialDrive(drive_id="rootfs", path_on_host="/vm/b.ext4"))

    err = excinfo.value
    assert err.status == 500
    assert err.content == "internal error"
    assert err.entity is None
    assert err.is_server_error
    assert err.reason == "Internal Server Error"


def test_drive_id_is_percent_encoded(fake_firecracker, fc_client):
    fake_firecracker.reply("PUT", "/drives/data%2Fdisk", 204)

    fc_client.put_guest_drive_by_id("data/disk", Drive(drive_id="data/disk", is_root_device=False,
                                                       path_on_host="/vm/data.ext4", is_read_only=True))

    assert fake_firecracker.requests[-1].path == "/drives/data%2Fdisk"


def test_iface_id_is_percent_encoded(fake_firecracker, fc_client):
    fake_firecracker.reply("PATCH", "/network-interfaces/eth%200", 204)

    fc_client.patch_guest_network_interface_by_id("eth 0", PartialNetworkInterface(iface_id="eth 0"))

    assert fake_firecracker.requests[-1].path == "/network-interfaces/eth%200"


def test_machine_config_requires_body(fake_firecracker, fc_client):
    with pytest.raises(SerializationError):
        fc_client.put_machine_configuration(None)

    assert fake_firecracker.requests == []


def test_convenience_actions(fake_firecracker, fc_client):
    fake_firecracker.reply("PUT", "/actions", 204)
    fake_firecracker.reply("PATCH", "/vm", 204)

    fc_client.start_instance()
    fc_client.flush_metrics()
    fc_client.send_ctrl_alt_del()
    fc_client.pause_vm()
    fc_client.resume_vm()

    bodies = [r.json() for r in fake_firecracker.requests]
    assert bodies == [
        {"action_type": "InstanceStart"},
        {"action_type": "FlushMetrics"},
        {"action_type": "SendCtrlAltDel"},
        {"state": "Paused"},
        {"state": "Resumed"},
    ]


def test_describe_instance_state(fake_firecracker, fc_client):
    fake_firecracker.reply("GET", "/", 200, GET_PAYLOADS["describe_instance"])

    info = fc_client.describe_instance()

    assert isinstance(info, InstanceInfo)
    assert info.state is InstanceState.NOT_STARTED


def test_export_vm_config_uses_hyphenated_keys(fake_firecracker, fc_client):
    fake_firecracker.reply("GET", "/vm/config", 200, {
        "boot-source": {"kernel_image_path": "/vm/vmlinux", "boot_args": "console=ttyS0"},
        "machine-config": {"vcpu_count": 1, "mem_size_mib": 128},
        "network-interfaces": [{"iface_id": "eth0", "host_dev_name": "tap0"}],
        "drives": [ROOT_DRIVE.model_dump(exclude_none=True)],
    })

    config = fc_client.get_export_vm_config()

    assert isinstance(config, FullVmConfiguration)
    assert config.boot_source.boot_args == "console=ttyS0"
    assert config.machine_config.mem_size_mib == 128
    assert config.network_interfaces[0].host_dev_name == "tap0"
    assert config.drives == [ROOT_DRIVE]


def test_snapshot_create_body(fake_firecracker, fc_client):
    fake_firecracker.reply("PUT", "/snapshot/create", 204)

    fc_client.create_snapshot(SnapshotCreateParams(snapshot_path="/s/a", mem_file_path="/s/b",
                                                   snapshot_type=SnapshotType.DIFF))

    assert fake_firecracker.requests[-1].json() == {
        "snapshot_path": "/s/a", "mem_file_path": "/s/b", "snapshot_type": "Diff"}


def test_balloon_stats_decoding(fake_firecracker, fc_client):
    fake_firecracker.reply("GET", "/balloon/statistics", 200, {
        "target_pages": 10, "actual_pages": 8, "target_mib": 40, "actual_mib": 32,
        "free_memory": 1024, "unknown_future_field": 1})

    stats = fc_client.describe_balloon_stats()

    assert stats == BalloonStats(target_pages=10, actual_pages=8, target_mib=40, actual_mib=32,
                                 free_memory=1024)


def test_concurrent_calls_share_one_client(fake_firecracker, fc_client):
    fake_firecracker.reply("GET", "/version", 200, {"firecracker_version": "1.12.0"})

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: fc_client.get_firecracker_version(), range(32)))

    assert all(r.firecracker_version == "1.12.0" for r in results)
    assert len(fake_firecracker.requests) == 32


def test_missing_socket_is_transport_error(tmp_path):
    with MicrovmClient(tmp_path / "missing.sock") as client:
        with pytest.raises(TransportError):
            client.get_firecracker_version()


def test_custom_session_is_used_and_not_closed(fake_firecracker):
    from firecracker_api.request import create_session

    session = create_session(pool_connections=2)
    closed = threading.Event()
    original_close = session.close

    def tracking_close():
        closed.set()
        original_close()

    session.close = tracking_close
    fake_firecracker.reply("GET", "/version", 200, {"firecracker_version": "1.12.0"})

    with MicrovmClient(fake_firecracker.socket_path, session=session) as client:
        assert client.session is session
        client.get_firecracker_version()

    assert not closed.is_set()
    original_close()


def test_from_config():
    cfg = OmegaConf.create({"client": {"socket_path": "/tmp/x.sock", "pool_connections": 3, "timeout": 1.5}})

    client = MicrovmClient.from_config(cfg)

    assert str(client.socket_path) == "/tmp/x.sock"
    assert client.timeout == 1.5
    assert isinstance(client.session, requests.Session)
    client.close()


def test_empty_socket_path_is_rejected():
    with pytest.raises(UriError):
        MicrovmClient("")


def test_dot_segment_drive_id_never_reaches_server(fake_firecracker, fc_client):
    with pytest.raises(UriError):
        fc_client.put_guest_drive_by_id("..", Drive(drive_id="..", is_root_device=False))

    assert fake_firecracker.requests == []
