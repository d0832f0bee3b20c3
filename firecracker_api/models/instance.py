from enum import Enum

from .base import FirecrackerModel


class InstanceState(str, Enum):
    NOT_STARTED = "Not started"
    RUNNING = "Running"
    PAUSED = "Paused"


class InstanceInfo(FirecrackerModel):
    """MicroVM instance information. ``state`` is read-only for the control plane."""

    app_name: str
    id: str
    state: InstanceState
    vmm_version: str


class FirecrackerVersion(FirecrackerModel):
    firecracker_version: str


class ActionType(str, Enum):
    FLUSH_METRICS = "FlushMetrics"
    INSTANCE_START = "InstanceStart"
    SEND_CTRL_ALT_DEL = "SendCtrlAltDel"


class InstanceActionInfo(FirecrackerModel):
    action_type: ActionType


class VmState(str, Enum):
    PAUSED = "Paused"
    RESUMED = "Resumed"


class Vm(FirecrackerModel):
    state: VmState
