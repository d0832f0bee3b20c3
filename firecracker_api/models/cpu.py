from enum import Enum
from typing import Any, Optional

from .base import FirecrackerModel


class CpuTemplate(str, Enum):
    """Static CPU templates (deprecated upstream in favour of ``CpuConfig``)."""

    C3 = "C3"
    T2 = "T2"
    T2S = "T2S"
    T2CL = "T2CL"
    T2A = "T2A"
    V1N1 = "V1N1"
    NONE = "None"


class CpuConfig(FirecrackerModel):
    """Custom CPU template.

    The modifier collections are architecture specific: ``cpuid_modifiers``
    and ``msr_modifiers`` apply to x86_64, the others to aarch64. Their inner
    structure is passed through untouched.
    """

    cpuid_modifiers: Optional[Any] = None
    msr_modifiers: Optional[Any] = None
    reg_modifiers: Optional[Any] = None
    vcpu_features: Optional[Any] = None
    kvm_capabilities: Optional[Any] = None
