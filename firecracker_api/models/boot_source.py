from typing import Optional

from .base import FirecrackerModel


class BootSource(FirecrackerModel):
    """Kernel image and arguments used to boot the guest. Paths are host paths."""

    kernel_image_path: str
    boot_args: Optional[str] = None
    initrd_path: Optional[str] = None
