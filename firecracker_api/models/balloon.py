from typing import Optional

from .base import FirecrackerModel


class Balloon(FirecrackerModel):
    """Balloon device descriptor.

    A non-zero ``stats_polling_interval_s`` enables statistics; it cannot be
    switched on or off after boot.
    """

    amount_mib: int
    deflate_on_oom: bool
    stats_polling_interval_s: Optional[int] = None


class BalloonUpdate(FirecrackerModel):
    amount_mib: int


class BalloonStatsUpdate(FirecrackerModel):
    stats_polling_interval_s: int


class BalloonStats(FirecrackerModel):
    """Balloon device statistics. Memory figures are in bytes unless named *_mib."""

    target_pages: int
    actual_pages: int
    target_mib: int
    actual_mib: int
    swap_in: Optional[int] = None
    swap_out: Optional[int] = None
    major_faults: Optional[int] = None
    minor_faults: Optional[int] = None
    free_memory: Optional[int] = None
    total_memory: Optional[int] = None
    available_memory: Optional[int] = None
    disk_caches: Optional[int] = None
    hugetlb_allocations: Optional[int] = None
    hugetlb_failures: Optional[int] = None
