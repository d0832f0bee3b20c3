from typing import Optional

from .base import FirecrackerModel


class TokenBucket(FirecrackerModel):
    """Token bucket with a refill interval in milliseconds.

    ``one_time_burst`` is an initial credit that does not replenish.
    """

    size: int
    refill_time: int
    one_time_burst: Optional[int] = None


class RateLimiter(FirecrackerModel):
    bandwidth: Optional[TokenBucket] = None
    ops: Optional[TokenBucket] = None
