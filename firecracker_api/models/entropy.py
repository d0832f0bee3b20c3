from typing import Optional

from .base import FirecrackerModel
from .rate_limiter import RateLimiter


class EntropyDevice(FirecrackerModel):
    rate_limiter: Optional[RateLimiter] = None
