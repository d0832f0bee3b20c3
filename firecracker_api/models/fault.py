from typing import Optional

from .base import FirecrackerModel


class FaultBody(FirecrackerModel):
    """Generic error record returned with every non-2xx response."""

    fault_message: Optional[str] = None
