"""Shared base model and JSON helpers for Firecracker API resources."""
import json
from typing import Any

from pydantic import BaseModel, ConfigDict


class FirecrackerModel(BaseModel):
    """Base for every resource sent to or received from the API socket.

    Fields use Firecracker's canonical JSON names. Optional fields default to
    ``None`` and are left out of the serialized payload.
    """

    model_config = ConfigDict(populate_by_name=True)

    def to_json(self) -> str:
        return to_json(self)


def to_payload(value: Any) -> Any:
    """Convert a model (or a plain JSON value) into JSON-compatible data."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    return value


def to_json(value: Any) -> str:
    return json.dumps(to_payload(value))
