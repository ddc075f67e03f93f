"""Uniform result envelopes returned by every client operation."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from mailblock.errors import ErrorType


class Envelope(BaseModel):
    """Diagnostic fields carried by every result, success or failure."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool
    request_id: str
    timestamp: str
    duration: int

    def to_dict(self) -> dict[str, Any]:
        """Render the camelCase wire shape, leaving out fields never set."""
        data = self.model_dump(mode="json", by_alias=True, exclude_unset=True)
        data["success"] = self.success
        return data


class SuccessEnvelope(Envelope):
    """Successful operation result."""

    success: Literal[True] = True
    data: Any = None
    message: str


class ErrorEnvelope(Envelope):
    """Failed operation result."""

    success: Literal[False] = False
    error: str
    error_type: ErrorType
    suggestion: str | None = None
    status_code: int | None = None
    endpoint: str | None = None
    current_status: Any = None


ResultEnvelope = SuccessEnvelope | ErrorEnvelope
