"""Outbound payload schemas for the Mailblock REST backend."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

AddressField = str | list[str]

UPDATABLE_FIELDS = ("subject", "body_html", "body_text", "scheduled_at")


class SendEmailPayload(BaseModel):
    """Body of POST /v1/send-email."""

    model_config = ConfigDict(populate_by_name=True)

    to: AddressField = Field(..., description="Recipient address or addresses")
    from_: str = Field(..., alias="from", description="Sender email address")
    subject: str = Field(..., min_length=1, description="Trimmed email subject")
    text: str | None = Field(None, description="Plain text body")
    html: str | None = Field(None, description="HTML body")
    cc: AddressField | None = Field(None, description="Carbon copy recipients")
    bcc: AddressField | None = Field(None, description="Blind carbon copy recipients")
    scheduled_at: str | None = Field(
        None,
        description="Canonical UTC timestamp for scheduled delivery",
    )

    @property
    def is_scheduled(self) -> bool:
        return self.scheduled_at is not None

    def to_wire(self) -> dict[str, Any]:
        """Render the JSON body, omitting absent optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


class UpdateScheduledPayload(BaseModel):
    """Sparse body of PUT /v1/update-scheduled-email/{id}."""

    subject: str | None = None
    body_html: str | None = None
    body_text: str | None = None
    scheduled_at: str | None = Field(
        None,
        description="New delivery time; an explicit null unschedules",
    )

    def to_wire(self) -> dict[str, Any]:
        """Render only the fields that were provided, keeping explicit nulls."""
        return self.model_dump(exclude_unset=True)
