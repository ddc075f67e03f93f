"""Fluent builder for send requests."""

from datetime import datetime
from typing import TYPE_CHECKING, Any

from mailblock.errors import EmailValidationError
from mailblock.utils.email_validator import (
    validate_address_field,
    validate_schedule_instant,
    validate_sender,
)

if TYPE_CHECKING:
    from mailblock.schemas.common import ResultEnvelope
    from mailblock.services.client import Mailblock


class EmailBuilder:
    """
    Accumulate send fields through chained calls.

    Each setter validates its own field immediately and raises
    EmailValidationError on bad input. send() hands the collected fields
    to Mailblock.send_email.

    Example:
        result = await (
            client.email()
            .to("user@example.com")
            .from_("app@example.com")
            .subject("Welcome")
            .text("Hello!")
            .send()
        )
    """

    def __init__(self, client: "Mailblock"):
        self.client = client
        self.fields: dict[str, Any] = {}

    def to(self, emails: str | list[str]) -> "EmailBuilder":
        self.fields["to"] = validate_address_field(emails, "to")
        return self

    def cc(self, emails: str | list[str] | None) -> "EmailBuilder":
        if emails is not None:
            self.fields["cc"] = validate_address_field(emails, "cc")
        return self

    def bcc(self, emails: str | list[str] | None) -> "EmailBuilder":
        if emails is not None:
            self.fields["bcc"] = validate_address_field(emails, "bcc")
        return self

    def from_(self, email: str) -> "EmailBuilder":
        self.fields["from_"] = validate_sender(email)
        return self

    def subject(self, subject: str) -> "EmailBuilder":
        if not subject or not isinstance(subject, str) or not subject.strip():
            raise EmailValidationError("Subject must be a non-empty string")
        self.fields["subject"] = subject.strip()
        return self

    def text(self, content: str) -> "EmailBuilder":
        if not content or not isinstance(content, str):
            raise EmailValidationError("Text content must be a non-empty string")
        self.fields["text"] = content
        return self

    def html(self, content: str) -> "EmailBuilder":
        if not content or not isinstance(content, str):
            raise EmailValidationError("HTML content must be a non-empty string")
        self.fields["html"] = content
        return self

    def schedule_at(self, date: datetime | str) -> "EmailBuilder":
        """Schedule delivery; the date must be strictly in the future."""
        self.fields["scheduled_at"] = validate_schedule_instant(date)
        return self

    async def send(self) -> "ResultEnvelope":
        """Submit the accumulated fields through the client."""
        return await self.client.send_email(**self.fields)
