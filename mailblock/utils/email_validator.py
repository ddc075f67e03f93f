"""Local input validation run before any request leaves the client."""

import re
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from mailblock.errors import EmailValidationError
from mailblock.schemas.email import (
    UPDATABLE_FIELDS,
    AddressField,
    SendEmailPayload,
    UpdateScheduledPayload,
)

# local@domain.tld, no whitespace, at least one dot after the @
EMAIL_REGEX = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

EmailId = str | int | float


def is_valid_email(value: Any) -> bool:
    """
    Check a single address against the syntactic pattern.

    No case folding, punycode handling or DNS lookup is performed.
    """
    return isinstance(value, str) and EMAIL_REGEX.fullmatch(value) is not None


def validate_address_field(value: Any, field_name: str) -> AddressField:
    """
    Validate a single address or a non-empty list of addresses.

    Args:
        value: Address string, or list/tuple of address strings
        field_name: Field being validated, used in error messages

    Returns:
        The address, or the addresses as a list

    Raises:
        EmailValidationError: Naming the field and, for lists, the bad element
    """
    if isinstance(value, str):
        if not is_valid_email(value):
            raise EmailValidationError(f"Invalid '{field_name}' email address: {value}")
        return value

    if isinstance(value, (list, tuple)):
        if len(value) == 0:
            raise EmailValidationError(f"'{field_name}' list cannot be empty")
        for email in value:
            if not is_valid_email(email):
                raise EmailValidationError(f"Invalid '{field_name}' email address: {email}")
        return list(value)

    raise EmailValidationError(f"'{field_name}' must be a string or list of strings")


def validate_sender(value: Any) -> str:
    """Validate the single sender address."""
    if not is_valid_email(value):
        raise EmailValidationError(f"Invalid 'from' email address: {value}")
    return value


def parse_timestamp(value: str) -> datetime | None:
    """Parse an ISO-8601 string into an aware datetime, or None if unparseable."""
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _as_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_wire_timestamp(value: datetime) -> str:
    """Render a datetime as UTC ISO-8601 with milliseconds and a Z suffix."""
    utc = _as_aware(value).astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def validate_schedule_instant(value: Any, now: datetime | None = None) -> datetime:
    """
    Resolve a scheduling value to an instant strictly in the future.

    Args:
        value: datetime or ISO-8601 string
        now: Reference time (defaults to the current UTC time)

    Returns:
        Timezone-aware datetime

    Raises:
        EmailValidationError: If unparseable, of the wrong type, or not after now
    """
    if isinstance(value, datetime):
        instant = _as_aware(value)
    elif isinstance(value, str):
        instant = parse_timestamp(value)
        if instant is None:
            raise EmailValidationError("Invalid date format for scheduling")
    else:
        raise EmailValidationError(
            "Scheduled date must be a datetime object or valid date string"
        )

    reference = _as_aware(now) if now is not None else datetime.now(timezone.utc)
    if instant <= reference:
        raise EmailValidationError("Scheduled date must be in the future")
    return instant


def _is_absent(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_send_request(
    to: Any = None,
    from_: Any = None,
    subject: Any = None,
    text: Any = None,
    html: Any = None,
    cc: Any = None,
    bcc: Any = None,
    scheduled_at: Any = None,
    now: datetime | None = None,
) -> SendEmailPayload:
    """
    Validate a send request and build its outbound payload.

    Rules run in a fixed order and the first failure is reported:
    presence of to, from, subject, then text/html, then address syntax
    for to/from/cc/bcc, then body types, then the schedule.

    Returns:
        SendEmailPayload with the subject trimmed and scheduled_at in wire form

    Raises:
        EmailValidationError: On the first failing rule
    """
    if _is_absent(to):
        raise EmailValidationError("Recipient email address (to) is required")
    if _is_absent(from_):
        raise EmailValidationError("Sender email address (from) is required")
    if not subject or not isinstance(subject, str) or not subject.strip():
        raise EmailValidationError("Email subject is required")
    if not text and not html:
        raise EmailValidationError("Either text or html content is required")

    to = validate_address_field(to, "to")
    from_ = validate_sender(from_)
    if cc is not None:
        cc = validate_address_field(cc, "cc")
    if bcc is not None:
        bcc = validate_address_field(bcc, "bcc")

    if text and not isinstance(text, str):
        raise EmailValidationError("Text content must be a non-empty string")
    if html and not isinstance(html, str):
        raise EmailValidationError("HTML content must be a non-empty string")

    wire_scheduled_at = None
    if scheduled_at is not None:
        wire_scheduled_at = to_wire_timestamp(validate_schedule_instant(scheduled_at, now))

    return SendEmailPayload(
        to=to,
        from_=from_,
        subject=subject.strip(),
        text=text or None,
        html=html or None,
        cc=cc,
        bcc=bcc,
        scheduled_at=wire_scheduled_at,
    )


def validate_email_id(email_id: Any) -> EmailId:
    """Require a non-empty string or numeric email identifier."""
    if not email_id:
        raise EmailValidationError("Email ID is required")
    if isinstance(email_id, bool) or not isinstance(email_id, (str, int, float)):
        raise EmailValidationError("Email ID must be a number or string")
    return email_id


def validate_email_ids(email_ids: Any) -> list[EmailId]:
    """Require a non-empty list whose every element is a string or number."""
    if email_ids is None:
        raise EmailValidationError("Email IDs list is required")
    if not isinstance(email_ids, (list, tuple)):
        raise EmailValidationError("Email IDs must be a list")
    if len(email_ids) == 0:
        raise EmailValidationError("Email IDs list cannot be empty")
    for email_id in email_ids:
        if isinstance(email_id, bool) or not isinstance(email_id, (str, int, float)):
            raise EmailValidationError(
                f"Invalid email ID: {email_id}. All email IDs must be numbers or strings"
            )
    return list(email_ids)


def validate_update_request(email_id: Any, updates: Any) -> UpdateScheduledPayload:
    """
    Validate a scheduled-email update and build its sparse payload.

    scheduled_at may be a datetime, None (unschedule) or a parseable
    string. Unlike send-time scheduling, it is not required to be in
    the future.

    Returns:
        UpdateScheduledPayload holding only the recognized keys present

    Raises:
        EmailValidationError: On the first failing rule
    """
    validate_email_id(email_id)

    if not isinstance(updates, Mapping):
        raise EmailValidationError("Updates object is required")

    provided = [key for key in UPDATABLE_FIELDS if key in updates]
    if not provided:
        raise EmailValidationError(
            "At least one field must be provided for update "
            "(subject, body_html, body_text, or scheduled_at)"
        )

    fields: dict[str, Any] = {}
    for key in provided:
        value = updates[key]
        if key == "scheduled_at":
            if isinstance(value, datetime):
                value = to_wire_timestamp(value)
            elif isinstance(value, str):
                if parse_timestamp(value) is None:
                    raise EmailValidationError("Invalid scheduled_at date format")
            elif value is not None:
                raise EmailValidationError(
                    "scheduled_at must be a datetime object, valid date string, or null"
                )
        elif value is not None and not isinstance(value, str):
            raise EmailValidationError(f"{key} must be a string")
        fields[key] = value

    return UpdateScheduledPayload(**fields)
