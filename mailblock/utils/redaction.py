"""Redaction helpers for diagnostic log output."""

from typing import Any

REDACTED = "[REDACTED]"

# Message body fields that are never logged verbatim
BODY_FIELDS = frozenset({"text", "html", "body_text", "body_html"})


def mask_email(email: str) -> str:
    """
    Mask an email address for log output.

    Examples:
        john@example.com    → j***@example.com
        ab@example.com      → a***@example.com
        a@example.com       → ***@example.com

    Args:
        email: Full email address

    Returns:
        Masked email address
    """
    if not isinstance(email, str) or "@" not in email:
        return "***"

    local, domain = email.split("@", 1)

    if len(local) > 1:
        masked_local = local[0] + "***"
    else:
        masked_local = "***"

    return f"{masked_local}@{domain}"


def mask_addresses(value: Any) -> Any:
    """Mask a single address or every address in a list."""
    if isinstance(value, (list, tuple)):
        return [mask_email(item) for item in value]
    if value is None:
        return None
    return mask_email(value)


def redact_payload(payload: dict[str, Any] | None) -> dict[str, Any] | None:
    """Return a copy of an outbound payload with body content replaced."""
    if payload is None:
        return None
    return {
        key: REDACTED if key in BODY_FIELDS and value is not None else value
        for key, value in payload.items()
    }
