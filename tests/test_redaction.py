"""Tests for log redaction helpers."""

from mailblock.utils.redaction import REDACTED, mask_addresses, mask_email, redact_payload


class TestMaskEmail:
    def test_mask_normal(self):
        assert mask_email("john@example.com") == "j***@example.com"

    def test_mask_two_char_local(self):
        assert mask_email("ab@example.com") == "a***@example.com"

    def test_mask_single_char_local(self):
        assert mask_email("a@example.com") == "***@example.com"

    def test_mask_no_at(self):
        assert mask_email("invalid") == "***"

    def test_mask_list(self):
        assert mask_addresses(["john@example.com", "a@b.com"]) == [
            "j***@example.com",
            "***@b.com",
        ]

    def test_mask_none(self):
        assert mask_addresses(None) is None


class TestRedactPayload:
    def test_bodies_redacted(self):
        payload = {
            "to": "a@b.com",
            "subject": "Hi",
            "text": "secret text",
            "html": "<p>secret</p>",
        }
        redacted = redact_payload(payload)
        assert redacted["text"] == REDACTED
        assert redacted["html"] == REDACTED
        assert redacted["subject"] == "Hi"
        assert payload["text"] == "secret text"

    def test_update_bodies_redacted(self):
        redacted = redact_payload({"body_html": "<b>x</b>", "body_text": "x", "scheduled_at": None})
        assert redacted == {"body_html": REDACTED, "body_text": REDACTED, "scheduled_at": None}

    def test_none_payload(self):
        assert redact_payload(None) is None
