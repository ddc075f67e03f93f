"""Tests for HTTP failure classification."""

import pytest

from mailblock.errors import (
    DEFAULT_SUGGESTION,
    ERROR_SUGGESTIONS,
    ErrorType,
    categorize_error,
    get_error_suggestion,
)


class TestCategorizeError:
    @pytest.mark.parametrize("status_code", [400, 401, 403, 404, 422, 499])
    def test_client_errors(self, status_code):
        assert categorize_error(status_code) is ErrorType.CLIENT_ERROR

    @pytest.mark.parametrize("status_code", [500, 502, 503, 504, 599])
    def test_server_errors(self, status_code):
        assert categorize_error(status_code) is ErrorType.SERVER_ERROR

    def test_rate_limit_overrides_client_bucket(self):
        assert categorize_error(429) is ErrorType.RATE_LIMIT_ERROR

    @pytest.mark.parametrize("status_code", [200, 302, 399])
    def test_unknown(self, status_code):
        assert categorize_error(status_code) is ErrorType.UNKNOWN_ERROR


class TestGetErrorSuggestion:
    def test_rate_limit_suggestion(self):
        assert get_error_suggestion(429) == (
            "You are being rate limited. Wait a moment and try again"
        )

    def test_every_known_status_has_specific_text(self):
        for status_code in (400, 401, 403, 404, 429, 500, 503):
            assert get_error_suggestion(status_code) == ERROR_SUGGESTIONS[status_code]
            assert get_error_suggestion(status_code) != DEFAULT_SUGGESTION

    @pytest.mark.parametrize("status_code", [402, 418, 502, None])
    def test_generic_fallback(self, status_code):
        assert get_error_suggestion(status_code) == DEFAULT_SUGGESTION

    def test_error_type_is_string_valued(self):
        assert ErrorType.NETWORK_ERROR == "NETWORK_ERROR"
