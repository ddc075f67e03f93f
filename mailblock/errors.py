"""Exceptions and HTTP failure classification."""

from enum import Enum


class MailblockError(Exception):
    """Base exception for the Mailblock SDK."""

    pass


class ConfigurationError(MailblockError, ValueError):
    """Raised when the client is constructed with invalid settings."""

    pass


class EmailValidationError(MailblockError, ValueError):
    """Raised when input fails local validation."""

    pass


class ErrorType(str, Enum):
    """Machine-checkable failure category carried by error envelopes."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    CLIENT_ERROR = "CLIENT_ERROR"
    SERVER_ERROR = "SERVER_ERROR"
    RATE_LIMIT_ERROR = "RATE_LIMIT_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


DEFAULT_SUGGESTION = "Please try again or contact support if the issue persists"
NETWORK_SUGGESTION = "Check your internet connection and try again"

ERROR_SUGGESTIONS: dict[int, str] = {
    400: "Check your request parameters and try again",
    401: "Verify your API key is correct and has proper permissions",
    403: "Your API key may not have permission for this operation",
    404: "The API endpoint was not found. Check the base URL",
    429: "You are being rate limited. Wait a moment and try again",
    500: "Server error occurred. Try again in a few moments",
    503: "Service temporarily unavailable. Please try again later",
}


def categorize_error(status_code: int) -> ErrorType:
    """
    Map an HTTP status code to an error category.

    429 is checked first so it is not swallowed by the 4xx bucket.

    Args:
        status_code: HTTP status of the failed response

    Returns:
        The matching ErrorType
    """
    if status_code == 429:
        return ErrorType.RATE_LIMIT_ERROR
    if 400 <= status_code < 500:
        return ErrorType.CLIENT_ERROR
    if status_code >= 500:
        return ErrorType.SERVER_ERROR
    return ErrorType.UNKNOWN_ERROR


def get_error_suggestion(status_code: int | None) -> str:
    """Return the human suggestion for a status code."""
    if status_code is None:
        return DEFAULT_SUGGESTION
    return ERROR_SUGGESTIONS.get(status_code, DEFAULT_SUGGESTION)
