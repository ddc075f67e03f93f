"""Mailblock transactional email SDK."""

import logging

from mailblock.errors import (
    ConfigurationError,
    EmailValidationError,
    ErrorType,
    MailblockError,
    categorize_error,
    get_error_suggestion,
)
from mailblock.schemas.common import ErrorEnvelope, ResultEnvelope, SuccessEnvelope
from mailblock.services.builder import EmailBuilder
from mailblock.services.client import Mailblock

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "Mailblock",
    "EmailBuilder",
    "ResultEnvelope",
    "SuccessEnvelope",
    "ErrorEnvelope",
    "ErrorType",
    "MailblockError",
    "ConfigurationError",
    "EmailValidationError",
    "categorize_error",
    "get_error_suggestion",
]
