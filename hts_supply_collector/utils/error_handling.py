"""
Error types raised by the collector and their classification.

Nothing in the collector retries. Every error aborts the aggregation call and
is classified here only so callers (the CLI in particular) can report it.
"""

import logging
from enum import Enum
from typing import Any, Optional

logger = logging.getLogger(__name__)


class SupplyCollectorError(Exception):
    """Base class for all collector errors."""


class InvalidInputError(SupplyCollectorError, ValueError):
    """An aggregation argument failed validation before any network call."""

    def __init__(self, field: str, value: Any, message: Optional[str] = None):
        self.field = field
        self.value = value
        super().__init__(message or f"Invalid {field} {value!r}")


class MirrorTransportError(SupplyCollectorError):
    """The mirror node could not be reached or the exchange did not complete."""

    def __init__(self, host: str, path: str, reason: str):
        self.host = host
        self.path = path
        self.reason = reason
        super().__init__(f"Request to {host}{path} failed: {reason}")


class MirrorNotFoundError(SupplyCollectorError):
    """The mirror node answered with a status other than 200."""

    def __init__(self, token_id: str, status_code: int, message: str):
        self.token_id = token_id
        self.status_code = status_code
        super().__init__(message)


class TokenNotFoundError(MirrorNotFoundError):
    """Token info endpoint did not return the token."""

    def __init__(self, token_id: str, status_code: int):
        super().__init__(
            token_id, status_code,
            f"HTS Token {token_id} was not found, code: {status_code}"
        )


class BalancesNotFoundError(MirrorNotFoundError):
    """A page of the token balances listing could not be retrieved."""

    def __init__(self, token_id: str, status_code: int):
        super().__init__(
            token_id, status_code,
            f"Balances for token {token_id} were not found, code: {status_code}"
        )


class MalformedResponseError(SupplyCollectorError):
    """A 200 response body did not have the expected shape."""


class ErrorCategory(Enum):
    """Categories of errors that can occur in the system."""
    VALIDATION = "validation"
    NETWORK = "network"
    NOT_FOUND = "not_found"
    MALFORMED_RESPONSE = "malformed_response"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


EXIT_CODES = {
    ErrorCategory.VALIDATION: 2,
    ErrorCategory.CONFIGURATION: 2,
    ErrorCategory.NETWORK: 3,
    ErrorCategory.NOT_FOUND: 4,
    ErrorCategory.MALFORMED_RESPONSE: 5,
    ErrorCategory.UNKNOWN: 1,
}


def classify_error(error: BaseException) -> ErrorCategory:
    """
    Classify an error raised out of an aggregation or configuration load.

    Args:
        error: Exception to classify

    Returns:
        Matching error category
    """
    if isinstance(error, InvalidInputError):
        return ErrorCategory.VALIDATION
    if isinstance(error, MirrorTransportError):
        return ErrorCategory.NETWORK
    if isinstance(error, MirrorNotFoundError):
        return ErrorCategory.NOT_FOUND
    if isinstance(error, MalformedResponseError):
        return ErrorCategory.MALFORMED_RESPONSE
    # ConfigManager reports invalid files and overrides as ValueError
    if isinstance(error, (ValueError, FileNotFoundError)):
        return ErrorCategory.CONFIGURATION
    return ErrorCategory.UNKNOWN


def exit_code_for(error: BaseException) -> int:
    """Process exit code for an error reported by the CLI."""
    category = classify_error(error)
    logger.debug(f"Classified {type(error).__name__} as {category.value}")
    return EXIT_CODES[category]
