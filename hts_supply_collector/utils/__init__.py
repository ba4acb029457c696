"""
Utility modules for the HTS supply collector.
"""

from .entity_id_utils import EntityIDUtils
from .error_handling import (
    BalancesNotFoundError,
    ErrorCategory,
    InvalidInputError,
    MalformedResponseError,
    MirrorNotFoundError,
    MirrorTransportError,
    SupplyCollectorError,
    TokenNotFoundError,
    classify_error,
    exit_code_for,
)

__all__ = [
    "EntityIDUtils",
    "BalancesNotFoundError",
    "ErrorCategory",
    "InvalidInputError",
    "MalformedResponseError",
    "MirrorNotFoundError",
    "MirrorTransportError",
    "SupplyCollectorError",
    "TokenNotFoundError",
    "classify_error",
    "exit_code_for",
]
