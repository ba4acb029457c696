"""
Tests for collector error types and their classification.
"""

import asyncio

import pytest

from hts_supply_collector.utils.error_handling import (
    BalancesNotFoundError,
    ErrorCategory,
    InvalidInputError,
    MalformedResponseError,
    MirrorNotFoundError,
    MirrorTransportError,
    TokenNotFoundError,
    classify_error,
    exit_code_for,
)


class TestErrorTypes:
    """Test error messages and attributes."""

    def test_token_not_found_message(self):
        """Test the token not found message carries the status code."""
        error = TokenNotFoundError("0.0.100", 404)

        assert str(error) == "HTS Token 0.0.100 was not found, code: 404"
        assert error.token_id == "0.0.100"
        assert error.status_code == 404
        assert isinstance(error, MirrorNotFoundError)

    def test_balances_not_found_message(self):
        """Test the balances not found message carries the status code."""
        error = BalancesNotFoundError("0.0.100", 500)

        assert str(error) == "Balances for token 0.0.100 were not found, code: 500"
        assert isinstance(error, MirrorNotFoundError)

    def test_transport_error_message(self):
        """Test the transport error names host and path."""
        error = MirrorTransportError("mirror.test", "/api/v1/tokens/0.0.1", "Connection refused")

        assert str(error) == "Request to mirror.test/api/v1/tokens/0.0.1 failed: Connection refused"
        assert error.reason == "Connection refused"

    def test_invalid_input_is_value_error(self):
        """Test invalid input can be caught as ValueError."""
        error = InvalidInputError("token", "0.0")

        assert isinstance(error, ValueError)
        assert error.field == "token"
        assert str(error) == "Invalid token '0.0'"


class TestClassification:
    """Test error classification and exit codes."""

    @pytest.mark.parametrize("error, category, exit_code", [
        (InvalidInputError("source", None, "Source (mirror node) must be defined."),
         ErrorCategory.VALIDATION, 2),
        (MirrorTransportError("mirror.test", "/", "timed out"), ErrorCategory.NETWORK, 3),
        (TokenNotFoundError("0.0.1", 404), ErrorCategory.NOT_FOUND, 4),
        (BalancesNotFoundError("0.0.1", 503), ErrorCategory.NOT_FOUND, 4),
        (MalformedResponseError("bad body"), ErrorCategory.MALFORMED_RESPONSE, 5),
        (ValueError("Configuration validation failed"), ErrorCategory.CONFIGURATION, 2),
        (FileNotFoundError("config.yaml"), ErrorCategory.CONFIGURATION, 2),
        (asyncio.CancelledError(), ErrorCategory.UNKNOWN, 1),
        (RuntimeError("boom"), ErrorCategory.UNKNOWN, 1),
    ])
    def test_classify(self, error, category, exit_code):
        """Test each error maps to its category and exit code."""
        assert classify_error(error) is category
        assert exit_code_for(error) == exit_code
