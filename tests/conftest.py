"""
Pytest configuration and shared fixtures.
"""

import pytest

from hts_supply_collector.clients.mirror_client import MockMirrorClient
from hts_supply_collector.config.models import MirrorConfig, SupplyConfig
from hts_supply_collector.utils.structured_logging import logging_manager

from mirror_fixtures import SNAPSHOT, SOURCE, balances_page, balances_path, token_info, token_path


@pytest.fixture(autouse=True)
def reset_logging():
    """Let every test configure logging from scratch."""
    yield
    logging_manager.reset()


@pytest.fixture
def snapshot():
    """Fixed snapshot so request paths are predictable."""
    return SNAPSHOT


@pytest.fixture
def mirror_config():
    """Mirror configuration for tests."""
    return MirrorConfig(host=SOURCE, scheme="http", timeout=5)


@pytest.fixture
def supply_config():
    """Default configuration for testing."""
    return SupplyConfig()


@pytest.fixture
def single_page_client():
    """Mock client for a token with one page of balances."""
    return MockMirrorClient({
        token_path(): (200, token_info("1000000", "2")),
        balances_path(): (200, balances_page({"0.0.1": 400000, "0.0.2": 600000})),
    })
