"""
Factory for creating mirror node clients.
"""

from typing import Optional

from ..config.models import MirrorConfig
from .mirror_client import BaseMirrorClient, MirrorNodeClient, MockMirrorClient


def create_mirror_client(
    mirror_config: MirrorConfig,
    use_mock: bool = False,
    fixtures_path: Optional[str] = None
) -> BaseMirrorClient:
    """
    Create a mirror node client.

    Args:
        mirror_config: Mirror node connection settings
        use_mock: Whether to use the fixture-backed mock client
        fixtures_path: Path to a JSON fixture file for the mock client

    Returns:
        Client instance, to be entered as an async context manager
    """
    if use_mock:
        if fixtures_path:
            return MockMirrorClient.from_fixtures(fixtures_path)
        return MockMirrorClient()
    return MirrorNodeClient(mirror_config)
