"""
Entity ID utilities for Hedera style ``shard.realm.num`` identifiers.

Token and account IDs are compared and used as mapping keys by their literal
string value. ``0.0.0100`` and ``0.0.100`` are different keys; no
normalization is applied anywhere in the collector.
"""

import re
from typing import Any, Tuple


class EntityIDUtils:
    """Utilities for handling token and account ID formats."""

    ENTITY_ID_PATTERN = re.compile(r"^\d+\.\d+\.\d+$", re.ASCII)

    @staticmethod
    def is_valid_entity_id(entity_id: Any) -> bool:
        """
        Check if a value is a ``shard.realm.num`` string.

        Args:
            entity_id: Value to validate

        Returns:
            True if format is valid

        Examples:
            >>> EntityIDUtils.is_valid_entity_id("0.0.859814")
            True
            >>> EntityIDUtils.is_valid_entity_id("0.0")
            False
        """
        if not isinstance(entity_id, str):
            return False
        # fullmatch so a trailing newline is rejected too
        return EntityIDUtils.ENTITY_ID_PATTERN.fullmatch(entity_id) is not None

    @staticmethod
    def parse_entity_id(entity_id: str) -> Tuple[int, int, int]:
        """
        Split an entity ID into its shard, realm and number components.

        Args:
            entity_id: Entity ID in ``shard.realm.num`` format

        Returns:
            Tuple of (shard, realm, num)

        Raises:
            ValueError: If the ID is not in ``shard.realm.num`` format
        """
        if not EntityIDUtils.is_valid_entity_id(entity_id):
            raise ValueError(f"Invalid entity ID {entity_id!r}")

        shard, realm, num = entity_id.split(".")
        return int(shard), int(realm), int(num)
