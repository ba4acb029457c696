"""
Tests for entity ID utilities.
"""

import pytest
from hts_supply_collector.utils.entity_id_utils import EntityIDUtils


class TestEntityIDUtils:
    """Test cases for EntityIDUtils."""

    @pytest.mark.parametrize("entity_id", ["0.0.1", "0.0.859814", "1.2.3", "0.0.0100"])
    def test_valid_entity_ids(self, entity_id):
        """Test well-formed IDs are accepted."""
        assert EntityIDUtils.is_valid_entity_id(entity_id)

    @pytest.mark.parametrize("entity_id", [
        "", "0.0", "0.0.1.2", "a.b.c", "0.0.-1", " 0.0.1", "0.0.1\n", "0.0.١", None, 100,
    ])
    def test_invalid_entity_ids(self, entity_id):
        """Test malformed IDs and non-strings are rejected."""
        assert not EntityIDUtils.is_valid_entity_id(entity_id)

    def test_parse_entity_id(self):
        """Test splitting an ID into its components."""
        assert EntityIDUtils.parse_entity_id("0.0.859814") == (0, 0, 859814)

    def test_parse_invalid_entity_id(self):
        """Test parsing a malformed ID raises ValueError."""
        with pytest.raises(ValueError, match="Invalid entity ID"):
            EntityIDUtils.parse_entity_id("0.0")
