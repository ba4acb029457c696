"""
Supply collectors for HTS tokens.
"""

from .supply_aggregator import SupplyAggregator, aggregate

__all__ = [
    "SupplyAggregator",
    "aggregate",
]
