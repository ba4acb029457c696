"""
HTS Supply Collector

Computes the circulating supply of Hedera Token Service tokens from a
mirror node's token and balance endpoints.
"""

__version__ = "0.1.0"

from .collectors.supply_aggregator import SupplyAggregator, aggregate
from .models.core import AggregationResult, TokenSupplyInfo

__all__ = [
    "SupplyAggregator",
    "aggregate",
    "AggregationResult",
    "TokenSupplyInfo",
    "__version__",
]
