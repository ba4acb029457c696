"""
Data models for the HTS supply collector.
"""

from .core import AggregationResult, BalancePage, QuerySnapshot, TokenSupplyInfo

__all__ = [
    "AggregationResult",
    "BalancePage",
    "QuerySnapshot",
    "TokenSupplyInfo",
]
