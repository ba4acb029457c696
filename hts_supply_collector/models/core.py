"""
Core data models for the HTS supply collector.

All token amounts are held as Python ``int`` values so that supplies and
balances beyond 2**53 keep full precision end to end.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlencode


@dataclass(frozen=True)
class QuerySnapshot:
    """Point-in-time view shared by every request of one aggregation call."""
    timestamp: str

    @classmethod
    def now(cls) -> "QuerySnapshot":
        """Create a snapshot for the current wall clock time (9 fractional digits)."""
        ns = time.time_ns()
        return cls(f"{ns // 1_000_000_000}.{ns % 1_000_000_000:09d}")

    def query(self) -> str:
        """Encoded query string pinning a request to this snapshot."""
        return urlencode({"timestamp": self.timestamp})


@dataclass(frozen=True)
class TokenSupplyInfo:
    """Supply information reported for a token at a snapshot."""
    total_supply: int
    decimals: int = 0


@dataclass
class BalancePage:
    """One page of the token balances listing."""
    records: List[Tuple[str, int]] = field(default_factory=list)
    next_path: Optional[str] = None

    @property
    def has_next(self) -> bool:
        return bool(self.next_path)


@dataclass
class AggregationResult:
    """Result of one circulating supply aggregation."""
    token: str
    decimals: int
    source: str
    timestamp: str
    total_supply: int
    circulating: int
    treasury_balances: Dict[str, int] = field(default_factory=dict)
    consumer_balances: Dict[str, int] = field(default_factory=dict)

    @property
    def non_circulating(self) -> int:
        """Amount excluded from circulation."""
        return self.total_supply - self.circulating

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to a JSON friendly dictionary.

        Amounts are rendered as decimal strings so consumers parsing the
        output with floating point numbers do not silently lose precision.
        """
        return {
            "token": self.token,
            "decimals": self.decimals,
            "source": self.source,
            "timestamp": self.timestamp,
            "total_supply": str(self.total_supply),
            "circulating": str(self.circulating),
            "treasury_balances": {
                account: str(balance) for account, balance in self.treasury_balances.items()
            },
            "consumer_balances": {
                account: str(balance) for account, balance in self.consumer_balances.items()
            },
        }
