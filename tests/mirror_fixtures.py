"""
Request paths and response bodies shared by the mirror node tests.
"""

from hts_supply_collector.models.core import QuerySnapshot

SOURCE = "mirror.test"
TOKEN = "0.0.100"
SNAPSHOT = QuerySnapshot("1700000000.000000001")


def token_path(token: str = TOKEN, snapshot: QuerySnapshot = SNAPSHOT) -> str:
    """Token info path as requested by the aggregator."""
    return f"/api/v1/tokens/{token}?timestamp={snapshot.timestamp}"


def balances_path(token: str = TOKEN, snapshot: QuerySnapshot = SNAPSHOT) -> str:
    """First balances page path as requested by the aggregator."""
    return f"/api/v1/tokens/{token}/balances?timestamp={snapshot.timestamp}"


def next_path(after: str, token: str = TOKEN, snapshot: QuerySnapshot = SNAPSHOT) -> str:
    """Cursor path the mirror node hands out for the page after ``after``."""
    return f"/api/v1/tokens/{token}/balances?timestamp={snapshot.timestamp}&account.id=gt:{after}"


def token_info(total_supply, decimals=None) -> dict:
    """Mirror node style token info body."""
    body = {"token_id": TOKEN, "type": "FUNGIBLE_COMMON", "total_supply": total_supply}
    if decimals is not None:
        body["decimals"] = decimals
    return body


def balances_page(balances: dict, next_link: str = None) -> dict:
    """Mirror node style balances page body."""
    return {
        "timestamp": SNAPSHOT.timestamp,
        "balances": [
            {"account": account, "balance": balance, "decimals": 0}
            for account, balance in balances.items()
        ],
        "links": {"next": next_link}
    }
