"""
Circulating supply aggregation for HTS tokens.

One aggregation call runs strictly in sequence: validate the arguments,
read the token's total supply, walk every page of the token's balances, then
split the balances into treasury and consumer holdings. All requests of a
call are pinned to the same snapshot timestamp so the supply and every
balance page describe the same ledger state.
"""

import json
import logging
from collections.abc import Sequence
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple

from ..clients.mirror_client import BaseMirrorClient, MirrorNodeClient
from ..config.models import MirrorConfig
from ..models.core import AggregationResult, BalancePage, QuerySnapshot, TokenSupplyInfo
from ..utils.entity_id_utils import EntityIDUtils
from ..utils.error_handling import (
    BalancesNotFoundError, InvalidInputError, MalformedResponseError, TokenNotFoundError
)
from ..utils.structured_logging import LogContext, get_logger, with_correlation_id

logger = logging.getLogger(__name__)

TOKEN_INFO_PATH = "/api/v1/tokens/{token}?{query}"
TOKEN_BALANCES_PATH = "/api/v1/tokens/{token}/balances?{query}"


class SupplyAggregator:
    """
    Computes the circulating supply of a token from a mirror node.

    The aggregator holds no state between calls. Balances are accumulated in
    a mapping local to each call, so concurrent calls sharing one aggregator
    (and one client) do not interfere.
    """

    def __init__(self, client: BaseMirrorClient):
        """
        Initialize the aggregator.

        Args:
            client: Mirror client, already entered if it needs a session
        """
        self.client = client

    @staticmethod
    def validate_input(source: Any, token: Any, treasuries: Any = None) -> List[str]:
        """
        Check aggregation arguments before anything touches the network.

        Args:
            source: Mirror node host
            token: Token ID in ``shard.realm.num`` format
            treasuries: Optional sequence of treasury account IDs

        Returns:
            The treasury IDs as a list, in the order given

        Raises:
            InvalidInputError: Naming the first field that failed
        """
        if not source or not isinstance(source, str):
            raise InvalidInputError("source", source, "Source (mirror node) must be defined.")

        if not EntityIDUtils.is_valid_entity_id(token):
            raise InvalidInputError("token", token, f"Invalid token ID {token}")

        if treasuries is None:
            return []

        if isinstance(treasuries, (str, bytes)) or not isinstance(treasuries, Sequence):
            raise InvalidInputError(
                "treasuries", treasuries,
                "If defined, the treasuries argument must be a sequence."
            )

        for treasury in treasuries:
            if not EntityIDUtils.is_valid_entity_id(treasury):
                raise InvalidInputError("treasury", treasury, f"Invalid treasury ID {treasury}")

        return list(treasuries)

    async def get_token_supply(self, source: str, token: str,
                               snapshot: QuerySnapshot) -> TokenSupplyInfo:
        """
        Retrieve the total supply and decimal places of a token.

        Raises:
            TokenNotFoundError: If the mirror node does not answer 200
            MalformedResponseError: If ``total_supply`` is missing or not an integer
        """
        path = TOKEN_INFO_PATH.format(token=token, query=snapshot.query())
        response = await self.client.fetch(source, path)
        if response.status != 200:
            raise TokenNotFoundError(token, response.status)

        token_info = _parse_json_object(response.body, f"token {token}")
        if "total_supply" not in token_info:
            raise MalformedResponseError(f"Token {token} info has no total_supply")

        total_supply = _parse_amount(token_info["total_supply"], "total_supply")
        decimals = token_info.get("decimals")
        if decimals is None:
            decimals = 0
        else:
            decimals = _parse_amount(decimals, "decimals")

        return TokenSupplyInfo(total_supply=total_supply, decimals=decimals)

    async def iter_balance_pages(self, source: str, token: str,
                                 snapshot: QuerySnapshot) -> AsyncIterator[BalancePage]:
        """
        Yield every page of the token's balances, one request at a time.

        The first page is requested at the snapshot; each following page is
        requested at the ``links.next`` path of the previous one, used as is.
        Iteration ends on the first page without a next link, including when
        an empty page still carries one.

        Raises:
            BalancesNotFoundError: If any page does not answer 200
        """
        path: Optional[str] = TOKEN_BALANCES_PATH.format(token=token, query=snapshot.query())
        while path:
            response = await self.client.fetch(source, path)
            if response.status != 200:
                raise BalancesNotFoundError(token, response.status)

            page = _parse_balance_page(response.body, token)
            yield page
            path = page.next_path

    async def get_all_balances(self, source: str, token: str,
                               snapshot: QuerySnapshot) -> Dict[str, int]:
        """
        Retrieve the balance of every account holding the token.

        Returns:
            Mapping of account ID to balance in the smallest denomination
        """
        balances: Dict[str, int] = {}
        page_count = 0
        async for page in self.iter_balance_pages(source, token, snapshot):
            page_count += 1
            for account, balance in page.records:
                balances[account] = balance
            logger.debug(
                f"Balance page {page_count} for {token}: {len(page.records)} records, "
                f"next={'yes' if page.has_next else 'no'}"
            )

        logger.info(f"Retrieved {len(balances)} balances for {token} in {page_count} pages")
        return balances

    @staticmethod
    def partition_balances(
        balances: Dict[str, int],
        treasuries: List[str]
    ) -> Tuple[Dict[str, int], Dict[str, int], int]:
        """
        Split balances into treasury and consumer holdings.

        Every requested treasury gets an entry, zero when it holds nothing.
        A treasury listed twice is counted twice in the non-circulating total.

        Args:
            balances: Complete account to balance mapping (left unmodified)
            treasuries: Treasury account IDs in request order

        Returns:
            Tuple of (treasury_balances, consumer_balances, non_circulating)
        """
        treasury_balances: Dict[str, int] = {}
        non_circulating = 0
        for treasury in treasuries:
            balance = balances.get(treasury, 0)
            treasury_balances[treasury] = balance
            non_circulating += balance

        consumer_balances = {
            account: balance for account, balance in balances.items()
            if account not in treasury_balances
        }
        return treasury_balances, consumer_balances, non_circulating

    @with_correlation_id()
    async def aggregate(self, source: str, token: str,
                        treasuries: Optional[Sequence] = None,
                        snapshot: Optional[QuerySnapshot] = None) -> AggregationResult:
        """
        Compute the circulating supply of ``token`` as seen by ``source``.

        Args:
            source: Mirror node host
            token: Token ID in ``shard.realm.num`` format
            treasuries: Treasury account IDs excluded from circulation
            snapshot: Snapshot to query at, defaults to now

        Returns:
            Aggregation result

        Raises:
            InvalidInputError: Before any request, for malformed arguments
            MirrorTransportError: If the mirror node cannot be reached
            MirrorNotFoundError: If the mirror node answers anything but 200
            MalformedResponseError: If a 200 body cannot be understood
        """
        treasury_ids = self.validate_input(source, token, treasuries)
        snapshot = snapshot or QuerySnapshot.now()
        log = get_logger(__name__, LogContext(
            operation="aggregate", token_id=token, source=source,
            additional_fields={"snapshot": snapshot.timestamp}
        ))
        log.debug(f"Aggregating supply of {token} with {len(treasury_ids)} treasuries")

        try:
            supply = await self.get_token_supply(source, token, snapshot)
            log.info(f"Total supply of {token} is {supply.total_supply} ({supply.decimals} decimals)")

            balances = await self.get_all_balances(source, token, snapshot)
        except Exception as e:
            log.error(f"Aggregation of {token} failed: {e}")
            raise

        treasury_balances, consumer_balances, non_circulating = self.partition_balances(
            balances, treasury_ids
        )
        circulating = supply.total_supply - non_circulating
        if circulating < 0:
            log.warning(f"Treasury holdings exceed total supply of {token}")

        log.info(
            f"Circulating supply of {token} is {circulating}",
            extra_context={"treasury_count": len(treasury_balances),
                           "consumer_count": len(consumer_balances)}
        )

        return AggregationResult(
            token=token,
            decimals=supply.decimals,
            source=source,
            timestamp=snapshot.timestamp,
            total_supply=supply.total_supply,
            circulating=circulating,
            treasury_balances=treasury_balances,
            consumer_balances=consumer_balances,
        )


async def aggregate(source: str, token: str,
                    treasuries: Optional[Sequence] = None,
                    client: Optional[BaseMirrorClient] = None,
                    mirror_config: Optional[MirrorConfig] = None) -> AggregationResult:
    """
    Compute the circulating supply of a token.

    When no client is given, a ``MirrorNodeClient`` is opened for this call
    and closed afterwards. A given client is used as is and left open.

    Args:
        source: Mirror node host
        token: Token ID in ``shard.realm.num`` format
        treasuries: Treasury account IDs excluded from circulation
        client: Optional mirror client to issue requests with
        mirror_config: Connection settings for the default client

    Returns:
        Aggregation result
    """
    if client is not None:
        return await SupplyAggregator(client).aggregate(source, token, treasuries)

    # validate before opening a session so bad input never touches the network
    SupplyAggregator.validate_input(source, token, treasuries)
    async with MirrorNodeClient(mirror_config or MirrorConfig(host=source)) as mirror_client:
        return await SupplyAggregator(mirror_client).aggregate(source, token, treasuries)


def _parse_json_object(body: bytes, what: str) -> Dict[str, Any]:
    try:
        data = json.loads(body)
    except (ValueError, UnicodeDecodeError) as e:
        raise MalformedResponseError(f"Response for {what} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedResponseError(f"Response for {what} is not a JSON object")
    return data


def _parse_amount(value: Any, field: str) -> int:
    """Parse a non-negative integer sent as a JSON number or decimal string."""
    # bool is an int subclass, floats have already lost precision
    if isinstance(value, int) and not isinstance(value, bool):
        amount = value
    elif isinstance(value, str) and value.isascii() and value.isdigit():
        amount = int(value)
    else:
        raise MalformedResponseError(f"Field {field} is not an integer: {value!r}")

    if amount < 0:
        raise MalformedResponseError(f"Field {field} is negative: {value!r}")
    return amount


def _parse_balance_page(body: bytes, token: str) -> BalancePage:
    data = _parse_json_object(body, f"balances of token {token}")

    items = data.get("balances") or []
    if not isinstance(items, list):
        raise MalformedResponseError(f"Balances of token {token} are not a list")

    records = []
    for item in items:
        if not isinstance(item, dict) or "account" not in item or "balance" not in item:
            raise MalformedResponseError(f"Malformed balance record for token {token}: {item!r}")
        account = item["account"]
        if not isinstance(account, str):
            raise MalformedResponseError(f"Malformed account ID for token {token}: {account!r}")
        records.append((account, _parse_amount(item["balance"], "balance")))

    next_path = None
    links = data.get("links")
    if isinstance(links, dict):
        next_path = links.get("next") or None
        if next_path is not None and not isinstance(next_path, str):
            raise MalformedResponseError(f"Next link for token {token} is not a path: {next_path!r}")

    return BalancePage(records=records, next_path=next_path)
