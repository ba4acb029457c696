"""
Mirror node HTTP client.

A client performs exactly one GET per ``fetch`` call and hands back the raw
status code and body. It does not retry, follow redirects, or interpret the
body; that is left to the caller.
"""

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Tuple, Union
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import aiohttp
from yarl import URL

from ..config.models import MirrorConfig
from ..utils.error_handling import MirrorTransportError


logger = logging.getLogger(__name__)


class MirrorResponse(NamedTuple):
    """Raw outcome of a single mirror node request."""
    status: int
    body: bytes


class BaseMirrorClient(ABC):
    """Abstract base class for mirror node clients."""

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        """Release any held connections."""

    @abstractmethod
    async def fetch(self, host: str, path: str) -> MirrorResponse:
        """
        Issue a GET request for ``path`` against ``host``.

        Args:
            host: Mirror node host name
            path: Server-relative path including an already encoded query string

        Returns:
            Status code and body exactly as sent by the server

        Raises:
            MirrorTransportError: If the request could not be completed
        """
        pass


class MirrorNodeClient(BaseMirrorClient):
    """
    Async mirror node client backed by aiohttp.

    Connections are kept alive across the requests of one aggregation run
    when ``keep_alive`` is enabled; this never changes what is returned.
    """

    def __init__(self, mirror_config: MirrorConfig):
        """
        Initialize the client with configuration.

        Args:
            mirror_config: Mirror node connection settings
        """
        self.mirror_config = mirror_config
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        """Async context manager entry."""
        connector = aiohttp.TCPConnector(force_close=not self.mirror_config.keep_alive)
        self._session = aiohttp.ClientSession(
            connector=connector,
            timeout=aiohttp.ClientTimeout(total=self.mirror_config.timeout)
        )
        return self

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    def build_url(self, host: str, path: str) -> URL:
        """Build the request URL without re-encoding ``path``."""
        return URL(f"{self.mirror_config.scheme}://{host}{path}", encoded=True)

    async def fetch(self, host: str, path: str) -> MirrorResponse:
        if not host:
            raise ValueError("Mirror host must be a non-empty string")
        if not self._session:
            raise RuntimeError("Client must be used as async context manager")

        try:
            url = self.build_url(host, path)
            async with self._session.get(url, allow_redirects=False) as response:
                body = await response.read()
                logger.debug(f"GET {host}{path} -> {response.status} ({len(body)} bytes)")
                return MirrorResponse(response.status, body)

        except (aiohttp.ClientError, asyncio.TimeoutError, OSError, ValueError) as e:
            reason = str(e) or type(e).__name__
            logger.error(f"GET {host}{path} failed: {reason}")
            raise MirrorTransportError(host, path, reason) from e


ResponseSpec = Union[Tuple[int, Any], Exception]


class MockMirrorClient(BaseMirrorClient):
    """
    Mock client serving canned responses.

    Responses are keyed by request path. A path is matched exactly first and
    then with its ``timestamp`` query parameter removed, so fixtures do not
    need to know the snapshot a run will pick. Unknown paths answer 404.

    A response is a ``(status, body)`` tuple, where ``body`` is bytes, a
    string, or any JSON serializable value, or an exception instance which is
    reported as a transport failure.
    """

    NOT_FOUND_BODY = {"_status": {"messages": [{"message": "Not found"}]}}

    def __init__(self, responses: Optional[Dict[str, ResponseSpec]] = None):
        """
        Initialize mock client with canned responses.

        Args:
            responses: Mapping of request path to response
        """
        self.requests: List[Tuple[str, str]] = []
        self._exact: Dict[str, ResponseSpec] = {}
        self._by_resource: Dict[str, ResponseSpec] = {}
        for path, response in (responses or {}).items():
            self.add_response(path, response)

    @classmethod
    def from_fixtures(cls, fixtures_path: Union[str, Path]) -> "MockMirrorClient":
        """
        Load canned responses from a JSON fixture file.

        The file holds an object mapping request paths to
        ``{"status": <int>, "body": <any>}`` entries.
        """
        with open(fixtures_path, 'r', encoding='utf-8') as f:
            fixtures = json.load(f)

        if not isinstance(fixtures, dict):
            raise ValueError(f"Fixture file must contain an object: {fixtures_path}")

        responses = {}
        for path, entry in fixtures.items():
            if isinstance(entry, dict) and "status" in entry:
                responses[path] = (int(entry["status"]), entry.get("body"))
            else:
                responses[path] = (200, entry)

        logger.debug(f"Loaded {len(responses)} mirror fixtures from {fixtures_path}")
        return cls(responses)

    @staticmethod
    def strip_snapshot(path: str) -> str:
        """Remove the ``timestamp`` query parameter from a request path."""
        parts = urlsplit(path)
        query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != "timestamp"]
        return urlunsplit(("", "", parts.path, urlencode(query), ""))

    def add_response(self, path: str, response: ResponseSpec) -> None:
        self._exact[path] = response
        self._by_resource[self.strip_snapshot(path)] = response

    @property
    def request_count(self) -> int:
        return len(self.requests)

    async def fetch(self, host: str, path: str) -> MirrorResponse:
        if not host:
            raise ValueError("Mirror host must be a non-empty string")

        self.requests.append((host, path))

        response = self._exact.get(path)
        if response is None:
            response = self._by_resource.get(self.strip_snapshot(path))
        if response is None:
            response = (404, self.NOT_FOUND_BODY)

        if isinstance(response, Exception):
            raise MirrorTransportError(host, path, str(response) or type(response).__name__) from response

        status, body = response
        return MirrorResponse(status, self._encode_body(body))

    @staticmethod
    def _encode_body(body: Any) -> bytes:
        if body is None:
            return b""
        if isinstance(body, bytes):
            return body
        if isinstance(body, str):
            return body.encode("utf-8")
        return json.dumps(body).encode("utf-8")
