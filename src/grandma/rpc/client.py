"""
WebSocket JSON-RPC client for a Substrate node.

One connection serves either the continuous monitor (two subscriptions,
then an endless stream of notifications) or the one-shot round state
query (two request/response round-trips). The two modes never share a
connection.
"""

from __future__ import annotations

import json
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Any, AsyncIterator

import aiohttp

from .envelope import RpcEnvelope, parse_envelope

logger = logging.getLogger(__name__)

MAX_MESSAGE_SIZE = 16 * 1024 * 1024
"""Largest accepted WebSocket message. Justifications of big sets run to hundreds of KB."""


class TransportError(Exception):
    """
    Error talking to the node.

    Raised when the connection cannot be opened, closes, or the node answers
    a request with a JSON-RPC error. The stream is never re-established.
    """


class RpcError(TransportError):
    """
    The node answered a request with a JSON-RPC error object.

    The connection itself is still usable.

    Attributes:
        method: The method that failed.
        error: The error object from the reply.
    """

    def __init__(self, method: str, error: Any) -> None:
        self.method = method
        self.error = error
        super().__init__(f"{method} failed: {error}")


def normalize_url(url: str) -> str:
    """Prefix `ws://` when the address has no WebSocket scheme."""
    if url.startswith(("ws://", "wss://")):
        return url
    return f"ws://{url}"


@dataclass(slots=True)
class RpcClient:
    """JSON-RPC client over a single WebSocket connection."""

    url: str
    """WebSocket URL of the node."""

    _session: aiohttp.ClientSession | None = field(default=None, init=False)
    """HTTP session owning the connection."""

    _ws: aiohttp.ClientWebSocketResponse | None = field(default=None, init=False)
    """The open WebSocket, if connected."""

    _next_id: int = field(default=1, init=False)
    """Id for the next request."""

    _pending: deque[str] = field(default_factory=deque, init=False)
    """Messages read while waiting for a reply, delivered before new ones."""

    @classmethod
    async def connect(cls, url: str) -> RpcClient:
        """
        Open a connection to `url` (a `ws://` scheme is added if missing).

        Raises:
            TransportError: If the connection cannot be established.
        """
        client = cls(url=normalize_url(url))
        client._session = aiohttp.ClientSession()
        try:
            client._ws = await client._session.ws_connect(
                client.url, max_msg_size=MAX_MESSAGE_SIZE
            )
        except (aiohttp.ClientError, OSError) as e:
            await client._session.close()
            client._session = None
            raise TransportError(f"Cannot connect to {client.url}: {e}") from e

        logger.info("Connected to %s", client.url)
        return client

    async def close(self) -> None:
        """Close the WebSocket and its session."""
        if self._ws is not None:
            await self._ws.close()
            self._ws = None
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> RpcClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def send(self, method: str, params: list[Any] | None = None) -> int:
        """
        Send a request without waiting for the reply.

        Returns:
            The request id.
        """
        if self._ws is None:
            raise TransportError("Not connected")

        request_id = self._next_id
        self._next_id += 1
        payload = {"id": request_id, "jsonrpc": "2.0", "method": method, "params": params or []}

        try:
            await self._ws.send_str(json.dumps(payload))
        except (aiohttp.ClientError, ConnectionError) as e:
            raise TransportError(f"Failed to send {method}: {e}") from e

        logger.debug("Sent %s (id=%d)", method, request_id)
        return request_id

    async def receive(self) -> str:
        """
        Wait for the next text message. There is no timeout.

        Raises:
            TransportError: If the connection closes or fails.
        """
        if self._pending:
            return self._pending.popleft()
        if self._ws is None:
            raise TransportError("Not connected")

        while True:
            msg = await self._ws.receive()
            if msg.type == aiohttp.WSMsgType.TEXT:
                return msg.data
            if msg.type == aiohttp.WSMsgType.BINARY:
                try:
                    return msg.data.decode()
                except UnicodeDecodeError:
                    logger.warning("Skipping binary frame that is not UTF-8")
                    continue
            if msg.type == aiohttp.WSMsgType.ERROR:
                raise TransportError(f"WebSocket error: {self._ws.exception()}")
            raise TransportError(f"WebSocket closed ({msg.type.name})")

    async def request(self, method: str, params: list[Any] | None = None) -> Any:
        """
        Send a request and wait for its reply.

        Unrelated messages arriving in the meantime are kept for `receive`.

        Raises:
            RpcError: If the node replies with a JSON-RPC error.
            TransportError: On connection failure.
        """
        request_id = await self.send(method, params)
        skipped: list[str] = []
        try:
            while True:
                text = await self.receive()
                try:
                    reply = json.loads(text)
                except json.JSONDecodeError:
                    skipped.append(text)
                    continue
                if not isinstance(reply, dict) or reply.get("id") != request_id:
                    skipped.append(text)
                    continue
                if reply.get("error") is not None:
                    raise RpcError(method, reply["error"])
                return reply.get("result")
        finally:
            self._pending.extend(skipped)

    async def subscribe(self, method: str, params: list[Any] | None = None) -> Any:
        """Open a subscription and return the node's subscription id."""
        subscription = await self.request(method, params)
        logger.info("Subscribed via %s (subscription=%s)", method, subscription)
        return subscription

    async def notifications(self) -> AsyncIterator[RpcEnvelope]:
        """
        Yield notifications in arrival order, forever.

        Messages that are not notifications are skipped.

        Raises:
            TransportError: When the connection is lost.
        """
        while True:
            text = await self.receive()
            envelope = parse_envelope(text)
            if envelope is None:
                logger.debug("Skipping non-notification message")
                continue
            yield envelope
