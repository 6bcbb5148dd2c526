"""
Tests for the WebSocket JSON-RPC client.

Each test runs a small aiohttp WebSocket server playing the node.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import pytest
from aiohttp import WSMsgType, test_utils, web

from grandma.rpc import (
    JUSTIFICATIONS,
    SUBSCRIBE_JUSTIFICATIONS,
    RpcClient,
    RpcError,
    TransportError,
    normalize_url,
)
from tests.grandma.helpers import justification_notification


async def _node(request: web.Request) -> web.WebSocketResponse:
    """Answer requests like a node; some methods have scripted behavior."""
    ws = web.WebSocketResponse()
    await ws.prepare(request)

    async for msg in ws:
        if msg.type != WSMsgType.TEXT:
            break
        req = json.loads(msg.data)
        method = req["method"]

        if method == "fail":
            await ws.send_json(
                {"jsonrpc": "2.0", "id": req["id"], "error": {"code": -32601, "message": "nope"}}
            )
        elif method == SUBSCRIBE_JUSTIFICATIONS:
            # A notification racing ahead of the subscription reply.
            await ws.send_json(justification_notification("0x01"))
            await ws.send_str("garbage")
            await ws.send_json({"jsonrpc": "2.0", "id": req["id"], "result": "sub-1"})
            await ws.send_json(justification_notification("0x02"))
        elif method == "binary":
            await ws.send_bytes(b"\xff\xfe")
            await ws.send_bytes(json.dumps(justification_notification("0x03")).encode())
        elif method == "hang_up":
            await ws.close()
        else:
            await ws.send_json(
                {"jsonrpc": "2.0", "id": req["id"], "result": {"method": method, **req}}
            )

    return ws


@asynccontextmanager
async def fake_node() -> AsyncIterator[str]:
    """Serve `_node` on a free local port and yield its address (no scheme)."""
    app = web.Application()
    app.router.add_get("/", _node)
    server = test_utils.TestServer(app)
    await server.start_server()
    try:
        yield f"{server.host}:{server.port}/"
    finally:
        await server.close()


class TestNormalizeUrl:
    @pytest.mark.parametrize(
        "url, expected",
        [
            ("127.0.0.1:9944", "ws://127.0.0.1:9944"),
            ("ws://127.0.0.1:9944", "ws://127.0.0.1:9944"),
            ("wss://rpc.polkadot.io", "wss://rpc.polkadot.io"),
        ],
    )
    def test_scheme(self, url: str, expected: str) -> None:
        assert normalize_url(url) == expected


class TestRpcClient:
    @pytest.mark.asyncio
    async def test_request_reply(self) -> None:
        async with fake_node() as address:
            async with await RpcClient.connect(address) as client:
                result = await client.request("system_properties", ["x"])

        assert result["method"] == "system_properties"
        assert result["params"] == ["x"]
        assert result["jsonrpc"] == "2.0"

    @pytest.mark.asyncio
    async def test_request_ids_increase(self) -> None:
        async with fake_node() as address:
            async with await RpcClient.connect(address) as client:
                first = await client.request("a")
                second = await client.request("b")

        assert second["id"] == first["id"] + 1

    @pytest.mark.asyncio
    async def test_error_reply(self) -> None:
        async with fake_node() as address:
            async with await RpcClient.connect(address) as client:
                with pytest.raises(RpcError) as exc_info:
                    await client.request("fail")

                # The connection survives a JSON-RPC error.
                assert (await client.request("ok"))["method"] == "ok"

        assert exc_info.value.method == "fail"
        assert exc_info.value.error["code"] == -32601

    @pytest.mark.asyncio
    async def test_notifications_keep_arrival_order(self) -> None:
        """Notifications read while waiting for a reply are delivered first."""
        async with fake_node() as address:
            async with await RpcClient.connect(address) as client:
                subscription = await client.subscribe(SUBSCRIBE_JUSTIFICATIONS)

                stream = client.notifications()
                first = await anext(stream)
                second = await anext(stream)
                await stream.aclose()

        assert subscription == "sub-1"
        assert (first.method, first.result) == (JUSTIFICATIONS, "0x01")
        assert (second.method, second.result) == (JUSTIFICATIONS, "0x02")

    @pytest.mark.asyncio
    async def test_undecodable_binary_frame_is_skipped(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        async with fake_node() as address:
            async with await RpcClient.connect(address) as client:
                await client.send("binary")

                stream = client.notifications()
                envelope = await anext(stream)
                await stream.aclose()

        assert (envelope.method, envelope.result) == (JUSTIFICATIONS, "0x03")
        assert "not UTF-8" in caplog.text

    @pytest.mark.asyncio
    async def test_server_hang_up_is_a_transport_error(self) -> None:
        async with fake_node() as address:
            async with await RpcClient.connect(address) as client:
                await client.send("hang_up")
                with pytest.raises(TransportError):
                    async for _ in client.notifications():
                        pass

    @pytest.mark.asyncio
    async def test_connect_refused(self) -> None:
        with pytest.raises(TransportError, match="Cannot connect"):
            await RpcClient.connect("127.0.0.1:1")

    @pytest.mark.asyncio
    async def test_send_when_closed(self) -> None:
        async with fake_node() as address:
            client = await RpcClient.connect(address)
            await client.close()

            with pytest.raises(TransportError, match="Not connected"):
                await client.send("a")
