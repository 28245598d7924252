"""Tests for the WebSocket client against a local websockets server."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import asyncio
import json

from websockets.asyncio.server import serve

from shared.protocol import Pay, Move, GameEnded, ModeVoteUpdate
from shared.constants import Direction
from client.network import NetworkClient, game_uri, matchmaking_uri
from client.settings import SessionContext


async def wait_for(predicate, timeout=2.0):
    loop = asyncio.get_running_loop()
    end = loop.time() + timeout
    while not predicate():
        if loop.time() > end:
            raise AssertionError("condition not reached")
        await asyncio.sleep(0.01)


class TestUris:
    def test_game_uri_escapes(self):
        ctx = SessionContext("w 1", "Ann & Bob")
        assert game_uri("h", 1, "a/b", ctx) == \
            "ws://h:1/ws/game/a%2Fb?wallet=w+1&username=Ann+%26+Bob"

    def test_matchmaking_uri(self):
        ctx = SessionContext("w", "Ann")
        assert matchmaking_uri("h", 2, ctx) == "ws://h:2/ws/matchmaking?wallet=w&username=Ann"


class TestNetworkClient:
    def test_receives_in_order_and_sends(self):
        received = []

        async def handler(ws):
            await ws.send(json.dumps({"action": "GameModeVoteUpdate",
                                      "data": {"player_id": "a", "mode": "Classic"}}))
            await ws.send("garbage")
            await ws.send(json.dumps({"action": "GameEnded", "data": {"winner": "a"}}))
            async for raw in ws:
                received.append(json.loads(raw))

        async def scenario():
            async with serve(handler, "127.0.0.1", 0) as server:
                port = server.sockets[0].getsockname()[1]
                client = NetworkClient()
                # Queued until the socket opens
                client.connect(f"ws://127.0.0.1:{port}/ws/game/g")
                client.send(Pay())
                await wait_for(lambda: len(client.incoming) == 2)
                client.send(Move(Direction.UP))
                assert len(client._pending) == 1
                await wait_for(lambda: len(received) == 2)
                await wait_for(lambda: not client._pending)
                messages = client.poll_all()
                client.disconnect()
                return messages

        messages = asyncio.run(scenario())
        assert messages == [ModeVoteUpdate("a", "Classic"), GameEnded("a")]
        assert received == [{"action": "Pay"}, {"action": "Move", "data": "Up"}]

    def test_server_close_marks_closed(self):
        async def handler(ws):
            await ws.close()

        async def scenario():
            async with serve(handler, "127.0.0.1", 0) as server:
                port = server.sockets[0].getsockname()[1]
                client = NetworkClient()
                client.connect(f"ws://127.0.0.1:{port}/")
                await wait_for(lambda: client.closed)
                client.send(Pay())
                return client

        client = asyncio.run(scenario())
        assert client.status == "Disconnected"
        assert not client.connected

    def test_refused_connection(self):
        async def scenario():
            client = NetworkClient()
            client.connect("ws://127.0.0.1:9/")
            await wait_for(lambda: client.closed, timeout=5.0)
            return client

        client = asyncio.run(scenario())
        assert client.closed
        assert client.poll() is None
