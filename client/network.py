"""WebSocket client: one connection task on the caller's event loop, inbound FIFO."""

from __future__ import annotations
import asyncio
from collections import deque
from urllib.parse import urlencode, quote
import websockets

from shared.constants import GAME_PATH, MATCHMAKING_PATH
from shared.protocol import InboundMessage, OutboundCommand, decode_message, encode_command


def _query(context) -> str:
    return urlencode({"wallet": context.wallet, "username": context.username})


def game_uri(host: str, port: int, game_id: str, context) -> str:
    path = GAME_PATH.format(game_id=quote(game_id, safe=""))
    return f"ws://{host}:{port}{path}?{_query(context)}"


def matchmaking_uri(host: str, port: int, context) -> str:
    return f"ws://{host}:{port}{MATCHMAKING_PATH}?{_query(context)}"


class NetworkClient:
    """Manages one WebSocket connection as an asyncio task.

    Frames are decoded as they arrive and queued in order; the owner drains
    them with ``poll_all()`` once per frame. There is no reconnection: once
    the socket closes, ``closed`` stays True.
    """

    def __init__(self):
        self.incoming: deque[InboundMessage] = deque()
        self._outgoing: list[str] = []
        self._ws = None
        self._task: asyncio.Task | None = None
        self._pending: set[asyncio.Task] = set()
        self._connected = False
        self._closed = False
        self._uri = ""
        self.status = "Idle"

    def connect(self, uri: str):
        """Start connecting. Must be called with an event loop running."""
        self._uri = uri
        self._closed = False
        self.status = "Connecting..."
        self._task = asyncio.get_running_loop().create_task(self._connect_and_listen())

    async def _connect_and_listen(self):
        try:
            async with websockets.connect(self._uri) as ws:
                self._ws = ws
                self._connected = True
                self.status = "Connected"
                print(f"[net] Connected to {self._uri}")
                # Flush anything sent before the socket was ready
                queued, self._outgoing = self._outgoing, []
                for message in queued:
                    await ws.send(message)
                async for raw in ws:
                    msg = decode_message(raw)
                    if msg is not None:
                        self.incoming.append(msg)
                        print(f"[net] Received: {type(msg).__name__}")
        except websockets.exceptions.ConnectionClosed:
            print("[net] Connection closed")
        except (OSError, websockets.exceptions.WebSocketException) as e:
            print(f"[net] Connection error: {e}")
        finally:
            self._connected = False
            self._closed = True
            self._ws = None
            self.status = "Disconnected"

    async def _send(self, message: str):
        ws = self._ws
        if ws is None:
            return
        try:
            await ws.send(message)
        except websockets.exceptions.ConnectionClosed:
            print("[net] Send failed: connection closed")

    def send(self, command: OutboundCommand):
        """Fire-and-forget. Queued if the socket is still opening."""
        message = encode_command(command)
        if self._ws and self._connected:
            task = asyncio.get_running_loop().create_task(self._send(message))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
        elif not self._closed:
            self._outgoing.append(message)
        else:
            print(f"[net] Dropped {type(command).__name__}: not connected")

    def poll(self) -> InboundMessage | None:
        """Non-blocking poll for the next incoming message."""
        return self.incoming.popleft() if self.incoming else None

    def poll_all(self) -> list[InboundMessage]:
        messages = list(self.incoming)
        self.incoming.clear()
        return messages

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def closed(self) -> bool:
        return self._closed

    def disconnect(self):
        self._closed = True
        self._connected = False
        self.status = "Disconnected"
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
