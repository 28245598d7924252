"""Matchmaking connection: lobby rosters, payment commands, hand-off to a game."""

from __future__ import annotations
import time
from typing import Callable, Optional

from shared.constants import DEFAULT_HOST, DEFAULT_PORT, SESSION_KICKED_CODE
from shared.protocol import (
    InboundMessage, LobbyUpdate, GameStarted, ServerError, SessionKicked,
    Pay, CancelPayment,
)
from client.settings import SessionContext
from client.network import NetworkClient, matchmaking_uri
from client.countdown import Countdown
from client.lobby_sync import LobbySynchronizer


class MatchmakingSession:
    def __init__(self, context: SessionContext,
                 host: str = DEFAULT_HOST, port: int = DEFAULT_PORT,
                 network=None, clock: Callable[[], float] = time.monotonic):
        self.context = context
        self.uri = matchmaking_uri(host, port, context)
        self.network = network if network is not None else NetworkClient()
        self.lobby = LobbySynchronizer(context.wallet, Countdown("lobby", clock=clock))
        self.error_message = ""
        self.kicked_reason: str | None = None
        self.closed = False

    def open(self):
        self.network.connect(self.uri)

    @property
    def status(self) -> str:
        return self.network.status

    def pump(self) -> list[InboundMessage]:
        handled = []
        for msg in self.network.poll_all():
            if self.closed:
                break
            self.handle_message(msg)
            handled.append(msg)
        if self.network.closed and not self.closed:
            print("[lobby] Connection lost")
            self.lobby.reset()
            self.close()
        return handled

    def handle_message(self, msg: InboundMessage) -> Optional[str]:
        """Apply one message. Returns a game id when the match starts."""
        if isinstance(msg, LobbyUpdate):
            self.lobby.apply(msg.roster)
        elif isinstance(msg, GameStarted):
            game_id = self.lobby.on_game_started(msg.game_id)
            if game_id is not None:
                print(f"[lobby] Game {game_id} started")
                self.close()
            return game_id
        elif isinstance(msg, ServerError):
            self.error_message = msg.message
            print(f"[lobby] Error: {msg.message}")
            if msg.code == SESSION_KICKED_CODE:
                self.kicked_reason = msg.message
                self.close()
        elif isinstance(msg, SessionKicked):
            self.kicked_reason = msg.reason or "Session taken over by another connection"
            self.error_message = self.kicked_reason
            self.close()
        else:
            print(f"[lobby] Ignored {type(msg).__name__}")
        return None

    @property
    def match_id(self) -> Optional[str]:
        return self.lobby.match_id

    def pay(self) -> bool:
        # No optimistic update: membership changes only with the next roster.
        if self.closed or not self.lobby.can_pay:
            return False
        self.network.send(Pay())
        return True

    def cancel_payment(self) -> bool:
        if self.closed or not self.lobby.can_cancel_payment:
            return False
        self.network.send(CancelPayment())
        return True

    def close(self):
        if self.closed:
            return
        self.closed = True
        self.lobby.countdown.cancel()
        self.network.disconnect()
