"""Game connection: routes server pushes to the turn machine, predictor and vote."""

from __future__ import annotations
import random
import time
from typing import Callable, Optional

from shared.constants import (
    Direction, TurnPhase, DEFAULT_HOST, DEFAULT_PORT, TURN_SAFETY_MARGIN,
    SESSION_KICKED_CODE,
)
from shared.models import Player, Position
from shared.protocol import (
    InboundMessage, PreGameData, ModeVoteUpdate, ModeChosen, StateUpdate,
    GameInit, GameEnded, SessionKicked, ServerError, Move, CastVote,
)
from client.settings import SessionContext
from client.network import NetworkClient, game_uri
from client.turn_state import TurnStateMachine
from client.prediction import MovePredictor
from client.mode_vote import ModeVoteResolver


class GameSession:
    """Everything owned by one game connection.

    The session context is injected; nothing here reads persisted state.
    Closing the session stops every timer it started.
    """

    def __init__(self, context: SessionContext, game_id: str,
                 host: str = DEFAULT_HOST, port: int = DEFAULT_PORT,
                 network=None, clock: Callable[[], float] = time.monotonic,
                 rng: random.Random | None = None,
                 safety_margin: int = TURN_SAFETY_MARGIN):
        self.context = context
        self.game_id = game_id
        self.uri = game_uri(host, port, game_id, context)
        self.network = network if network is not None else NetworkClient()
        self.turns = TurnStateMachine(clock=clock, safety_margin=safety_margin,
                                      on_vote_expired=self._on_vote_deadline)
        self.predictor = MovePredictor()
        self.vote = ModeVoteResolver(rng=rng)
        self.local_player_id: str | None = None
        self.error_message = ""
        self.kicked_reason: str | None = None
        self.closed = False

    # ------------------------------------------------------------------ #
    # Connection
    # ------------------------------------------------------------------ #

    def open(self):
        self.network.connect(self.uri)

    @property
    def status(self) -> str:
        return self.network.status

    def pump(self) -> list[InboundMessage]:
        """Handle every queued message in arrival order."""
        handled = []
        for msg in self.network.poll_all():
            if self.closed:
                break
            self.handle_message(msg)
            handled.append(msg)
        if self.network.closed and not self.closed:
            print("[game] Connection lost")
            self.close()
        return handled

    def close(self):
        if self.closed:
            return
        self.closed = True
        self.turns.shutdown()
        self.vote.preempt()
        self.network.disconnect()

    # ------------------------------------------------------------------ #
    # Dispatch
    # ------------------------------------------------------------------ #

    def handle_message(self, msg: InboundMessage):
        if isinstance(msg, PreGameData):
            if self.turns.on_pre_game(msg.config):
                self.vote.start(msg.config)
                self.predictor.clear()
                self._identify(msg.config.players)
                if self.turns.vote_expired:
                    self.vote.preempt()
        elif isinstance(msg, ModeVoteUpdate):
            self.vote.on_vote(msg.player_id, msg.mode)
        elif isinstance(msg, ModeChosen):
            self.vote.on_mode_chosen(msg.mode, msg.chosen_by)
            self.turns.mode = msg.mode
        elif isinstance(msg, StateUpdate):
            self._apply_snapshot(msg.state, msg.turn_duration)
        elif isinstance(msg, GameInit):
            self.turns.mode = msg.mode
            self._apply_snapshot(msg.state, None)
        elif isinstance(msg, GameEnded):
            self.turns.on_match_end(msg.winner)
            self.predictor.clear()
        elif isinstance(msg, ServerError):
            self.error_message = msg.message
            print(f"[game] Error: {msg.message}")
            if msg.code == SESSION_KICKED_CODE:
                self.kicked_reason = msg.message
                self.close()
        elif isinstance(msg, SessionKicked):
            self.kicked_reason = msg.reason or "Session taken over by another connection"
            self.error_message = self.kicked_reason
            self.close()
        else:
            print(f"[game] Ignored {type(msg).__name__}")

    def _apply_snapshot(self, snapshot, turn_duration: Optional[int]):
        leaving_vote = self.turns.phase == TurnPhase.PREGAME_VOTE
        self.turns.on_snapshot(snapshot, turn_duration)
        self.predictor.observe_turn(self.turns.turn)
        if leaving_vote and self.turns.phase != TurnPhase.PREGAME_VOTE:
            self.vote.preempt()
        # Snapshot ids need not match the pre-game roster ids.
        if self.turns.snapshot is not None and self.local_player is None:
            self._identify(self.turns.snapshot.players)

    def _identify(self, players: list[Player]):
        """Wallet id first, then username."""
        for p in players:
            if p.id == self.context.wallet:
                self.local_player_id = p.id
                return
        for p in players:
            if p.username and p.username == self.context.username:
                self.local_player_id = p.id
                return

    def _on_vote_deadline(self):
        self.vote.preempt()

    # ------------------------------------------------------------------ #
    # User intent
    # ------------------------------------------------------------------ #

    def move(self, direction: Direction) -> bool:
        """Submit this turn's move and show it immediately. False when rejected."""
        if self.closed or not self.turns.submit_move():
            return False
        me = self.local_player
        snapshot = self.turns.snapshot
        if me is not None and me.pos is not None and me.is_alive and snapshot:
            self.predictor.predict(me.pos, direction, self.turns.turn,
                                   snapshot.rows, snapshot.cols)
        self.network.send(Move(Direction(direction)))
        return True

    def cast_vote(self, mode: str) -> bool:
        if self.closed or not self.vote.cast(mode, self.turns.voting_open):
            return False
        self.network.send(CastVote(mode))
        return True

    def update(self, dt: float):
        self.vote.update(dt)

    # ------------------------------------------------------------------ #
    # View state
    # ------------------------------------------------------------------ #

    @property
    def local_player(self) -> Optional[Player]:
        snapshot = self.turns.snapshot
        if snapshot is None or self.local_player_id is None:
            return None
        return snapshot.player(self.local_player_id)

    def render_position(self, player: Player) -> Optional[Position]:
        if player.id != self.local_player_id:
            return player.pos
        return self.predictor.render_position(player.pos, self.turns.turn)

    @property
    def local_render_position(self) -> Optional[Position]:
        me = self.local_player
        return self.render_position(me) if me else None
