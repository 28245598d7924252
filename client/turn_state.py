"""Per-turn phase machine: pre-game vote, move/wait cycle, match end."""

from __future__ import annotations
import time
from typing import Callable, Optional

from shared.constants import (
    TurnPhase, DEFAULT_TURN_DURATION, TURN_SAFETY_MARGIN, MIN_TURN_SECONDS,
)
from shared.models import PreGameConfig, TurnSnapshot
from client.countdown import Countdown


def safe_turn_seconds(turn_duration: Optional[int],
                      margin: int = TURN_SAFETY_MARGIN) -> int:
    """Local turn timer length, kept short of the server's cutoff."""
    duration = turn_duration or DEFAULT_TURN_DURATION
    return max(MIN_TURN_SECONDS, duration - margin)


class TurnStateMachine:
    """Owns the current phase. Everything else only reads it.

    Phases: idle -> pregame_vote -> move -> wait -> move ... -> ended.
    A snapshot with a strictly greater turn number opens a new turn; an equal
    turn number is a within-turn update and leaves timers and flags alone.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic,
                 safety_margin: int = TURN_SAFETY_MARGIN,
                 on_vote_expired: Optional[Callable[[], None]] = None):
        self.safety_margin = safety_margin
        self._on_vote_expired = on_vote_expired
        self.turn_timer = Countdown("turn", on_expire=self._turn_expired, clock=clock)
        self.vote_timer = Countdown("vote", on_expire=self._vote_expired, clock=clock)

        self.phase = TurnPhase.IDLE
        self.turn = 0
        self.has_submitted = False
        self.turn_expired = False
        self.vote_expired = False
        self.turn_duration = DEFAULT_TURN_DURATION
        self.config: PreGameConfig | None = None
        self.snapshot: TurnSnapshot | None = None
        self.mode: str | None = None
        self.winner: str | None = None

    # ------------------------------------------------------------------ #
    # Derived state
    # ------------------------------------------------------------------ #

    @property
    def accepting_input(self) -> bool:
        return (self.phase == TurnPhase.MOVE
                and not self.has_submitted
                and not self.turn_expired)

    @property
    def voting_open(self) -> bool:
        return self.phase == TurnPhase.PREGAME_VOTE and not self.vote_expired

    @property
    def is_placeholder(self) -> bool:
        return self.phase == TurnPhase.PREGAME_VOTE and self.snapshot is not None

    @property
    def turn_seconds_left(self) -> int:
        return self.turn_timer.remaining

    @property
    def vote_seconds_left(self) -> int:
        return self.vote_timer.remaining

    @property
    def action_message(self) -> str:
        if self.phase == TurnPhase.PREGAME_VOTE:
            return "Vote for the game mode!"
        if self.phase == TurnPhase.ENDED:
            return "Game over"
        if self.phase == TurnPhase.WAIT or (self.phase == TurnPhase.MOVE and self.has_submitted):
            return "Waiting for other players..."
        if self.phase == TurnPhase.MOVE:
            return "Time's up, waiting for next turn..." if self.turn_expired else "Your turn!"
        return ""

    # ------------------------------------------------------------------ #
    # Transitions
    # ------------------------------------------------------------------ #

    def on_pre_game(self, config: PreGameConfig) -> bool:
        """Enter (or refresh) the mode vote. Ignored once the match has begun."""
        if self.phase not in (TurnPhase.IDLE, TurnPhase.PREGAME_VOTE):
            print(f"[game] Pre-game data ignored in phase {self.phase.value}")
            return False
        self.config = config
        self.phase = TurnPhase.PREGAME_VOTE
        self.vote_expired = False
        self.snapshot = TurnSnapshot.placeholder(
            config.grid_rows, config.grid_cols, config.players)
        self.vote_timer.start(config.deadline_secs)
        return True

    def on_snapshot(self, snapshot: TurnSnapshot,
                    turn_duration: Optional[int] = None) -> bool:
        """Apply an authoritative snapshot. Returns True when it opened a new turn."""
        if self.phase == TurnPhase.ENDED:
            return False
        if snapshot.turn < self.turn:
            print(f"[game] Stale snapshot for turn {snapshot.turn} (at {self.turn})")
            return False

        opening = self.phase in (TurnPhase.IDLE, TurnPhase.PREGAME_VOTE)
        self.snapshot = snapshot
        if snapshot.mode:
            self.mode = snapshot.mode
        if turn_duration:
            self.turn_duration = turn_duration
        if not opening and snapshot.turn == self.turn:
            return False

        if opening:
            self.vote_timer.cancel()
        self.turn = snapshot.turn
        self.has_submitted = False
        self.turn_expired = False
        self.phase = TurnPhase.MOVE
        self.turn_timer.start(safe_turn_seconds(self.turn_duration, self.safety_margin))
        print(f"[game] Turn {self.turn} started")
        return True

    def submit_move(self) -> bool:
        """Move -> Wait. Only once per turn; later calls are rejected."""
        if not self.accepting_input:
            return False
        self.has_submitted = True
        self.phase = TurnPhase.WAIT
        return True

    def on_match_end(self, winner: str) -> bool:
        if self.phase == TurnPhase.ENDED:
            return False
        self.phase = TurnPhase.ENDED
        self.winner = winner
        self.shutdown()
        print(f"[game] Match ended, winner={winner}")
        return True

    def shutdown(self):
        """Stop both timers (connection teardown or match end)."""
        self.turn_timer.cancel()
        self.vote_timer.cancel()

    # ------------------------------------------------------------------ #
    # Timer callbacks
    # ------------------------------------------------------------------ #

    def _turn_expired(self):
        self.turn_expired = True

    def _vote_expired(self):
        self.vote_expired = True
        if self._on_vote_expired:
            self._on_vote_expired()
