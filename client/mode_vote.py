"""Game-mode vote: tally, one local vote, and the roulette draw reveal."""

from __future__ import annotations
import random
from typing import Optional

from shared.constants import (
    RollPhase,
    ROULETTE_START_INTERVAL, ROULETTE_FLOOR_INTERVAL, ROULETTE_ACCEL_STEP,
    ROULETTE_DECEL_STEP, ROULETTE_STOP_INTERVAL, ROULETTE_STEADY_TICKS,
    ROULETTE_STEADY_JITTER, ROULETTE_HIGHLIGHT_DELAY,
)
from shared.models import PreGameConfig, Player


class VoteTally:
    """player_id -> chosen mode (None until they vote)."""

    def __init__(self):
        self.votes: dict[str, Optional[str]] = {}

    def reset(self, players: list[Player]):
        self.votes = {p.id: None for p in players}

    def apply(self, player_id: str, mode: str):
        self.votes[player_id] = mode

    def mode_of(self, player_id: str) -> Optional[str]:
        return self.votes.get(player_id)

    def counts(self, modes: list[str]) -> dict[str, int]:
        return {m: sum(1 for v in self.votes.values() if v == m) for m in modes}

    def voters(self, players: list[Player]) -> list[Player]:
        return [p for p in players if self.votes.get(p.id)]


class RouletteDraw:
    """Cycles a highlight over the candidates and stops on the drawn player.

    Driven by ``update(dt)`` from the scene loop. The tick interval shrinks
    while accelerating, holds at the floor for a random number of ticks, then
    grows until it passes the stop threshold. ``preempt()`` (vote deadline)
    stops it immediately. Whatever the path, the final index is the index of
    the designated winner.
    """

    def __init__(self, candidates: list[Player], rng: random.Random | None = None):
        rng = rng or random.Random()
        self.candidates = list(candidates)
        self.index = 0
        self.phase = RollPhase.ACCELERATE
        self.interval = ROULETTE_START_INTERVAL
        self.steady_target = ROULETTE_STEADY_TICKS + rng.randint(0, ROULETTE_STEADY_JITTER)
        self.steady_ticks = 0
        self.winner_id: str | None = None
        self.final_index: int | None = None
        self.highlighted = False
        self._since_tick = 0.0
        self._since_stop = 0.0

    @property
    def rolling(self) -> bool:
        return self.phase != RollPhase.STOPPED

    @property
    def current(self) -> Optional[Player]:
        if not self.candidates:
            return None
        return self.candidates[self.index % len(self.candidates)]

    def set_candidates(self, candidates: list[Player]):
        if self.winner_id is not None or not self.rolling:
            return
        self.candidates = list(candidates)
        self.index = self.index % len(self.candidates) if self.candidates else 0

    def designate(self, winner_id: str, everyone: list[Player]):
        self.winner_id = winner_id
        if all(p.id != winner_id for p in self.candidates):
            self.candidates = list(everyone)
        if not self.rolling:
            self._land()

    def preempt(self):
        """Deadline reached: stop now, landing on the winner if known."""
        if not self.rolling:
            return
        if self.winner_id is not None:
            self._land()
        else:
            self.phase = RollPhase.STOPPED

    def update(self, dt: float):
        if not self.rolling:
            if self.final_index is not None and not self.highlighted:
                self._since_stop += dt
                if self._since_stop >= ROULETTE_HIGHLIGHT_DELAY:
                    self.highlighted = True
            return
        if not self.candidates:
            return
        self._since_tick += dt
        while self.rolling and self._since_tick >= self.interval:
            self._since_tick -= self.interval
            self._advance()

    def _advance(self):
        self.index = (self.index + 1) % len(self.candidates)

        if self.phase == RollPhase.ACCELERATE:
            self.interval = max(ROULETTE_FLOOR_INTERVAL, self.interval - ROULETTE_ACCEL_STEP)
            if self.interval <= ROULETTE_FLOOR_INTERVAL:
                self.phase = RollPhase.STEADY
        elif self.phase == RollPhase.STEADY:
            self.steady_ticks += 1
            if self.steady_ticks > self.steady_target:
                self.phase = RollPhase.DECELERATE

        if self.phase == RollPhase.DECELERATE:
            self.interval += ROULETTE_DECEL_STEP
            if self.interval > ROULETTE_STOP_INTERVAL:
                if self.winner_id is not None:
                    self._land()
                else:
                    # No result yet: idle at the slowest speed until it arrives.
                    self.interval = ROULETTE_STOP_INTERVAL

    def _land(self):
        self.phase = RollPhase.STOPPED
        for i, p in enumerate(self.candidates):
            if p.id == self.winner_id:
                self.final_index = i
                self.index = i
                break
        self._since_stop = 0.0


class ModeVoteResolver:
    """Vote bookkeeping for one pre-game ceremony."""

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng
        self.modes: list[str] = []
        self.players: list[Player] = []
        self.tally = VoteTally()
        self.my_vote: str | None = None
        self.draw: RouletteDraw | None = None
        self.chosen_mode: str | None = None
        self.chosen_by: str | None = None

    def start(self, config: PreGameConfig):
        self.modes = list(config.modes)
        self.players = list(config.players)
        self.tally.reset(self.players)
        self.my_vote = None
        self.chosen_mode = None
        self.chosen_by = None
        self.draw = RouletteDraw(self.players, self._rng)

    @property
    def has_voted(self) -> bool:
        return self.my_vote is not None

    @property
    def counts(self) -> dict[str, int]:
        return self.tally.counts(self.modes)

    def candidates(self) -> list[Player]:
        return self.tally.voters(self.players) or list(self.players)

    def can_cast(self, mode: str, voting_open: bool) -> bool:
        return voting_open and not self.has_voted and mode in self.modes

    def cast(self, mode: str, voting_open: bool) -> bool:
        """Record the local vote. The caller sends it only when this returns True."""
        if not self.can_cast(mode, voting_open):
            return False
        self.my_vote = mode
        return True

    def on_vote(self, player_id: str, mode: str):
        self.tally.apply(player_id, mode)
        if self.draw:
            self.draw.set_candidates(self.candidates())
        print(f"[vote] {player_id} -> {mode}")

    def on_mode_chosen(self, mode: str, chosen_by: str):
        self.chosen_mode = mode
        self.chosen_by = chosen_by
        if self.draw is None:
            self.draw = RouletteDraw(self.candidates(), self._rng)
        self.draw.designate(chosen_by, self.players)
        print(f"[vote] Mode {mode} drawn from {chosen_by}")

    def preempt(self):
        if self.draw:
            self.draw.preempt()

    def update(self, dt: float):
        if self.draw:
            self.draw.update(dt)

    def player_name(self, player_id: str | None) -> str:
        for p in self.players:
            if p.id == player_id:
                return p.username
        return player_id or ""

    @property
    def result_text(self) -> str:
        if self.draw is None or self.draw.rolling:
            return "The wheel is spinning..."
        if self.chosen_mode and self.draw.final_index is not None:
            name = self.draw.candidates[self.draw.final_index].username
            return f"{name} was drawn! Mode: {self.chosen_mode}"
        return "Drawing..."
