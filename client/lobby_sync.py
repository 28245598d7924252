"""Matchmaking lobby state: rosters, derived payment flags, start countdown."""

from __future__ import annotations
from typing import Optional

from shared.models import LobbyRoster, Player
from client.countdown import Countdown


class LobbySynchronizer:
    """Mirrors the server's matchmaking rosters.

    Each update replaces both lists. ``is_paid`` and ``is_connected`` are
    membership tests against the latest lists, never tracked on their own.
    """

    def __init__(self, player_id: str, countdown: Countdown):
        self.player_id = player_id
        self.countdown = countdown
        self.roster: LobbyRoster | None = None
        self.match_id: str | None = None

    @property
    def lobby_players(self) -> list[Player]:
        return self.roster.lobby_players if self.roster else []

    @property
    def ready_players(self) -> list[Player]:
        return self.roster.ready_players if self.roster else []

    @property
    def is_paid(self) -> bool:
        return any(p.id == self.player_id for p in self.ready_players)

    @property
    def is_connected(self) -> bool:
        return any(p.id == self.player_id for p in self.lobby_players)

    @property
    def countdown_seconds(self) -> Optional[int]:
        return self.countdown.remaining if self.countdown.active else None

    @property
    def player_count(self) -> int:
        return len(self.lobby_players) + len(self.ready_players)

    # Button affordances
    @property
    def can_pay(self) -> bool:
        return self.is_connected and not self.is_paid

    @property
    def can_cancel_payment(self) -> bool:
        return self.is_paid and not self.countdown.active

    @property
    def can_leave(self) -> bool:
        return not (self.is_paid and self.countdown.active)

    def apply(self, roster: LobbyRoster):
        if self.match_id is not None:
            return
        self.roster = roster
        if roster.countdown_active and roster.countdown_remaining is not None:
            self.countdown.start(roster.countdown_remaining)
        else:
            self.countdown.cancel()
        print(f"[lobby] {len(roster.lobby_players)} waiting, "
              f"{len(roster.ready_players)} ready, paid={self.is_paid}")

    def on_game_started(self, game_id: str) -> Optional[str]:
        """Returns the game id the first time only."""
        if self.match_id is not None:
            return None
        self.match_id = game_id
        self.countdown.cancel()
        return game_id

    def reset(self):
        self.roster = None
        self.countdown.cancel()
