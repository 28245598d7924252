"""Data classes for game entities.

Mirrors the JSON the server pushes; every class is built with from_dict.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional
from shared.constants import Cell


@dataclass(frozen=True)
class Position:
    x: int
    y: int

    @staticmethod
    def from_dict(d: dict) -> Position:
        return Position(x=int(d["x"]), y=int(d["y"]))


@dataclass
class Player:
    id: str
    username: str
    pos: Optional[Position] = None
    cannonball_count: int = 0
    is_alive: bool = True

    @staticmethod
    def from_dict(d: dict) -> Player:
        pos = d.get("pos")
        return Player(
            id=str(d["id"]),
            username=d.get("username", ""),
            pos=Position.from_dict(pos) if pos else None,
            cannonball_count=d.get("cannonball_count", 0),
            is_alive=d.get("is_alive", True),
        )

    def placeholder(self) -> Player:
        """Copy of this player as shown before the match: no position, no hazards."""
        return Player(id=self.id, username=self.username)


@dataclass
class Cannonball:
    pos: Position

    @staticmethod
    def from_dict(d: dict) -> Cannonball:
        return Cannonball(pos=Position.from_dict(d["pos"]))


@dataclass
class TurnSnapshot:
    """Full authoritative board for one turn."""
    grid: list[list[Cell]]
    players: list[Player]
    cannonballs: list[Cannonball] = field(default_factory=list)
    turn: int = 0
    targeted_tiles: list[Position] = field(default_factory=list)
    mode: Optional[str] = None

    @property
    def rows(self) -> int:
        return len(self.grid)

    @property
    def cols(self) -> int:
        return len(self.grid[0]) if self.grid else 0

    def player(self, player_id: str) -> Optional[Player]:
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def has_cannonball(self, x: int, y: int) -> bool:
        return any(c.pos.x == x and c.pos.y == y for c in self.cannonballs)

    @staticmethod
    def from_dict(d: dict) -> TurnSnapshot:
        return TurnSnapshot(
            grid=[[Cell(cell) for cell in row] for row in d["grid"]],
            players=[Player.from_dict(p) for p in d["players"]],
            cannonballs=[Cannonball.from_dict(c) for c in d.get("cannonballs", [])],
            turn=int(d["turn"]),
            targeted_tiles=[Position.from_dict(t) for t in d.get("targeted_tiles", [])],
            mode=d.get("mode"),
        )

    @staticmethod
    def placeholder(rows: int, cols: int, players: list[Player]) -> TurnSnapshot:
        """Blank board shown while the mode vote runs."""
        return TurnSnapshot(
            grid=[[Cell.SOLID for _ in range(cols)] for _ in range(rows)],
            players=[p.placeholder() for p in players],
            turn=0,
        )


@dataclass
class PreGameConfig:
    modes: list[str]
    deadline_secs: int
    players: list[Player]
    grid_rows: int
    grid_cols: int

    @staticmethod
    def from_dict(d: dict) -> PreGameConfig:
        return PreGameConfig(
            modes=[str(m) for m in d["modes"]],
            deadline_secs=int(d["deadline_secs"]),
            players=[Player.from_dict(p) for p in d["players"]],
            grid_rows=int(d["grid_row"]),
            grid_cols=int(d["grid_col"]),
        )


@dataclass
class LobbyRoster:
    lobby_players: list[Player]
    ready_players: list[Player]
    countdown_active: bool = False
    countdown_remaining: Optional[int] = None

    @staticmethod
    def from_dict(d: dict) -> LobbyRoster:
        remaining = d.get("countdown_remaining", d.get("time_remaining"))
        return LobbyRoster(
            lobby_players=[Player.from_dict(p) for p in d.get("lobby_players", [])],
            ready_players=[Player.from_dict(p) for p in d.get("ready_players", [])],
            countdown_active=bool(d.get("countdown_active", False)),
            countdown_remaining=int(remaining) if remaining is not None else None,
        )
