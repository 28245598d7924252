"""Optimistic movement: show the local player's move before the server confirms it."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from shared.constants import Direction, DIRECTION_DELTAS
from shared.models import Position


@dataclass(frozen=True)
class Prediction:
    position: Position
    turn: int


def step(origin: Position, direction: Direction, rows: int, cols: int) -> Position:
    """One cell towards ``direction``, clamped to the grid."""
    dx, dy = DIRECTION_DELTAS[Direction(direction)]
    x = min(max(origin.x + dx, 0), cols - 1)
    y = min(max(origin.y + dy, 0), rows - 1)
    return Position(x, y)


def render_position(authoritative: Optional[Position],
                    prediction: Optional[Prediction],
                    latest_turn: int) -> Optional[Position]:
    """Where to draw the local player."""
    if prediction is not None and prediction.turn == latest_turn:
        return prediction.position
    return authoritative


class MovePredictor:
    """Holds at most one prediction, tagged with the turn it was made on."""

    def __init__(self):
        self.prediction: Prediction | None = None

    def predict(self, origin: Position, direction: Direction, turn: int,
                rows: int, cols: int) -> Position:
        target = step(origin, direction, rows, cols)
        self.prediction = Prediction(target, turn)
        return target

    def observe_turn(self, turn: int):
        # Never carried into another turn; the server's position wins.
        if self.prediction is not None and self.prediction.turn != turn:
            self.prediction = None

    def clear(self):
        self.prediction = None

    def render_position(self, authoritative: Optional[Position],
                        latest_turn: int) -> Optional[Position]:
        return render_position(authoritative, self.prediction, latest_turn)
