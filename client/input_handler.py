"""Keyboard mapping: arrow keys and WASD to move directions."""

import pygame
from shared.constants import Direction

KEY_DIRECTIONS = {
    pygame.K_UP: Direction.UP,
    pygame.K_DOWN: Direction.DOWN,
    pygame.K_LEFT: Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
    pygame.K_w: Direction.UP,
    pygame.K_s: Direction.DOWN,
    pygame.K_a: Direction.LEFT,
    pygame.K_d: Direction.RIGHT,
}


def direction_for_event(event) -> Direction | None:
    """Direction for a KEYDOWN event, or None for any other event."""
    if event.type != pygame.KEYDOWN:
        return None
    return KEY_DIRECTIONS.get(event.key)
