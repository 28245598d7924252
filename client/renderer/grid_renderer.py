"""Grid drawing: tiles, cannonballs, players and the local move preview."""

import pygame
from shared.constants import Cell, CELL_SIZE
import client.theme as theme
from client.renderer.font_cache import get_font


class GridRenderer:
    """Draws the board centred in a target rect."""

    def __init__(self, cell_size: int = CELL_SIZE):
        self.cell_size = cell_size

    def board_rect(self, rows: int, cols: int, area: pygame.Rect) -> pygame.Rect:
        size = min(self.cell_size,
                   area.width // max(cols, 1),
                   area.height // max(rows, 1))
        rect = pygame.Rect(0, 0, size * cols, size * rows)
        rect.center = area.center
        return rect

    def cell_rect(self, board: pygame.Rect, cols: int, x: int, y: int) -> pygame.Rect:
        size = board.width // max(cols, 1)
        return pygame.Rect(board.x + x * size, board.y + y * size, size, size)

    def draw(self, surface: pygame.Surface, session, area: pygame.Rect):
        """Render the session's current snapshot.

        The local player is drawn at its render position (prediction if one
        is live for this turn); a faint marker stays on the authoritative cell.
        """
        snapshot = session.turns.snapshot
        if snapshot is None or not snapshot.grid:
            return
        rows, cols = snapshot.rows, snapshot.cols
        board = self.board_rect(rows, cols, area)
        targeted = {(t.x, t.y) for t in snapshot.targeted_tiles}
        font = get_font(14, bold=True)

        for y, row in enumerate(snapshot.grid):
            for x, cell in enumerate(row):
                rect = self.cell_rect(board, cols, x, y)
                color = theme.CELL_BROKEN if cell == Cell.BROKEN else theme.CELL_SOLID
                pygame.draw.rect(surface, color, rect.inflate(-4, -4), border_radius=4)
                border = theme.CELL_TARGETED if (x, y) in targeted else theme.CELL_BORDER
                pygame.draw.rect(surface, border, rect.inflate(-4, -4), 2, border_radius=4)
                if snapshot.has_cannonball(x, y):
                    pygame.draw.circle(surface, theme.CANNONBALL, rect.center, rect.width // 6)

        for player in snapshot.players:
            if player.pos is None or not player.is_alive:
                continue
            is_me = player.id == session.local_player_id
            pos = session.render_position(player) if is_me else player.pos
            rect = self.cell_rect(board, cols, pos.x, pos.y)
            color = theme.PLAYER_SELF if is_me else theme.PLAYER_OTHER
            if is_me and pos != player.pos:
                ghost = self.cell_rect(board, cols, player.pos.x, player.pos.y)
                overlay = pygame.Surface(ghost.size, pygame.SRCALPHA)
                pygame.draw.circle(overlay, theme.PLAYER_GHOST,
                                   (ghost.width // 2, ghost.height // 2), ghost.width // 3)
                surface.blit(overlay, ghost.topleft)
            pygame.draw.circle(surface, color, rect.center, rect.width // 3)
            label = font.render(player.username[:2].upper(), True, theme.BG_SCREEN)
            surface.blit(label, label.get_rect(center=rect.center))
