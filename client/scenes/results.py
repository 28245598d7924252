"""End-of-match banner over the final board."""

from __future__ import annotations
import pygame
from shared.constants import SCREEN_WIDTH, SCREEN_HEIGHT
from client.renderer.font_cache import get_font
import client.theme as theme


class ResultsScene:
    def __init__(self, app):
        self.app = app
        self.winner: str = ""

    def set_results(self, winner: str):
        self.winner = winner

    def _winner_name(self) -> str:
        game = self.app.game
        snapshot = game.turns.snapshot if game else None
        player = snapshot.player(self.winner) if snapshot else None
        return player.username if player else self.winner

    def handle_event(self, event):
        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            self.app.enter_lobby()

    def handle_network(self, msg):
        pass

    def update(self, dt):
        pass

    def render(self, screen: pygame.Surface):
        # Show the final board state under the banner.
        game_scene = self.app.scenes.get("game")
        if game_scene:
            game_scene.render(screen)
        else:
            screen.fill(theme.BG_MENU)

        banner = pygame.Surface((SCREEN_WIDTH, 120), pygame.SRCALPHA)
        banner.fill((20, 20, 30, 220))
        y = SCREEN_HEIGHT // 2 - 60
        screen.blit(banner, (0, y))

        game = self.app.game
        me = game.local_player_id if game else None
        text = "You win!" if me and me == self.winner else f"{self._winner_name()} wins!"
        win_text = get_font(32, bold=True).render(text, True, theme.TEXT_HIGHLIGHT)
        screen.blit(win_text, win_text.get_rect(center=(SCREEN_WIDTH // 2, y + 45)))

        hint = get_font(14).render("Press Escape to return to matchmaking", True, theme.TEXT_DIM)
        screen.blit(hint, hint.get_rect(center=(SCREEN_WIDTH // 2, y + 90)))
