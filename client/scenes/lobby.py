"""Matchmaking lobby: waiting and paid rosters, pay/cancel, start countdown."""

import pygame
from shared.constants import SCREEN_WIDTH, SCREEN_HEIGHT
from shared.protocol import GameStarted
from client.renderer.ui_renderer import Button, draw_text_centered
from client.renderer.font_cache import get_font
import client.theme as theme

_BTN_W = 220
_BTN_H = 44
_CX = SCREEN_WIDTH // 2


class LobbyScene:
    def __init__(self, app):
        self.app = app
        self.font = get_font(16)
        self.title_font = get_font(24)
        self.small_font = get_font(14)

        _btn_y = SCREEN_HEIGHT - 140
        self.pay_button = Button(
            pygame.Rect(_CX - _BTN_W - 10, _btn_y, _BTN_W, _BTN_H),
            "Pay to join the game", (60, 120, 60)
        )
        self.cancel_button = Button(
            pygame.Rect(_CX - _BTN_W - 10, _btn_y, _BTN_W, _BTN_H),
            "Cancel payment", (150, 120, 40)
        )
        self.leave_button = Button(
            pygame.Rect(_CX + 10, _btn_y, _BTN_W, _BTN_H),
            "Leave lobby", (120, 60, 60)
        )
        # Payment confirmation step before the Pay command goes out
        self.confirming_payment = False
        self.confirm_button = Button(
            pygame.Rect(_CX - 110, SCREEN_HEIGHT // 2 + 30, 100, _BTN_H),
            "Sign", (60, 120, 60)
        )
        self.dismiss_button = Button(
            pygame.Rect(_CX + 10, SCREEN_HEIGHT // 2 + 30, 100, _BTN_H),
            "Cancel", (90, 90, 100)
        )

    @property
    def session(self):
        return self.app.matchmaking

    def handle_event(self, event):
        session = self.session
        if session is None:
            return
        lobby = session.lobby

        if event.type == pygame.MOUSEMOTION:
            for btn in (self.pay_button, self.cancel_button, self.leave_button,
                        self.confirm_button, self.dismiss_button):
                btn.update(event.pos)

        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.confirming_payment:
                if self.confirm_button.clicked(event.pos):
                    self.confirming_payment = False
                    session.pay()
                elif self.dismiss_button.clicked(event.pos):
                    self.confirming_payment = False
                return
            if lobby.can_pay and self.pay_button.clicked(event.pos):
                self.confirming_payment = True
            elif lobby.is_paid and self.cancel_button.clicked(event.pos):
                session.cancel_payment()
            elif self.leave_button.clicked(event.pos):
                self.app.leave_lobby()

        if event.type == pygame.KEYDOWN and event.key == pygame.K_r and session.closed:
            self.app.enter_lobby()

    def handle_network(self, msg):
        if isinstance(msg, GameStarted) and self.session.match_id == msg.game_id:
            self.confirming_payment = False
            self.app.enter_game(msg.game_id)

    def update(self, dt):
        lobby = self.session.lobby if self.session else None
        if lobby is None:
            return
        self.pay_button.visible = lobby.can_pay
        self.cancel_button.visible = lobby.is_paid
        self.cancel_button.enabled = lobby.can_cancel_payment
        self.leave_button.enabled = lobby.can_leave

    # ------------------------------------------------------------------ #
    # Rendering
    # ------------------------------------------------------------------ #

    def render(self, screen: pygame.Surface):
        screen.fill(theme.BG_MENU)
        draw_text_centered(screen, self.title_font, "Matchmaking", _CX, 36, theme.TITLE_TEXT)

        session = self.session
        if session is None:
            draw_text_centered(screen, self.font, "Not connected", _CX, 90, theme.TEXT_DIM)
            return
        lobby = session.lobby
        ctx = session.context

        draw_text_centered(screen, self.small_font,
                           f"{ctx.username or 'anonymous'}  ({ctx.wallet})",
                           _CX, 72, theme.TEXT_DIM)
        draw_text_centered(screen, self.small_font, session.status, _CX, 92, theme.TEXT_NORMAL)

        y = 130
        draw_text_centered(screen, self.font,
                           f"{lobby.player_count} players connected", _CX, y, theme.TEXT_NORMAL)
        y += 30

        seconds = lobby.countdown_seconds
        if seconds is not None:
            draw_text_centered(screen, self.title_font,
                               f"Game starts in {seconds}s", _CX, y, theme.TEXT_TIMER)
        y += 44

        left_x, right_x = _CX - 260, _CX + 40
        screen.blit(self.font.render("Waiting players", True, theme.TEXT_BRIGHT), (left_x, y))
        screen.blit(self.font.render("Ready players (paid)", True, theme.TEXT_READY), (right_x, y))
        y += 28
        self._draw_roster(screen, lobby.lobby_players, left_x, y, theme.TEXT_NORMAL, ctx.wallet)
        self._draw_roster(screen, lobby.ready_players, right_x, y, theme.TEXT_READY, ctx.wallet)

        if lobby.is_paid:
            hint = ("Countdown running, payment locked" if seconds is not None
                    else "You are ready! You can cancel until the countdown starts.")
        elif lobby.is_connected:
            hint = "Only players who have paid are selected for the next game."
        else:
            hint = "Press R to reconnect" if session.closed else ""
        draw_text_centered(screen, self.small_font, hint, _CX, SCREEN_HEIGHT - 180, theme.TEXT_DIM)

        self.pay_button.draw(screen, self.font)
        self.cancel_button.draw(screen, self.font)
        self.leave_button.draw(screen, self.font)

        if session.error_message:
            draw_text_centered(screen, self.small_font, session.error_message,
                               _CX, SCREEN_HEIGHT - 40, theme.TEXT_ERROR)

        if self.confirming_payment:
            self._draw_payment_modal(screen)

    def _draw_roster(self, screen, players, x, y, color, wallet):
        if not players:
            screen.blit(self.small_font.render("(none)", True, theme.TEXT_DIM), (x, y))
            return
        for p in players:
            prefix = "> " if p.id == wallet else "  "
            screen.blit(self.font.render(f"{prefix}{p.username}", True, color), (x, y))
            y += 24

    def _draw_payment_modal(self, screen):
        shade = pygame.Surface((SCREEN_WIDTH, SCREEN_HEIGHT), pygame.SRCALPHA)
        shade.fill((0, 0, 0, 160))
        screen.blit(shade, (0, 0))
        box = pygame.Rect(0, 0, 420, 170)
        box.center = (_CX, SCREEN_HEIGHT // 2)
        pygame.draw.rect(screen, theme.BG_PANEL, box, border_radius=8)
        pygame.draw.rect(screen, theme.BORDER_PANEL, box, 2, border_radius=8)
        draw_text_centered(screen, self.font, "Transaction signature", _CX, box.y + 18)
        draw_text_centered(screen, self.small_font,
                           "Sign the transaction to join the next game.",
                           _CX, box.y + 50, theme.TEXT_NORMAL)
        self.confirm_button.draw(screen, self.font)
        self.dismiss_button.draw(screen, self.font)
