"""Primary gameplay scene: grid, HUD, player list and the mode-vote overlay."""

import pygame
from shared.constants import SCREEN_WIDTH, SCREEN_HEIGHT, TurnPhase
from shared.protocol import GameEnded
from client.input_handler import direction_for_event
from client.renderer.grid_renderer import GridRenderer
from client.renderer.ui_renderer import Button, draw_panel, draw_text_centered
from client.renderer.font_cache import get_font
import client.theme as theme

_HUD_H = 48
_SIDE_W = 240
_CX = SCREEN_WIDTH // 2
_MODE_BTN_W = 150
_MODE_BTN_H = 46


class GameScene:
    def __init__(self, app):
        self.app = app
        self.grid_renderer = GridRenderer()
        self.mode_buttons: list[Button] = []
        self._modes: list[str] = []

    @property
    def session(self):
        return self.app.game

    @property
    def font(self):
        return get_font(16)

    @property
    def small_font(self):
        return get_font(13)

    # ------------------------------------------------------------------ #
    # Events
    # ------------------------------------------------------------------ #

    def handle_event(self, event):
        session = self.session
        if session is None:
            return

        direction = direction_for_event(event)
        if direction is not None:
            session.move(direction)
            return

        if event.type == pygame.MOUSEMOTION:
            for btn in self.mode_buttons:
                btn.update(event.pos)

        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if session.turns.phase == TurnPhase.PREGAME_VOTE:
                for btn, mode in zip(self.mode_buttons, self._modes):
                    if btn.clicked(event.pos):
                        session.cast_vote(mode)
                        return

        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE and session.closed:
            self.app.enter_lobby()

    def handle_network(self, msg):
        if isinstance(msg, GameEnded):
            self.app.show_results(msg.winner)

    def update(self, dt):
        session = self.session
        if session is None:
            return
        session.update(dt)
        vote = session.vote
        if vote.modes != self._modes:
            self._build_mode_buttons(vote.modes)
        counts = vote.counts
        for btn, mode in zip(self.mode_buttons, self._modes):
            btn.text = f"{mode} ({counts.get(mode, 0)})"
            btn.enabled = vote.can_cast(mode, session.turns.voting_open)
            if vote.my_vote == mode:
                btn.color = (220, 140, 60)
                btn.enabled = False

    def _build_mode_buttons(self, modes: list[str]):
        self._modes = list(modes)
        total_w = len(modes) * (_MODE_BTN_W + 12) - 12
        x = _CX - total_w // 2
        y = SCREEN_HEIGHT // 2 + 70
        self.mode_buttons = []
        for _ in modes:
            self.mode_buttons.append(Button(
                pygame.Rect(x, y, _MODE_BTN_W, _MODE_BTN_H), "", (60, 110, 70)))
            x += _MODE_BTN_W + 12

    # ------------------------------------------------------------------ #
    # Rendering
    # ------------------------------------------------------------------ #

    def render(self, screen: pygame.Surface):
        screen.fill(theme.BG_SCREEN)
        session = self.session
        if session is None:
            return
        turns = session.turns

        self._draw_hud(screen, session)
        area = pygame.Rect(16, _HUD_H + 16, SCREEN_WIDTH - _SIDE_W - 40,
                           SCREEN_HEIGHT - _HUD_H - 32)
        if turns.snapshot is None:
            draw_text_centered(screen, self.font, session.status, area.centerx,
                               area.centery, theme.TEXT_DIM)
        else:
            self.grid_renderer.draw(screen, session, area)
        self._draw_players(screen, session)

        if turns.phase == TurnPhase.PREGAME_VOTE:
            self._draw_vote_overlay(screen, session)

    def _draw_hud(self, screen, session):
        turns = session.turns
        pygame.draw.rect(screen, theme.BG_HUD, pygame.Rect(0, 0, SCREEN_WIDTH, _HUD_H))
        left = f"Turn {turns.turn}"
        if turns.mode:
            left += f"  |  {turns.mode}"
        screen.blit(self.font.render(left, True, theme.TEXT_BRIGHT), (16, 14))
        draw_text_centered(screen, self.font, turns.action_message, _CX, 14, theme.TEXT_NORMAL)
        if turns.phase in (TurnPhase.MOVE, TurnPhase.WAIT):
            timer = self.font.render(f"{turns.turn_seconds_left}s", True, theme.TEXT_TIMER)
            screen.blit(timer, (SCREEN_WIDTH - _SIDE_W - 60, 14))
        status = self.small_font.render(session.status, True, theme.TEXT_DIM)
        screen.blit(status, (SCREEN_WIDTH - status.get_width() - 16, 16))
        if session.error_message:
            draw_text_centered(screen, self.small_font, session.error_message,
                               _CX, SCREEN_HEIGHT - 22, theme.TEXT_ERROR)

    def _draw_players(self, screen, session):
        snapshot = session.turns.snapshot
        panel = pygame.Rect(SCREEN_WIDTH - _SIDE_W - 16, _HUD_H + 16, _SIDE_W,
                            SCREEN_HEIGHT - _HUD_H - 32)
        draw_panel(screen, panel)
        screen.blit(self.font.render("Players", True, theme.TEXT_BRIGHT), (panel.x + 12, panel.y + 10))
        if snapshot is None:
            return
        y = panel.y + 40
        for p in snapshot.players:
            is_me = p.id == session.local_player_id
            color = theme.PLAYER_SELF if is_me else theme.TEXT_NORMAL
            if not p.is_alive:
                color = theme.TEXT_ERROR
            voted = session.vote.tally.mode_of(p.id)
            line = f"{p.username}  x{p.cannonball_count}"
            if voted and session.turns.phase == TurnPhase.PREGAME_VOTE:
                line += f"  [{voted}]"
            screen.blit(self.font.render(line, True, color), (panel.x + 12, y))
            y += 24

    def _draw_vote_overlay(self, screen, session):
        vote = session.vote
        box = pygame.Rect(0, 0, 520, 320)
        box.center = (_CX, SCREEN_HEIGHT // 2)
        draw_panel(screen, box, fill=theme.BG_OVERLAY, border=theme.BORDER_OVERLAY)

        seconds = session.turns.vote_seconds_left
        timer = get_font(22, bold=True).render(f"{seconds}s", True, theme.TEXT_TIMER)
        screen.blit(timer, (box.right - timer.get_width() - 16, box.y + 12))
        draw_text_centered(screen, get_font(20, bold=True), "Game mode draw", _CX, box.y + 16,
                           theme.TITLE_TEXT)
        draw_text_centered(screen, self.small_font,
                           "One vote per player. A voter is drawn at random; their pick wins.",
                           _CX, box.y + 50, theme.TEXT_NORMAL)

        draw = vote.draw
        current = draw.current if draw else None
        name = current.username if current else "..."
        picked = vote.tally.mode_of(current.id) if current else None
        if picked:
            name += f" ({picked})"
        highlighted = draw is not None and draw.highlighted
        frame = pygame.Rect(0, 0, 300, 60)
        frame.center = (_CX, box.y + 120)
        pygame.draw.rect(screen, theme.BG_PANEL, frame, border_radius=10)
        pygame.draw.rect(screen, theme.TEXT_HIGHLIGHT if highlighted else theme.BORDER_OVERLAY,
                         frame, 4 if highlighted else 2, border_radius=10)
        draw_text_centered(screen, get_font(22, bold=True), name, _CX, frame.y + 16,
                           theme.TEXT_HIGHLIGHT if highlighted else theme.TEXT_BRIGHT)
        draw_text_centered(screen, self.small_font, vote.result_text, _CX, frame.bottom + 10,
                           theme.TEXT_NORMAL)

        for btn in self.mode_buttons:
            btn.draw(screen, self.font)
