"""Buttons, panels and text helpers shared by the scenes."""

from __future__ import annotations
import pygame
import client.theme as theme


def draw_text_centered(surface: pygame.Surface, font: pygame.font.Font, text: str,
                       cx: int, y: int, color=theme.TEXT_BRIGHT) -> pygame.Rect:
    surf = font.render(text, True, color)
    rect = surf.get_rect(midtop=(cx, y))
    surface.blit(surf, rect)
    return rect


def draw_panel(surface: pygame.Surface, rect: pygame.Rect, fill=theme.BG_PANEL,
               border=theme.BORDER_PANEL):
    """Filled rounded panel; fill may carry an alpha channel."""
    if len(fill) == 4:
        overlay = pygame.Surface(rect.size, pygame.SRCALPHA)
        overlay.fill(fill)
        surface.blit(overlay, rect.topleft)
    else:
        pygame.draw.rect(surface, fill, rect, border_radius=6)
    pygame.draw.rect(surface, border, rect, 2, border_radius=6)


class Button:
    def __init__(self, rect: pygame.Rect, text: str, color=(80, 80, 120),
                 text_color=(255, 255, 255), hover_color=(100, 100, 150)):
        self.rect = rect
        self.text = text
        self.color = color
        self.text_color = text_color
        self.hover_color = hover_color
        self.hovered = False
        self.enabled = True
        self.visible = True

    def draw(self, surface: pygame.Surface, font: pygame.font.Font):
        if not self.visible:
            return
        color = self.hover_color if self.hovered else self.color
        if not self.enabled:
            color = (60, 60, 60)
        pygame.draw.rect(surface, color, self.rect, border_radius=6)
        pygame.draw.rect(surface, (200, 200, 200), self.rect, 1, border_radius=6)
        text_surf = font.render(self.text, True, self.text_color if self.enabled else (120, 120, 120))
        text_rect = text_surf.get_rect(center=self.rect.center)
        surface.blit(text_surf, text_rect)

    def update(self, mouse_pos):
        self.hovered = self.visible and self.rect.collidepoint(mouse_pos)

    def clicked(self, mouse_pos) -> bool:
        return self.visible and self.enabled and self.rect.collidepoint(mouse_pos)
