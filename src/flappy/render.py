# src/flappy/render.py
from __future__ import annotations
from typing import Optional, Sequence, Tuple
import pygame
from .config import (
    COLOR_SKY, COLOR_GROUND, COLOR_GRASS, COLOR_FG, COLOR_SHADOW, COLOR_ACTOR,
    COLOR_DANGER, COLOR_PANEL, COLOR_PANEL_EDGE, COLOR_BUTTON, OBSTACLE_COLORS
)
from .collision import barrier_boxes
from .obstacles import Obstacle
from .session import Snapshot, SessionState
from .tunables import Tunables, ObstacleKind

SETTINGS_LABELS = {
    "gap_size": "Gap size",
    "obstacle_speed": "Speed",
    "gravity": "Gravity",
    "jump_impulse": "Jump",
}


def _box_rect(box) -> pygame.Rect:
    left, top, right, bottom = box
    return pygame.Rect(int(left), int(top), max(0, int(right - left)), max(0, int(bottom - top)))


class Renderer:
    """Draws snapshots onto a pygame surface. Holds fonts and the Play Again button rect."""
    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.font = pygame.font.SysFont("jetbrainsmono", 18)
        self.font_big = pygame.font.SysFont("jetbrainsmono", 44, bold=True)
        btn_w, btn_h = 180, 50
        self.play_again_rect = pygame.Rect((width - btn_w) // 2, height // 2 + 40, btn_w, btn_h)

    # --- text helpers ---
    def _text(self, surf, msg, pos, font=None, color=COLOR_FG, center=False, shadow=True):
        font = font or self.font
        img = font.render(msg, True, color)
        x, y = pos
        if center:
            x -= img.get_width() // 2
        if shadow:
            surf.blit(font.render(msg, True, COLOR_SHADOW), (x + 2, y + 2))
        surf.blit(img, (x, y))

    # --- world ---
    def _draw_obstacle(self, surf: pygame.Surface, obstacle: Obstacle, floor_y: float):
        color = OBSTACLE_COLORS.get(obstacle.kind.value, OBSTACLE_COLORS["pipe"])
        top_box, bottom_box = barrier_boxes(obstacle, floor_y)
        for box in (top_box, bottom_box):
            rect = _box_rect(box)
            if obstacle.kind is ObstacleKind.LASER:
                # thin beam with emitter caps
                beam = rect.inflate(-rect.width * 2 // 3, 0)
                pygame.draw.rect(surf, color, beam)
                pygame.draw.rect(surf, COLOR_FG, beam, width=1)
            else:
                pygame.draw.rect(surf, color, rect)
                pygame.draw.rect(surf, COLOR_SHADOW, rect, width=2)
        if obstacle.kind is ObstacleKind.PIPE:
            # lips at the gap edges
            lip_h = 16
            lip_top = pygame.Rect(int(obstacle.x) - 4, int(obstacle.gap_top) - lip_h,
                                  int(obstacle.width) + 8, lip_h)
            lip_bot = pygame.Rect(int(obstacle.x) - 4, int(obstacle.gap_bottom),
                                  int(obstacle.width) + 8, lip_h)
            for lip in (lip_top, lip_bot):
                pygame.draw.rect(surf, color, lip)
                pygame.draw.rect(surf, COLOR_SHADOW, lip, width=2)

    def draw_world(self, surf: pygame.Surface, snap: Snapshot):
        surf.fill(COLOR_SKY)
        for obstacle in snap.obstacles:
            self._draw_obstacle(surf, obstacle, snap.floor_y)

        ground = pygame.Rect(0, int(snap.floor_y), self.width, self.height - int(snap.floor_y))
        pygame.draw.rect(surf, COLOR_GROUND, ground)
        pygame.draw.rect(surf, COLOR_GRASS, (0, int(snap.floor_y), self.width, 12))

        a = snap.actor
        actor_rect = pygame.Rect(int(a.left), int(a.top), int(a.size), int(a.size))
        color = COLOR_DANGER if snap.state is SessionState.ENDED else COLOR_ACTOR
        pygame.draw.rect(surf, color, actor_rect, border_radius=6)
        pygame.draw.rect(surf, COLOR_SHADOW, actor_rect, width=2, border_radius=6)

    # --- screens ---
    def draw_hud(self, surf: pygame.Surface, snap: Snapshot):
        self._text(surf, str(snap.score), (self.width // 2, 30), font=self.font_big, center=True)
        self._text(surf, f"Best: {snap.best_score}", (12, self.height - 30))

    def draw_start_screen(self, surf: pygame.Surface, snap: Snapshot):
        self._text(surf, "FLAPPY", (self.width // 2, self.height // 3), font=self.font_big, center=True)
        self._text(surf, "SPACE / click to flap", (self.width // 2, self.height // 2), center=True)
        self._text(surf, "TAB settings | ESC quit", (self.width // 2, self.height // 2 + 24), center=True)
        self._text(surf, f"Best: {snap.best_score}", (self.width // 2, self.height // 2 + 60), center=True)

    def draw_game_over(self, surf: pygame.Surface, snap: Snapshot) -> pygame.Rect:
        panel = pygame.Rect(40, self.height // 2 - 120, self.width - 80, 230)
        pygame.draw.rect(surf, COLOR_PANEL, panel, border_radius=12)
        pygame.draw.rect(surf, COLOR_PANEL_EDGE, panel, width=2, border_radius=12)
        self._text(surf, "GAME OVER", (self.width // 2, panel.top + 16), font=self.font_big, center=True)
        self._text(surf, f"Score: {snap.score}", (self.width // 2, panel.top + 80), center=True)
        self._text(surf, f"Best: {snap.best_score}", (self.width // 2, panel.top + 104), center=True)

        pygame.draw.rect(surf, COLOR_BUTTON, self.play_again_rect, border_radius=10)
        pygame.draw.rect(surf, COLOR_SHADOW, self.play_again_rect, width=2, border_radius=10)
        label = self.font.render("Play Again (R)", True, COLOR_FG)
        surf.blit(label, (self.play_again_rect.centerx - label.get_width() // 2,
                          self.play_again_rect.centery - label.get_height() // 2))
        return self.play_again_rect

    def draw_settings_panel(self, surf: pygame.Surface, tunables: Tunables,
                            fields: Sequence[str], selected: int):
        panel = pygame.Rect(20, 80, self.width - 40, 60 + 26 * (len(fields) + 1))
        overlay = pygame.Surface(panel.size, pygame.SRCALPHA)
        overlay.fill((10, 20, 35, 200))
        surf.blit(overlay, panel.topleft)
        pygame.draw.rect(surf, COLOR_PANEL_EDGE, panel, width=2, border_radius=8)

        self._text(surf, "Settings", (panel.left + 14, panel.top + 10), shadow=False)
        y = panel.top + 40
        for i, name in enumerate(fields):
            marker = ">" if i == selected else " "
            value = getattr(tunables, name)
            self._text(surf, f"{marker} {SETTINGS_LABELS[name]:<10} {value:6.1f}",
                       (panel.left + 14, y), shadow=False,
                       color=COLOR_BUTTON if i == selected else COLOR_FG)
            y += 26
        self._text(surf, f"  Style (K)  {tunables.obstacle_kind.value}", (panel.left + 14, y), shadow=False)
        self._text(surf, "UP/DOWN pick  LEFT/RIGHT adjust", (panel.left + 14, y + 30), shadow=False)

    def draw(self, surf: pygame.Surface, snap: Snapshot,
             settings: Optional[Tuple[Sequence[str], int]] = None) -> Optional[pygame.Rect]:
        """Full frame. Returns the Play Again rect when the game-over panel is shown."""
        self.draw_world(surf, snap)
        button = None
        if snap.state is SessionState.NOT_STARTED:
            self.draw_start_screen(surf, snap)
        else:
            self.draw_hud(surf, snap)
            if snap.state is SessionState.ENDED:
                button = self.draw_game_over(surf, snap)
        if settings is not None:
            fields, selected = settings
            self.draw_settings_panel(surf, snap.tunables, fields, selected)
        return button
