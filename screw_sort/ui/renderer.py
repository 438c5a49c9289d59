"""
Renderer - Reads gameplay state and draws it with pygame.
This is a THIN ADAPTER - no game logic here.
"""
import math
from typing import List, Optional, Tuple

import pygame

from screw_sort.gameplay.entities import Plate, Screw
from screw_sort.gameplay.game import Game, GamePhase
from screw_sort.ui.effects import EffectsLayer

# Colors
COLOR_BG = (26, 26, 36)
COLOR_PLATE = (74, 74, 74)
COLOR_PLATE_EDGE = (42, 42, 42)
COLOR_PLATE_BOLT = (150, 150, 150)
COLOR_SLOT = (102, 102, 102)
COLOR_SLOT_RIM = (68, 68, 68)
COLOR_SCREW_RIM = (220, 220, 220)
COLOR_SCREW_CROSS = (40, 40, 40)
COLOR_HUD = (230, 230, 230)
COLOR_TIMER = (255, 215, 0)
COLOR_TIMER_LOW = (255, 59, 59)
COLOR_TIMER_BG = (60, 60, 70)
COLOR_HEART = (255, 70, 90)
COLOR_HEART_LOST = (80, 50, 55)
COLOR_COMBO = (255, 200, 60)
COLOR_OVERLAY = (0, 0, 0, 170)

TIMER_LOW_RATIO = 0.3
HUD_HEIGHT = 90            # play area starts below the HUD
BOLT_RADIUS = 4
BOLT_INSET = 10


class Renderer:
    """
    Draws the current game state to a pygame surface.

    This class reads from Game but never modifies it.
    """

    def __init__(self, game: Game, effects: EffectsLayer):
        self.game = game
        self.effects = effects
        self.font: Optional[pygame.font.Font] = None
        self.big_font: Optional[pygame.font.Font] = None

    def init_fonts(self) -> None:
        """Fonts need pygame.font initialized first."""
        self.font = pygame.font.Font(None, 28)
        self.big_font = pygame.font.Font(None, 56)

    def render(self, screen: pygame.Surface, now: float) -> None:
        screen.fill(COLOR_BG)

        if self.game.phase == GamePhase.NOT_STARTED:
            self._draw_start_screen(screen)
            return

        self._draw_hud(screen, now)

        # Play field is drawn into its own surface so the shake moves only it
        width, height = screen.get_size()
        field = pygame.Surface((width, height - HUD_HEIGHT), pygame.SRCALPHA)
        self._draw_slots(field)
        for plate in self.game.plates:
            self._draw_plate(field, plate)
        for screw in self.game.screws:
            self._draw_screw(field, screw)
        self._draw_particles(field)

        dx, dy = self.effects.shake_offset(now)
        screen.blit(field, (dx, HUD_HEIGHT + dy))

        self._draw_overlay(screen)

    # =========================================================================
    # PLAY FIELD
    # =========================================================================

    def _draw_slots(self, surface: pygame.Surface) -> None:
        radius = int(self.game.ctx.settings.screw_radius + 5)
        for slot in self.game.slot_row.slots:
            if slot.screw is not None:
                continue
            center = (int(slot.x), int(slot.y))
            pygame.draw.circle(surface, COLOR_SLOT, center, radius)
            pygame.draw.circle(surface, COLOR_SLOT_RIM, center, radius, 2)
            half = radius // 2
            pygame.draw.line(surface, COLOR_SLOT_RIM, (center[0] - half, center[1]), (center[0] + half, center[1]), 4)
            pygame.draw.line(surface, COLOR_SLOT_RIM, (center[0], center[1] - half), (center[0], center[1] + half), 4)

    def _draw_plate(self, surface: pygame.Surface, plate: Plate) -> None:
        if plate.is_offscreen:
            return

        corners = _rotated_rect(plate.x, plate.y, plate.width, plate.height, plate.rotation)
        pygame.draw.polygon(surface, COLOR_PLATE, corners)
        pygame.draw.polygon(surface, COLOR_PLATE_EDGE, corners, 2)

        bolts = _rotated_rect(
            plate.x + BOLT_INSET, plate.y + BOLT_INSET,
            plate.width - 2 * BOLT_INSET, plate.height - 2 * BOLT_INSET,
            plate.rotation,
            pivot=(plate.x + plate.width / 2, plate.y + plate.height / 2),
        )
        for bx, by in bolts:
            pygame.draw.circle(surface, COLOR_PLATE_BOLT, (int(bx), int(by)), BOLT_RADIUS)

    def _draw_screw(self, surface: pygame.Surface, screw: Screw) -> None:
        center = (int(screw.x), int(screw.y))
        radius = int(screw.radius)
        pygame.draw.circle(surface, screw.color.rgb, center, radius)
        pygame.draw.circle(surface, COLOR_SCREW_RIM, center, radius, 2)

        cross = int(radius * 0.5)
        pygame.draw.line(surface, COLOR_SCREW_CROSS, (center[0] - cross, center[1]), (center[0] + cross, center[1]), 3)
        pygame.draw.line(surface, COLOR_SCREW_CROSS, (center[0], center[1] - cross), (center[0], center[1] + cross), 3)

    def _draw_particles(self, surface: pygame.Surface) -> None:
        for p in self.effects.particles:
            alpha = max(0, min(255, int(p.life * 255)))
            pygame.draw.circle(surface, (*p.color, alpha), (int(p.x), int(p.y)), max(1, int(p.size)))

    # =========================================================================
    # HUD & OVERLAYS
    # =========================================================================

    def _draw_hud(self, screen: pygame.Surface, now: float) -> None:
        game = self.game
        width = screen.get_width()

        self._blit_text(screen, f"Level {game.level}", (16, 12), self.font, COLOR_HUD)
        self._blit_text(screen, f"Screws {game.unslotted_count()}", (130, 12), self.font, COLOR_HUD)

        # Timer bar
        ratio = game.time_ratio
        bar_color = COLOR_TIMER_LOW if ratio <= TIMER_LOW_RATIO else COLOR_TIMER
        bar = pygame.Rect(16, 44, width - 140, 14)
        pygame.draw.rect(screen, COLOR_TIMER_BG, bar, border_radius=7)
        filled = bar.copy()
        filled.width = int(bar.width * ratio)
        pygame.draw.rect(screen, bar_color, filled, border_radius=7)
        self._blit_text(screen, str(math.ceil(game.time_remaining)), (bar.right + 10, 38), self.font, bar_color)

        # Hearts
        for i in range(game.max_health):
            color = COLOR_HEART if i < game.health else COLOR_HEART_LOST
            pygame.draw.circle(screen, color, (width - 24 - i * 26, 20), 10)

        if self.effects.combo_visible(now):
            self._blit_text(screen, f"COMBO x{self.effects.combo_count}!", (width // 2 - 60, 64), self.font, COLOR_COMBO)

    def _draw_start_screen(self, screen: pygame.Surface) -> None:
        width, height = screen.get_size()
        self._blit_centered(screen, "SCREW SORT", height // 3, self.big_font)
        self._blit_centered(screen, "Tap screws to fill the slots.", height // 2, self.font)
        self._blit_centered(screen, "Three of a color clear.", height // 2 + 30, self.font)
        self._blit_centered(screen, "SPACE to play", height // 2 + 90, self.font)

    def _draw_overlay(self, screen: pygame.Surface) -> None:
        phase = self.game.phase
        lines: List[str] = []
        if phase == GamePhase.PAUSED:
            lines = ["PAUSED", "P to resume"]
        elif phase == GamePhase.GAME_OVER:
            lines = [
                "GAME OVER",
                f"Reached level {self.game.level}, cleared {self.game.levels_completed}",
                "E: extra slots   R: restart",
            ]
        elif phase == GamePhase.LEVEL_COMPLETE:
            lines = ["LEVEL COMPLETE", "N: next level"]
        if not lines:
            return

        shade = pygame.Surface(screen.get_size(), pygame.SRCALPHA)
        shade.fill(COLOR_OVERLAY)
        screen.blit(shade, (0, 0))

        y = screen.get_height() // 3
        self._blit_centered(screen, lines[0], y, self.big_font)
        for i, line in enumerate(lines[1:]):
            self._blit_centered(screen, line, y + 60 + i * 32, self.font)

    def _blit_text(self, screen, text: str, pos: Tuple[int, int], font, color) -> None:
        screen.blit(font.render(text, True, color), pos)

    def _blit_centered(self, screen, text: str, y: int, font, color=COLOR_HUD) -> None:
        rendered = font.render(text, True, color)
        screen.blit(rendered, (screen.get_width() // 2 - rendered.get_width() // 2, y))


def _rotated_rect(
    x: float, y: float, width: float, height: float, angle: float,
    pivot: Optional[Tuple[float, float]] = None,
) -> List[Tuple[float, float]]:
    """Corners of a rectangle rotated by `angle` radians about `pivot` (default: its center)."""
    cx, cy = pivot if pivot is not None else (x + width / 2, y + height / 2)
    cos_a, sin_a = math.cos(angle), math.sin(angle)
    corners = [(x, y), (x + width, y), (x + width, y + height), (x, y + height)]
    return [
        (cx + (px - cx) * cos_a - (py - cy) * sin_a, cy + (px - cx) * sin_a + (py - cy) * cos_a)
        for px, py in corners
    ]
