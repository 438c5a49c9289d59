"""
Input Handler - Translates pointer and key presses to gameplay commands.
This is a THIN ADAPTER - no game logic here.
"""
import logging
from typing import Tuple

import pygame

from screw_sort.gameplay.game import Game, GamePhase, TapResult
from screw_sort.ui.renderer import HUD_HEIGHT

logger = logging.getLogger(__name__)


class InputHandler:
    """
    Handles pygame events and translates them to game commands.

    Window coordinates are converted to play-field coordinates (the area
    below the HUD) before they reach the game.
    """

    def __init__(self, game: Game, window_size: Tuple[int, int]):
        self.game = game
        self.hovering = False
        self.window_size = window_size

    def to_field(self, x: float, y: float) -> Tuple[float, float]:
        return (x, y - HUD_HEIGHT)

    def finger_to_window(self, x: float, y: float) -> Tuple[float, float]:
        """Finger coordinates arrive normalized to 0..1."""
        width, height = self.window_size
        return (x * width, y * height)

    def handle_event(self, event: pygame.event.Event) -> bool:
        """
        Handle a single pygame event.
        Returns True if the game should quit.
        """
        if event.type == pygame.QUIT:
            return True

        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            # SDL mirrors every touch as a mouse click; FINGERDOWN already tapped
            if not getattr(event, 'touch', False):
                self._tap(*event.pos)
        elif event.type == pygame.FINGERDOWN:
            self._tap(*self.finger_to_window(event.x, event.y))
        elif event.type == pygame.MOUSEMOTION:
            self._hover(*event.pos)
        elif event.type == pygame.VIDEORESIZE:
            self.window_size = (event.w, event.h)
            self.game.resize(event.w, event.h - HUD_HEIGHT)
        elif event.type == pygame.KEYDOWN:
            return self.handle_key(event.key)

        return False

    def handle_key(self, key: int) -> bool:
        """
        Handle a single key press.
        Returns True if the game should quit.
        """
        game = self.game

        if key == pygame.K_ESCAPE:
            return True

        if key in (pygame.K_SPACE, pygame.K_RETURN):
            if game.phase == GamePhase.NOT_STARTED:
                game.start()
            elif game.phase == GamePhase.LEVEL_COMPLETE:
                game.next_level()
        elif key == pygame.K_n:
            game.next_level()
        elif key == pygame.K_p:
            if game.phase == GamePhase.PLAYING:
                game.pause()
            elif game.phase == GamePhase.PAUSED:
                game.resume()
        elif key == pygame.K_e:
            game.use_extra_slots()
        elif key == pygame.K_r:
            game.restart()

        return False

    def _tap(self, x: float, y: float) -> None:
        result = self.game.handle_tap(*self.to_field(x, y))
        if result == TapResult.DAMAGED:
            logger.debug("Tapped with a full slot row")

    def _hover(self, x: float, y: float) -> None:
        """Show a hand cursor over screws that can be tapped."""
        hovering = (
            self.game.is_accepting_input()
            and self.game.screw_at(*self.to_field(x, y)) is not None
        )
        if hovering != self.hovering:
            self.hovering = hovering
            cursor = pygame.SYSTEM_CURSOR_HAND if hovering else pygame.SYSTEM_CURSOR_ARROW
            pygame.mouse.set_system_cursor(cursor)
