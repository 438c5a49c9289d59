#!/usr/bin/env python3
"""
Screw Sort - Main Entry Point

Pull screws off swaying plates and drop them into the slot row.
Three screws of one color clear; a full row with no match ends the run.

Usage:
    python -m screw_sort.main [--seed N] [--log-level DEBUG] [--mute]

Controls:
    Mouse / touch: Unscrew
    Space/Enter: Start game, next level
    P: Pause / resume
    E: Extra slots (discards the last two slotted screws)
    N: Next level
    R: Restart
    Escape: Quit
"""
import argparse
import logging
import random

import pygame

from screw_sort.config import get_settings
from screw_sort.gameplay.ads import InstantAdProvider
from screw_sort.gameplay.game import Game, GameContext, Viewport
from screw_sort.ui.audio import AudioPlayer
from screw_sort.ui.effects import EffectsLayer
from screw_sort.ui.input_handler import InputHandler
from screw_sort.ui.renderer import HUD_HEIGHT, Renderer

logger = logging.getLogger(__name__)

# Longest step fed to the game; avoids teleporting screws after a stall
MAX_FRAME_DT = 0.1


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Screw Sort")
    parser.add_argument('--seed', type=int, default=None, help='Seed for cosmetic randomness')
    parser.add_argument('--log-level', default=None, help='Override SCREW_SORT_LOG_LEVEL')
    parser.add_argument('--mute', action='store_true', help='Disable sound effects')
    parser.add_argument('--fake-ads', action='store_true',
                        help='Route relief and interstitials through an instant ad provider')
    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)
    settings = get_settings()

    logging.basicConfig(
        level=(args.log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    pygame.init()
    pygame.display.set_caption("Screw Sort")
    screen = pygame.display.set_mode((settings.screen_width, settings.screen_height), pygame.RESIZABLE)

    context = GameContext(
        settings=settings,
        viewport=Viewport(settings.screen_width, settings.screen_height - HUD_HEIGHT),
        rng=random.Random(args.seed),
        ads=InstantAdProvider() if args.fake_ads else None,
    )
    game = Game(context)

    effects = EffectsLayer(random.Random(args.seed))
    audio = AudioPlayer(enabled=settings.audio_enabled and not args.mute)
    renderer = Renderer(game, effects)
    renderer.init_fonts()
    input_handler = InputHandler(game, screen.get_size())

    logger.info("Screw Sort starting")
    clock = pygame.time.Clock()
    running = True

    while running:
        dt = min(clock.tick(settings.fps) / 1000.0, MAX_FRAME_DT)

        for event in pygame.event.get():
            if input_handler.handle_event(event):
                running = False

        # Update game logic, then let the collaborators react
        now = pygame.time.get_ticks() / 1000.0
        for event in game.update(dt):
            effects.handle_event(event, now)
            audio.handle_event(event)
        effects.update(dt)

        screen = pygame.display.get_surface()
        renderer.render(screen, now)
        pygame.display.flip()

    logger.info("Screw Sort exiting")
    pygame.quit()


if __name__ == "__main__":
    main()
