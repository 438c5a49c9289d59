"""
Synthesized sound effects.
Tones are generated with numpy and played through pygame.mixer.
"""
import logging
from typing import Dict, Optional

import numpy as np
import pygame

from screw_sort.gameplay.game import (
    GameEvent, GamePhase, MatchEvent, PhaseChangedEvent, PlateFallingEvent,
    ScrewUnscrewedEvent,
)

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100
FLOOR_GAIN = 0.01


def _sweep(start_hz: float, end_hz: float, duration: float, wave: str = 'sine') -> np.ndarray:
    """Waveform whose pitch glides exponentially from start_hz to end_hz."""
    n_samples = int(SAMPLE_RATE * duration)
    t = np.linspace(0, duration, n_samples, endpoint=False, dtype=np.float32)
    freq = start_hz * (end_hz / start_hz) ** (t / duration)
    phase = 2 * np.pi * np.cumsum(freq) / SAMPLE_RATE

    if wave == 'triangle':
        return (2 / np.pi) * np.arcsin(np.sin(phase))
    return np.sin(phase)


def _decay(peak: float, duration: float) -> np.ndarray:
    """Exponential gain envelope from peak down to FLOOR_GAIN over `duration`."""
    n_samples = int(SAMPLE_RATE * duration)
    t = np.linspace(0, duration, n_samples, endpoint=False, dtype=np.float32)
    env = peak * (FLOOR_GAIN / peak) ** (t / duration)
    return env.astype(np.float32)


def unscrew_wave() -> np.ndarray:
    """Short metallic click."""
    return _sweep(800, 400, 0.1, 'triangle') * _decay(0.3, 0.1)


def match_wave() -> np.ndarray:
    """Bubbly pop, two descending sines."""
    body = _sweep(600, 200, 0.25) + _sweep(900, 300, 0.25)
    return body * _decay(0.4, 0.25)


def plate_fall_wave(rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """Deep metallic thud with a burst of noise on impact."""
    rng = rng if rng is not None else np.random.default_rng()
    tone = _sweep(150, 80, 0.4, 'triangle') * _decay(0.5, 0.4)

    noise_len = int(SAMPLE_RATE * 0.1)
    noise = rng.uniform(-1, 1, noise_len).astype(np.float32) * _decay(0.2, 0.1)
    tone[:noise_len] += noise
    return tone


class AudioPlayer:
    """
    Plays the game's three sound effects in response to events.

    If the mixer cannot be opened (no audio device, headless CI) the
    player stays silent and says so once in the log.
    """

    def __init__(self, enabled: bool = True):
        self.sounds: Dict[str, pygame.mixer.Sound] = {}
        self.enabled = False
        self.muted = False

        if not enabled:
            return

        try:
            if pygame.mixer.get_init() is None:
                pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=2, buffer=512)
            self._build_sounds()
            self.enabled = True
        except pygame.error as e:
            logger.warning(f"Audio unavailable, continuing without sound: {e}")

    def _build_sounds(self) -> None:
        self.sounds['unscrew'] = self._make_sound(unscrew_wave())
        self.sounds['match'] = self._make_sound(match_wave())
        self.sounds['plate_fall'] = self._make_sound(plate_fall_wave())

    def _make_sound(self, wave: np.ndarray) -> pygame.mixer.Sound:
        audio = (np.clip(wave, -1.0, 1.0) * 32767).astype(np.int16)
        _, _, channels = pygame.mixer.get_init()
        if channels > 1:
            audio = np.ascontiguousarray(np.column_stack([audio] * channels))
        return pygame.sndarray.make_sound(audio)

    def play(self, name: str) -> None:
        if not self.enabled or self.muted:
            return
        sound = self.sounds.get(name)
        if sound is not None:
            sound.play()

    def mute(self) -> None:
        self.muted = True
        if self.enabled:
            pygame.mixer.pause()

    def unmute(self) -> None:
        self.muted = False
        if self.enabled:
            pygame.mixer.unpause()

    def handle_event(self, event: GameEvent) -> None:
        if isinstance(event, ScrewUnscrewedEvent):
            self.play('unscrew')
        elif isinstance(event, MatchEvent):
            self.play('match')
        elif isinstance(event, PlateFallingEvent):
            self.play('plate_fall')
        elif isinstance(event, PhaseChangedEvent):
            if event.new_phase == GamePhase.PAUSED:
                self.mute()
            elif event.old_phase == GamePhase.PAUSED:
                self.unmute()
