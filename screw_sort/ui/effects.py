"""
Render-side effects: match particles, screen shake and the combo banner.
Reacts to gameplay events; never touches gameplay state.
"""
import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

from screw_sort.gameplay.game import ComboEvent, GameEvent, LevelLoadedEvent, MatchEvent, PlateFallingEvent

PARTICLES_PER_SCREW = 15
PARTICLE_GRAVITY = 0.3      # px/frame^2 at 60 fps
PARTICLE_DECAY = 0.02       # life lost per frame at 60 fps
SHAKE_DURATION = 0.3        # seconds
SHAKE_MAGNITUDE = 5.0       # px
COMBO_BANNER_DURATION = 1.5 # seconds

FRAME_RATE = 60.0


@dataclass
class Particle:
    """One spark from a cleared screw."""
    x: float
    y: float
    vx: float
    vy: float
    color: Tuple[int, int, int]
    size: float
    life: float = 1.0

    def update(self, dt: float) -> bool:
        """Move and fade. Returns False once the particle is spent."""
        frames = dt * FRAME_RATE
        self.x += self.vx * frames
        self.y += self.vy * frames
        self.vy += PARTICLE_GRAVITY * frames
        self.life -= PARTICLE_DECAY * frames
        return self.life > 0


class EffectsLayer:
    """
    Holds short-lived visual feedback.

    Everything is timed against the `now` passed in by the frame loop,
    so effects keep playing while the game is paused.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng if rng is not None else random.Random()
        self.particles: List[Particle] = []
        self._shake_until = 0.0
        self._combo_until = 0.0
        self.combo_count = 0

    def handle_event(self, event: GameEvent, now: float) -> None:
        if isinstance(event, MatchEvent):
            for x, y in event.positions:
                self.spawn_burst(x, y, event.color.rgb)
        elif isinstance(event, PlateFallingEvent):
            self._shake_until = now + SHAKE_DURATION
        elif isinstance(event, ComboEvent):
            self.combo_count = event.combo_count
            self._combo_until = now + COMBO_BANNER_DURATION
        elif isinstance(event, LevelLoadedEvent):
            self.particles.clear()

    def spawn_burst(self, x: float, y: float, color: Tuple[int, int, int]) -> None:
        rng = self._rng
        for _ in range(PARTICLES_PER_SCREW):
            self.particles.append(Particle(
                x=x,
                y=y,
                vx=(rng.random() - 0.5) * 8,
                vy=(rng.random() - 0.5) * 8 - 2,
                color=color,
                size=rng.random() * 4 + 2,
            ))

    def update(self, dt: float) -> None:
        self.particles = [p for p in self.particles if p.update(dt)]

    def shake_offset(self, now: float) -> Tuple[int, int]:
        """Pixel offset to apply to the whole scene this frame."""
        if now >= self._shake_until:
            return (0, 0)
        remaining = (self._shake_until - now) / SHAKE_DURATION
        magnitude = SHAKE_MAGNITUDE * remaining
        return (
            int((self._rng.random() - 0.5) * 2 * magnitude),
            int((self._rng.random() - 0.5) * 2 * magnitude),
        )

    def combo_visible(self, now: float) -> bool:
        return now < self._combo_until
