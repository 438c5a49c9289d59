"""
Tests for the render-side effects layer.
Effects only react to events, so no display is needed.
"""
import random

import pytest
from screw_sort.gameplay.colors import ScrewColor
from screw_sort.gameplay.game import ComboEvent, LevelLoadedEvent, MatchEvent, PlateFallingEvent
from screw_sort.ui.effects import PARTICLES_PER_SCREW, SHAKE_DURATION, EffectsLayer, Particle


def make_effects() -> EffectsLayer:
    return EffectsLayer(random.Random(3))


class TestParticles:
    """Tests for match bursts."""

    def test_burst_per_cleared_screw(self):
        effects = make_effects()
        effects.handle_event(MatchEvent(ScrewColor.RED, [(100, 40), (160, 40), (220, 40)], 1), now=0.0)

        assert len(effects.particles) == 3 * PARTICLES_PER_SCREW
        assert all(p.color == ScrewColor.RED.rgb for p in effects.particles)

    def test_particles_fade_out(self):
        effects = make_effects()
        effects.spawn_burst(0, 0, (255, 0, 0))

        for _ in range(120):
            effects.update(1 / 60)

        assert effects.particles == []

    def test_particle_motion_scales_with_dt(self):
        slow = Particle(0, 0, vx=2, vy=0, color=(0, 0, 0), size=2)
        fast = Particle(0, 0, vx=2, vy=0, color=(0, 0, 0), size=2)

        slow.update(1 / 60)
        slow.update(1 / 60)
        fast.update(2 / 60)

        assert fast.x == pytest.approx(slow.x)
        assert fast.life == pytest.approx(slow.life)

    def test_new_level_clears_particles(self):
        effects = make_effects()
        effects.spawn_burst(0, 0, (255, 0, 0))
        effects.handle_event(LevelLoadedEvent(2, 2, 6), now=0.0)
        assert effects.particles == []


class TestShakeAndBanner:
    """Tests for timed effects."""

    def test_plate_fall_shakes_then_settles(self):
        effects = make_effects()
        assert effects.shake_offset(0.0) == (0, 0)

        effects.handle_event(PlateFallingEvent(1, 140, 120), now=10.0)

        assert effects.shake_offset(10.0 + SHAKE_DURATION) == (0, 0)
        offsets = [effects.shake_offset(10.0) for _ in range(20)]
        assert all(abs(dx) <= 5 and abs(dy) <= 5 for dx, dy in offsets)

    def test_combo_banner(self):
        effects = make_effects()
        effects.handle_event(ComboEvent(3), now=5.0)

        assert effects.combo_count == 3
        assert effects.combo_visible(5.5)
        assert not effects.combo_visible(7.0)
