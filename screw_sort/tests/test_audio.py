"""
Tests for the synthesized waveforms.
Only the numpy side is exercised; no mixer is opened.
"""
import numpy as np

from screw_sort.gameplay.game import GamePhase, PhaseChangedEvent
from screw_sort.ui.audio import SAMPLE_RATE, AudioPlayer, match_wave, plate_fall_wave, unscrew_wave


class TestWaveforms:
    """Tests for sound generation."""

    def test_lengths(self):
        assert len(unscrew_wave()) == int(SAMPLE_RATE * 0.1)
        assert len(match_wave()) == int(SAMPLE_RATE * 0.25)
        assert len(plate_fall_wave(np.random.default_rng(0))) == int(SAMPLE_RATE * 0.4)

    def test_waves_stay_in_range(self):
        for wave in (unscrew_wave(), match_wave(), plate_fall_wave(np.random.default_rng(0))):
            assert np.all(np.isfinite(wave))
            assert np.max(np.abs(wave)) <= 1.0

    def test_sound_decays(self):
        wave = unscrew_wave()
        quarter = len(wave) // 4
        assert np.max(np.abs(wave[-quarter:])) < np.max(np.abs(wave[:quarter]))


class TestAudioPlayer:
    """Tests for the player with sound disabled."""

    def test_disabled_player_is_silent(self):
        player = AudioPlayer(enabled=False)
        assert not player.enabled
        player.play('match')

    def test_pause_mutes(self):
        player = AudioPlayer(enabled=False)

        player.handle_event(PhaseChangedEvent(GamePhase.PLAYING, GamePhase.PAUSED))
        assert player.muted

        player.handle_event(PhaseChangedEvent(GamePhase.PAUSED, GamePhase.PLAYING))
        assert not player.muted
