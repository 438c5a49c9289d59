"""
Main Game class - orchestrates all gameplay systems.
NO UI DEPENDENCIES.

This is the central gameplay module. It can be fully tested
without any UI framework.
"""
import logging
import math
import random
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, Tuple

from ..config import Settings, get_settings
from .ads import AdProvider
from .colors import ScrewColor
from .constants import SWAY_SPEED_MAX, SWAY_SPEED_MIN
from .entities import EntityStore, Plate, Screw
from .level import LevelLayout, generate_level
from .slots import SlotRow

logger = logging.getLogger(__name__)


class GamePhase(Enum):
    """Current phase of the game."""
    NOT_STARTED = auto()      # Start screen
    PLAYING = auto()          # Timer running, taps accepted
    PAUSED = auto()           # Suspended by the player or the ad SDK
    GAME_OVER = auto()        # Slots full, out of health or out of time
    LEVEL_COMPLETE = auto()   # Waiting for "next level"


class TapResult(Enum):
    """What a tap did."""
    IGNORED = auto()   # Not playing
    MISSED = auto()    # No screw under the pointer
    PLACED = auto()    # Screw went into the slot row
    DAMAGED = auto()   # Slot row was full, lost a heart


# =============================================================================
# EVENTS
# =============================================================================

@dataclass
class GameEvent:
    """An event that occurred during gameplay (for UI/audio to react to)."""
    pass


@dataclass
class PhaseChangedEvent(GameEvent):
    """Game phase changed."""
    old_phase: GamePhase
    new_phase: GamePhase


@dataclass
class LevelLoadedEvent(GameEvent):
    level: int
    plate_count: int
    screw_count: int


@dataclass
class ScrewUnscrewedEvent(GameEvent):
    """A screw was tapped (whether or not it found a slot)."""
    screw_id: int
    x: float
    y: float


@dataclass
class ScrewPlacedEvent(GameEvent):
    screw_id: int
    slot_index: int


@dataclass
class MatchEvent(GameEvent):
    """Screws of one color were cleared from the slot row."""
    color: ScrewColor
    positions: List[Tuple[float, float]]
    combo_count: int


@dataclass
class ComboEvent(GameEvent):
    """Two or more matches landed within the combo window."""
    combo_count: int


@dataclass
class DamageTakenEvent(GameEvent):
    amount: int
    new_health: int


@dataclass
class PlateFallingEvent(GameEvent):
    """A plate lost its last screw and started to fall."""
    plate_id: int
    x: float
    y: float


@dataclass
class LevelCompleteEvent(GameEvent):
    completed_level: int
    next_level: int


@dataclass
class GameOverEvent(GameEvent):
    level: int
    reason: str   # 'health', 'time' or 'slots_full'


@dataclass
class InterstitialRequestedEvent(GameEvent):
    level: int


@dataclass
class ExtraSlotsGrantedEvent(GameEvent):
    discarded: int


# =============================================================================
# CONTEXT
# =============================================================================

@dataclass
class Viewport:
    """Logical (DPI-corrected) size of the play area in pixels."""
    width: float
    height: float

    @property
    def center_x(self) -> float:
        return self.width / 2


@dataclass
class GameContext:
    """
    Everything a session needs from the outside world.
    Built once per session and handed to the Game.
    """
    settings: Settings = field(default_factory=get_settings)
    viewport: Optional[Viewport] = None
    rng: random.Random = field(default_factory=random.Random)
    ads: Optional[AdProvider] = None

    def __post_init__(self):
        if self.viewport is None:
            self.viewport = Viewport(self.settings.screen_width, self.settings.screen_height)


class Game:
    """
    One Screw Sort session: the plates on the board, the slot row, the
    level clock, hearts and combo.

    Taps and menu actions arrive as method calls; the frame loop calls
    update(dt) and hands the returned events to effects and audio. The
    renderer reads screws, plates and slot_row directly.

    Usage:
        game = Game(GameContext(viewport=Viewport(480, 710)))
        game.start()
        game.handle_tap(x, y)
        for event in game.update(dt):
            ...
    """

    def __init__(self, context: Optional[GameContext] = None):
        self.ctx = context if context is not None else GameContext()
        settings = self.ctx.settings

        self.store = EntityStore()
        self.slot_row = SlotRow(
            capacity=settings.slot_count,
            match_count=settings.match_count,
            viewport_width=self.ctx.viewport.width,
        )

        self.phase = GamePhase.NOT_STARTED
        self.level = 1
        self.levels_completed = 0

        # Timer & health
        self.max_time = settings.level_time
        self.time_remaining = self.max_time
        self.max_health = settings.max_health
        self.health = self.max_health

        # Combo
        self.combo_count = 0
        self.last_match_time: Optional[float] = None

        # Seconds of PLAYING time since start; drives combo and vibration timing
        self.clock = 0.0

        # Event queue for UI notifications
        self._events: List[GameEvent] = []

    # =========================================================================
    # GAME FLOW COMMANDS
    # =========================================================================

    def start(self) -> bool:
        """Leave the start screen and load the current level."""
        if self.phase != GamePhase.NOT_STARTED:
            return False

        self.combo_count = 0
        self.last_match_time = None
        self.load_level(self.level)
        self._set_phase(GamePhase.PLAYING)
        return True

    def load_level(self, level: int) -> LevelLayout:
        """Replace the play field with a fresh layout and reset timer/health."""
        self.store.clear()
        self.slot_row.clear()

        self.time_remaining = self.max_time
        self.health = self.max_health

        layout = generate_level(level, self.ctx.viewport.center_x)
        self._spawn(layout)

        self._events.append(LevelLoadedEvent(level, len(layout.plates), layout.screw_count))
        logger.info(f"Loaded level {level} ({len(layout.plates)} plates, {layout.screw_count} screws)")
        return layout

    def _spawn(self, layout: LevelLayout) -> None:
        settings = self.ctx.settings
        rng = self.ctx.rng

        for plate_layout in layout.plates:
            plate = Plate(
                plate_layout.x,
                plate_layout.y,
                rotation=plate_layout.rotation,
                gravity=settings.gravity,
                sway_phase=rng.uniform(0.0, 2 * math.pi),
                sway_speed=rng.uniform(SWAY_SPEED_MIN, SWAY_SPEED_MAX),
                rng=rng,
            )
            screws = [
                Screw(
                    plate_layout.x + dx,
                    plate_layout.y + dy,
                    plate_layout.color,
                    offset_x=dx,
                    radius=settings.screw_radius,
                    lerp_speed=settings.lerp_speed,
                )
                for dx, dy in plate_layout.screw_offsets
            ]
            self.store.add_plate(plate, screws)

    def next_level(self) -> bool:
        """Proceed from the level-complete screen."""
        if self.phase != GamePhase.LEVEL_COMPLETE:
            return False
        self.load_level(self.level)
        self._set_phase(GamePhase.PLAYING)
        return True

    def pause(self) -> bool:
        if self.phase != GamePhase.PLAYING:
            return False
        self._set_phase(GamePhase.PAUSED)
        return True

    def resume(self) -> bool:
        if self.phase != GamePhase.PAUSED:
            return False
        self._set_phase(GamePhase.PLAYING)
        return True

    def restart(self) -> None:
        """Back to the start screen at level 1."""
        self.level = 1
        self.levels_completed = 0
        self.store.clear()
        self.slot_row.clear()
        self.time_remaining = self.max_time
        self.health = self.max_health
        self.combo_count = 0
        self.last_match_time = None
        if self.phase != GamePhase.NOT_STARTED:
            self._set_phase(GamePhase.NOT_STARTED)

    def resize(self, width: float, height: float) -> None:
        """The viewport changed size; keep the slot row centered."""
        self.ctx.viewport = Viewport(width, height)
        self.slot_row.relayout(width)

    # =========================================================================
    # INPUT
    # =========================================================================

    def screw_at(self, x: float, y: float) -> Optional[Screw]:
        """First tappable (unslotted) screw under the point, or None."""
        for screw in self.store.iter_screws():
            if not screw.is_in_slot and screw.contains(x, y):
                return screw
        return None

    def handle_tap(self, x: float, y: float) -> TapResult:
        """Pointer-down at (x, y) in logical pixels."""
        if self.phase != GamePhase.PLAYING:
            return TapResult.IGNORED

        screw = self.screw_at(x, y)
        if screw is None:
            return TapResult.MISSED

        self._events.append(ScrewUnscrewedEvent(screw.id, screw.x, screw.y))

        plate = self.store.plate_of(screw)
        if plate is not None and not plate.is_falling:
            plate.start_vibration(self.clock)

        if not self.slot_row.try_place(screw):
            self.take_damage()
            return TapResult.DAMAGED

        self._events.append(ScrewPlacedEvent(screw.id, self.slot_row.index_of(screw)))

        for plate in self.store.iter_plates():
            if plate.check_empty(self.store.screws_of(plate)):
                self._events.append(PlateFallingEvent(plate.id, plate.x, plate.y))
                logger.debug(f"Plate {plate.id} emptied, falling")

        return TapResult.PLACED

    def take_damage(self, amount: int = 1) -> None:
        """Lose hearts; running out ends the game."""
        if self.health <= 0:
            return

        self.health = max(0, self.health - amount)
        self._events.append(DamageTakenEvent(amount, self.health))
        logger.debug(f"Slot row full, health now {self.health}")

        if self.health <= 0:
            self.check_game_over()

    # =========================================================================
    # RELIEF
    # =========================================================================

    def use_extra_slots(self) -> bool:
        """
        Ask for the extra-slots relief. Goes through a rewarded ad when an
        ad provider is present, otherwise grants straight away.
        """
        if self.phase not in (GamePhase.PLAYING, GamePhase.GAME_OVER):
            return False

        if self.ctx.ads is not None:
            self.ctx.ads.show_rewarded(self.grant_extra_slots)
        else:
            self.grant_extra_slots()
        return True

    def grant_extra_slots(self) -> bool:
        """
        Discard the screws in the highest occupied slots and carry on.

        The freed screws leave play for good. A pending game over is
        cleared, then the game-over condition is evaluated again.
        """
        if self.phase not in (GamePhase.PLAYING, GamePhase.GAME_OVER):
            return False

        released = self.slot_row.release_last(self.ctx.settings.extra_slots)
        for screw in released:
            self.store.remove_screw(screw.id)

        self._events.append(ExtraSlotsGrantedEvent(len(released)))
        logger.info(f"Extra slots granted, discarded {len(released)} screws")

        if self.phase == GamePhase.GAME_OVER:
            self._set_phase(GamePhase.PLAYING)
        self.check_game_over()
        return True

    # =========================================================================
    # UPDATE LOOP
    # =========================================================================

    def update(self, dt: float) -> List[GameEvent]:
        """
        Update game state by dt seconds.
        Returns every event since the previous call, including ones
        raised by commands issued between ticks.
        """
        if self.phase == GamePhase.PLAYING:
            self._update_playing(dt)
        # Other phases don't update

        return self.drain_events()

    def drain_events(self) -> List[GameEvent]:
        events, self._events = self._events, []
        return events

    def _update_playing(self, dt: float) -> None:
        """
        One gameplay tick. Order matters: timer, screws (and the matches
        their arrivals trigger), plates, then off-screen cleanup.
        """
        self.clock += dt

        # Timer
        if self.time_remaining > 0:
            self.time_remaining -= dt
            if self.time_remaining <= 0:
                self.time_remaining = 0.0
                self.check_game_over()
        if self.phase != GamePhase.PLAYING:
            return

        # Screws
        for screw in self.store.iter_screws():
            if self.store.get_screw(screw.id) is None:
                continue  # matched away earlier this tick
            if screw.update(dt) and screw.is_in_slot:
                self._on_slot_entry_complete()
                if self.phase != GamePhase.PLAYING:
                    return

        # Plates
        viewport_height = self.ctx.viewport.height
        for plate in self.store.iter_plates():
            plate.update(dt, self.store.screws_of(plate), viewport_height, self.clock)

        for plate in self.store.iter_plates():
            if plate.is_offscreen:
                self.store.remove_plate(plate.id)

    def _on_slot_entry_complete(self) -> None:
        """
        A screw finished moving into its slot.

        A full row without a match is not a loss by itself; the player
        loses hearts by tapping into it. Game over is only re-checked once
        a match has freed slots.
        """
        color = self.slot_row.check_match()
        if color is not None:
            self._resolve_match(color)

        if self.check_level_complete():
            return
        if color is not None:
            self.check_game_over()

    def _resolve_match(self, color: ScrewColor) -> None:
        now = self.clock
        window = self.ctx.settings.combo_window

        if self.last_match_time is not None and now - self.last_match_time <= window:
            self.combo_count += 1
        else:
            self.combo_count = 1
        self.last_match_time = now

        removed = self.slot_row.remove_matched(color)
        for screw in removed:
            self.store.remove_screw(screw.id)

        self._events.append(MatchEvent(color, [(s.x, s.y) for s in removed], self.combo_count))
        if self.combo_count >= 2:
            self._events.append(ComboEvent(self.combo_count))
        logger.debug(f"Matched {len(removed)} {color.name} screws (combo {self.combo_count})")

    # =========================================================================
    # WIN / LOSE
    # =========================================================================

    def check_game_over(self) -> bool:
        """End the game if health is gone, time is up or the slot row is full."""
        if self.phase != GamePhase.PLAYING:
            return False

        if self.health <= 0:
            reason = 'health'
        elif self.time_remaining <= 0:
            reason = 'time'
        elif self.slot_row.is_full():
            reason = 'slots_full'
        else:
            return False

        self._set_phase(GamePhase.GAME_OVER)
        self._events.append(GameOverEvent(self.level, reason))
        logger.info(f"Game over on level {self.level} ({reason})")
        return True

    def check_level_complete(self) -> bool:
        """Finish the level once no screw is left on any plate."""
        if self.phase != GamePhase.PLAYING:
            return False
        if self.store.unslotted_screws():
            return False

        completed = self.level
        self.level += 1
        self.levels_completed += 1
        self._set_phase(GamePhase.LEVEL_COMPLETE)
        self._events.append(LevelCompleteEvent(completed, self.level))
        logger.info(f"Level {completed} complete")

        if self.level % self.ctx.settings.interstitial_every == 0:
            self._events.append(InterstitialRequestedEvent(self.level))
            if self.ctx.ads is not None:
                self.ctx.ads.show_interstitial()
        return True

    def _set_phase(self, new_phase: GamePhase) -> None:
        old_phase = self.phase
        self.phase = new_phase
        self._events.append(PhaseChangedEvent(old_phase, new_phase))
        logger.debug(f"Phase {old_phase.name} -> {new_phase.name}")

    # =========================================================================
    # STATE QUERIES (for UI to read)
    # =========================================================================

    @property
    def screws(self) -> List[Screw]:
        return list(self.store.screws.values())

    @property
    def plates(self) -> List[Plate]:
        return list(self.store.plates.values())

    @property
    def time_ratio(self) -> float:
        """Remaining time as 0.0 to 1.0."""
        return self.time_remaining / self.max_time if self.max_time > 0 else 0.0

    def unslotted_count(self) -> int:
        return len(self.store.unslotted_screws())

    def is_accepting_input(self) -> bool:
        return self.phase == GamePhase.PLAYING

    # =========================================================================
    # CONVENIENCE METHODS FOR TESTING
    # =========================================================================

    def simulate(self, seconds: float, dt: float = 1 / 60) -> List[GameEvent]:
        """
        Simulate the game for a number of seconds.
        Returns all events that occurred.
        """
        all_events = []
        elapsed = 0.0
        while elapsed < seconds and self.phase == GamePhase.PLAYING:
            all_events.extend(self.update(dt))
            elapsed += dt
        all_events.extend(self.drain_events())
        return all_events
