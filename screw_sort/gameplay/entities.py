"""
Play-field entities: Screw, Plate and the EntityStore that owns them.
NO UI DEPENDENCIES.
"""
import math
import random
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .colors import ScrewColor
from .constants import (
    GRAVITY, LERP_SPEED, PLATE_HEIGHT, PLATE_WIDTH, SCREW_RADIUS,
    SNAP_DISTANCE, SWAY_AMOUNT, SWAY_RATE, VIBRATION_DURATION,
    VIBRATION_INTENSITY,
)

# Lerp factors are expressed per frame at this rate
REFERENCE_FPS = 60.0


@dataclass(eq=False)
class Screw:
    """
    A single screw. Sits on its plate until tapped, then eases into the slot row.

    Ownership is flag based: `plate_id` never changes, `is_in_slot` says
    whether the slot row currently holds it.
    """
    x: float
    y: float
    color: ScrewColor
    offset_x: float = 0.0   # home position relative to the plate's left edge
    radius: float = SCREW_RADIUS
    lerp_speed: float = LERP_SPEED
    id: int = 0
    plate_id: int = 0
    target_x: float = field(init=False)
    target_y: float = field(init=False)
    is_moving: bool = False
    is_in_slot: bool = False

    def __post_init__(self):
        self.target_x = self.x
        self.target_y = self.y

    def update(self, dt: float) -> bool:
        """
        Ease toward the target.
        Returns True on the tick the move animation completes.
        """
        if not self.is_moving:
            return False

        dx = self.target_x - self.x
        dy = self.target_y - self.y

        factor = 1.0 - (1.0 - self.lerp_speed) ** (dt * REFERENCE_FPS)
        self.x += dx * factor
        self.y += dy * factor

        if abs(dx) < SNAP_DISTANCE and abs(dy) < SNAP_DISTANCE:
            self.x = self.target_x
            self.y = self.target_y
            self.is_moving = False
            return True
        return False

    def move_to(self, x: float, y: float) -> None:
        """Start a move animation toward (x, y)."""
        self.target_x = x
        self.target_y = y
        self.is_moving = True

    def contains(self, px: float, py: float) -> bool:
        """Circular hit test."""
        return math.hypot(px - self.x, py - self.y) <= self.radius


class Plate:
    """
    A plate holding a fixed set of screws.

    Sways gently while attached screws remain; falls off the bottom of the
    screen once every screw it was created with has been slotted.
    """

    def __init__(
        self,
        x: float,
        y: float,
        rotation: float = 0.0,
        width: float = PLATE_WIDTH,
        height: float = PLATE_HEIGHT,
        gravity: float = GRAVITY,
        sway_phase: float = 0.0,
        sway_speed: float = 1.0,
        sway_amount: float = SWAY_AMOUNT,
        rng: Optional[random.Random] = None,
    ):
        self.id: int = 0
        self.x = x
        self.y = y
        self.base_x = x
        self.base_y = y
        self.rotation = rotation
        self.width = width
        self.height = height
        self.gravity = gravity
        self.screw_ids: Tuple[int, ...] = ()

        self.velocity_y: float = 0.0
        self.is_falling: bool = False
        self.is_offscreen: bool = False

        self.sway_phase = sway_phase
        self.sway_speed = sway_speed
        self.sway_amount = sway_amount

        self._rng = rng if rng is not None else random.Random()
        self._vibration_start: Optional[float] = None
        self._vibration_origin: float = x

    @property
    def is_vibrating(self) -> bool:
        return self._vibration_start is not None

    def update(self, dt: float, screws: Sequence[Screw], viewport_height: float, now: float) -> None:
        """
        Advance sway or fall by dt seconds.

        `screws` are this plate's live screws; slotted ones are left alone.
        `now` is the game clock used to time the spring vibration.
        """
        if self.is_falling:
            self.velocity_y += self.gravity * dt
            step = self.velocity_y * dt
            self.y += step

            for screw in screws:
                if not screw.is_in_slot:
                    screw.y += step
                    screw.target_y = screw.y

            if self.y > viewport_height + self.height:
                self.is_offscreen = True
            return

        self._update_vibration(now)

        self.sway_phase += SWAY_RATE * self.sway_speed * dt
        sway_offset = math.sin(self.sway_phase) * self.sway_amount
        self.x = self.base_x + sway_offset

        for screw in screws:
            if not screw.is_in_slot:
                screw.x = self.base_x + screw.offset_x + sway_offset
                screw.target_x = screw.x

    def check_empty(self, screws: Sequence[Screw]) -> bool:
        """
        Start falling if every owned screw is slotted.

        `screws` are the plate's screws still in play; destroyed screws were
        slotted before they were matched away, so they count as slotted.
        Returns True only on the tick the plate starts falling.
        """
        if self.is_falling:
            return False
        if any(not s.is_in_slot for s in screws):
            return False
        self.start_falling()
        return True

    def start_falling(self) -> None:
        self.is_falling = True
        self.velocity_y = 0.0
        self._stop_vibration()

    def start_vibration(self, now: float) -> None:
        """Kick off the short spring jitter shown when a screw is pulled."""
        if self.is_falling:
            return
        if self._vibration_start is None:
            self._vibration_origin = self.base_x
        self._vibration_start = now

    def _update_vibration(self, now: float) -> None:
        if self._vibration_start is None:
            return

        elapsed = now - self._vibration_start
        if elapsed > VIBRATION_DURATION:
            self._stop_vibration()
            return

        intensity = VIBRATION_INTENSITY * (1.0 - elapsed / VIBRATION_DURATION)
        self.base_x = self._vibration_origin + (self._rng.random() - 0.5) * intensity

    def _stop_vibration(self) -> None:
        if self._vibration_start is not None:
            self.base_x = self._vibration_origin
            self._vibration_start = None


class EntityStore:
    """
    The single authoritative collection of screws and plates.

    Plates refer to their screws by id and the slot row holds references to
    the same Screw objects, so there is never more than one copy of a screw.
    Iteration order is creation order.
    """

    def __init__(self):
        self.screws: Dict[int, Screw] = {}
        self.plates: Dict[int, Plate] = {}
        self._next_id = 1

    def _allocate_id(self) -> int:
        entity_id = self._next_id
        self._next_id += 1
        return entity_id

    def add_plate(self, plate: Plate, screws: Sequence[Screw]) -> Plate:
        """Register a plate together with the screws it is created with."""
        plate.id = self._allocate_id()
        self.plates[plate.id] = plate
        for screw in screws:
            self.add_screw(screw, plate)
        return plate

    def add_screw(self, screw: Screw, plate: Plate) -> Screw:
        """Register a screw and attach it to an already registered plate."""
        screw.id = self._allocate_id()
        screw.plate_id = plate.id
        self.screws[screw.id] = screw
        plate.screw_ids = plate.screw_ids + (screw.id,)
        return screw

    def remove_screw(self, screw_id: int) -> Optional[Screw]:
        return self.screws.pop(screw_id, None)

    def remove_plate(self, plate_id: int) -> Optional[Plate]:
        return self.plates.pop(plate_id, None)

    def get_screw(self, screw_id: int) -> Optional[Screw]:
        return self.screws.get(screw_id)

    def screws_of(self, plate: Plate) -> List[Screw]:
        """Live screws of a plate (destroyed ones are skipped)."""
        return [self.screws[sid] for sid in plate.screw_ids if sid in self.screws]

    def plate_of(self, screw: Screw) -> Optional[Plate]:
        return self.plates.get(screw.plate_id)

    def unslotted_screws(self) -> List[Screw]:
        return [s for s in self.screws.values() if not s.is_in_slot]

    def iter_screws(self) -> Iterator[Screw]:
        """Iterate over a snapshot so callers may remove while iterating."""
        return iter(list(self.screws.values()))

    def iter_plates(self) -> Iterator[Plate]:
        return iter(list(self.plates.values()))

    def clear(self) -> None:
        self.screws.clear()
        self.plates.clear()

    def __len__(self) -> int:
        return len(self.screws)
