"""
Slot row - the fixed-capacity holding area screws are tapped into.
NO UI DEPENDENCIES.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional

from .colors import ScrewColor
from .constants import MATCH_COUNT, SCREEN_WIDTH, SLOT_COUNT, SLOT_SPACING, SLOT_Y
from .entities import Screw


@dataclass
class Slot:
    """One position in the slot row. Holds at most one screw."""
    x: float
    y: float
    screw: Optional[Screw] = None

    def is_empty(self) -> bool:
        return self.screw is None


class SlotRow:
    """
    The row of slots at the top of the play area.

    Occupied slots are always packed into the lowest indices; the only
    time a gap exists is inside remove_matched / release_last, which
    compact before returning.
    """

    def __init__(
        self,
        capacity: int = SLOT_COUNT,
        match_count: int = MATCH_COUNT,
        viewport_width: float = SCREEN_WIDTH,
        spacing: float = SLOT_SPACING,
        slot_y: float = SLOT_Y,
    ):
        self.capacity = capacity
        self.match_count = match_count
        self.spacing = spacing
        self.slot_y = slot_y
        self.slots: List[Slot] = []
        self.relayout(viewport_width)

    # =========================================================================
    # LAYOUT
    # =========================================================================

    def relayout(self, viewport_width: float) -> None:
        """
        Recompute slot positions for a viewport width.
        Occupants are kept and retargeted to their slot's new position.
        """
        total_width = self.capacity * self.spacing
        start_x = (viewport_width - total_width) / 2 + self.spacing / 2

        occupants = [slot.screw for slot in self.slots] if self.slots else [None] * self.capacity
        self.slots = [
            Slot(x=start_x + i * self.spacing, y=self.slot_y, screw=occupants[i])
            for i in range(self.capacity)
        ]
        for slot in self.slots:
            if slot.screw is not None:
                slot.screw.move_to(slot.x, slot.y)

    # =========================================================================
    # PLACEMENT
    # =========================================================================

    def try_place(self, screw: Screw) -> bool:
        """
        Put a screw into the lowest empty slot and start its move animation.
        Returns False (and changes nothing) if every slot is taken.
        """
        for slot in self.slots:
            if slot.is_empty():
                slot.screw = screw
                screw.is_in_slot = True
                screw.move_to(slot.x, slot.y)
                return True
        return False

    def is_full(self) -> bool:
        return all(not slot.is_empty() for slot in self.slots)

    # =========================================================================
    # MATCHING
    # =========================================================================

    def check_match(self) -> Optional[ScrewColor]:
        """
        Return the first color, in slot order, with at least match_count
        screws in the row, or None.
        """
        screws = self.screws()
        if len(screws) < self.match_count:
            return None

        counts: Dict[ScrewColor, int] = {}
        for screw in screws:
            counts[screw.color] = counts.get(screw.color, 0) + 1

        # dicts keep insertion order, so this follows first appearance in the row
        for color, count in counts.items():
            if count >= self.match_count:
                return color
        return None

    def remove_matched(self, color: ScrewColor) -> List[Screw]:
        """
        Take up to match_count screws of `color` out of the row, lowest
        index first, then compact. Returns the removed screws.
        """
        removed: List[Screw] = []
        for slot in self.slots:
            if len(removed) >= self.match_count:
                break
            if slot.screw is not None and slot.screw.color == color:
                removed.append(slot.screw)
                slot.screw = None

        self.compact()
        return removed

    def release_last(self, count: int) -> List[Screw]:
        """
        Free the `count` highest-indexed occupied slots and compact.
        Returns the released screws, highest index first.
        """
        released: List[Screw] = []
        for slot in reversed(self.slots):
            if len(released) >= count:
                break
            if slot.screw is not None:
                released.append(slot.screw)
                slot.screw = None

        self.compact()
        return released

    def compact(self) -> None:
        """Shift remaining screws down to fill gaps, retargeting each one."""
        screws = self.screws()

        for slot in self.slots:
            slot.screw = None

        for slot, screw in zip(self.slots, screws):
            slot.screw = screw
            screw.move_to(slot.x, slot.y)

    # =========================================================================
    # QUERIES
    # =========================================================================

    def screws(self) -> List[Screw]:
        """Occupants in slot order."""
        return [slot.screw for slot in self.slots if slot.screw is not None]

    def occupied_count(self) -> int:
        return sum(1 for slot in self.slots if slot.screw is not None)

    def index_of(self, screw: Screw) -> Optional[int]:
        for i, slot in enumerate(self.slots):
            if slot.screw is screw:
                return i
        return None

    def clear(self) -> None:
        for slot in self.slots:
            slot.screw = None

    def __len__(self) -> int:
        return self.capacity
