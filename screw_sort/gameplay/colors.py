"""
Screw color palette.
NO UI DEPENDENCIES.
"""
from enum import Enum
from typing import List, Tuple

from .constants import EXTENDED_PALETTE_LEVEL


class ScrewColor(Enum):
    """Screw colors. Values are the hex strings used for drawing."""
    RED = '#ff3b3b'
    BLUE = '#3b9eff'
    YELLOW = '#ffd93b'
    GREEN = '#4CAF50'
    PURPLE = '#9C27B0'
    ORANGE = '#FF9800'
    PINK = '#E91E63'

    @property
    def rgb(self) -> Tuple[int, int, int]:
        """Return the color as an (r, g, b) tuple."""
        value = self.value.lstrip('#')
        return (int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))


BASE_COLORS: Tuple[ScrewColor, ...] = (
    ScrewColor.RED,
    ScrewColor.BLUE,
    ScrewColor.YELLOW,
)

EXTENDED_COLORS: Tuple[ScrewColor, ...] = BASE_COLORS + (
    ScrewColor.GREEN,
    ScrewColor.PURPLE,
    ScrewColor.ORANGE,
    ScrewColor.PINK,
)


def available_colors(level: int) -> List[ScrewColor]:
    """Colors in play for a level: 3 base colors, all 7 from level 5."""
    if level >= EXTENDED_PALETTE_LEVEL:
        return list(EXTENDED_COLORS)
    return list(BASE_COLORS)
