"""
Level generation - difficulty curve to plate/screw layout.
NO UI DEPENDENCIES.

Everything here is a pure function of its arguments so reloading a
level always produces the same layout.
"""
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .colors import ScrewColor, available_colors
from .constants import (
    LAYOUT_BASE_Y, LAYOUT_OFFSET_X, LAYOUT_SPACING_Y, LAYOUT_TILT, MAX_PLATES,
    PATTERN_START_LEVEL, PLATE_WIDTH, SCREW_OFFSET_X, SCREW_OFFSET_Y,
    SCREW_SPACING, SCREWS_PER_PLATE,
)


@dataclass(frozen=True)
class PlateLayout:
    """Where one plate goes and what it carries."""
    x: float
    y: float
    rotation: float
    color: ScrewColor
    screw_offsets: Tuple[Tuple[float, float], ...]

    @property
    def screw_positions(self) -> List[Tuple[float, float]]:
        """Absolute screw positions for this plate."""
        return [(self.x + dx, self.y + dy) for dx, dy in self.screw_offsets]


@dataclass(frozen=True)
class LevelLayout:
    """Complete layout for one level."""
    level: int
    plates: Tuple[PlateLayout, ...]

    @property
    def screw_count(self) -> int:
        return sum(len(p.screw_offsets) for p in self.plates)

    @property
    def colors(self) -> List[ScrewColor]:
        return [p.color for p in self.plates]


def plate_count(level: int) -> int:
    """Two plates to start, one more every 3 levels, capped at 4."""
    return min(2 + level // 3, MAX_PLATES)


def plate_pattern(index: int, center_x: float, level: int) -> Tuple[float, float, float]:
    """
    Return (x, y, rotation) for the plate at `index`.

    Early levels stack plates down the middle. From level 3 plates
    alternate left and right with a slight tilt so they overlap.
    """
    y = LAYOUT_BASE_Y + index * LAYOUT_SPACING_Y
    x = center_x - PLATE_WIDTH / 2

    if level >= PATTERN_START_LEVEL:
        if index % 2 == 0:
            return (x - LAYOUT_OFFSET_X, y, -LAYOUT_TILT)
        return (x + LAYOUT_OFFSET_X, y, LAYOUT_TILT)

    return (x, y, 0.0)


def screw_offsets(count: int = SCREWS_PER_PLATE) -> Tuple[Tuple[float, float], ...]:
    """Screw positions relative to a plate's top-left corner."""
    return tuple(
        (SCREW_OFFSET_X + j * SCREW_SPACING, SCREW_OFFSET_Y)
        for j in range(count)
    )


def generate_level(
    level: int,
    center_x: float,
    palette: Optional[Sequence[ScrewColor]] = None,
) -> LevelLayout:
    """
    Build the layout for a level.

    Each plate is a single color; plate i takes palette[i % len(palette)].
    `palette` defaults to the colors unlocked at this level.
    """
    colors = list(palette) if palette is not None else available_colors(level)
    offsets = screw_offsets()

    plates: List[PlateLayout] = []
    for i in range(plate_count(level)):
        x, y, rotation = plate_pattern(i, center_x, level)
        plates.append(PlateLayout(
            x=x,
            y=y,
            rotation=rotation,
            color=colors[i % len(colors)],
            screw_offsets=offsets,
        ))

    return LevelLayout(level=level, plates=tuple(plates))
