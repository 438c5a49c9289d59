"""
Game constants - all magic numbers in one place.
NO UI DEPENDENCIES.

Values that players or testers may want to tune live in config.Settings;
the ones here are defaults for those settings plus fixed layout geometry.
"""

# =============================================================================
# SLOT ROW
# =============================================================================
SLOT_COUNT = 5          # slots in the holding row
MATCH_COUNT = 3         # same-colored screws needed to clear
SLOT_SPACING = 60.0     # px between slot centers
SLOT_Y = 40.0           # px from top of the play area
EXTRA_SLOTS = 2         # slots freed by the relief action

# =============================================================================
# SCREWS
# =============================================================================
SCREW_RADIUS = 20.0
LERP_SPEED = 0.15       # fraction of remaining distance covered per 1/60 s
SNAP_DISTANCE = 0.5     # px; closer than this on both axes ends the move
SCREWS_PER_PLATE = 3
SCREW_OFFSET_X = 40.0   # first screw, from plate left edge
SCREW_OFFSET_Y = 25.0
SCREW_SPACING = 60.0

# =============================================================================
# PLATES
# =============================================================================
PLATE_WIDTH = 200.0
PLATE_HEIGHT = 80.0
GRAVITY = 1800.0        # px/s^2
MAX_PLATES = 4

SWAY_AMOUNT = 5.0       # px
SWAY_RATE = 1.2         # rad/s at sway_speed 1.0
SWAY_SPEED_MIN = 0.5
SWAY_SPEED_MAX = 1.0

VIBRATION_DURATION = 0.3   # seconds
VIBRATION_INTENSITY = 3.0  # px

# =============================================================================
# LEVEL LAYOUT
# =============================================================================
LAYOUT_BASE_Y = 120.0
LAYOUT_SPACING_Y = 120.0
LAYOUT_OFFSET_X = 60.0      # left/right shift from level 3
LAYOUT_TILT = 0.1           # radians
PATTERN_START_LEVEL = 3
EXTENDED_PALETTE_LEVEL = 5

# =============================================================================
# TIMING & HEALTH
# =============================================================================
LEVEL_TIME = 60.0           # seconds
COMBO_WINDOW_MS = 5000
MAX_HEALTH = 3
INTERSTITIAL_EVERY = 2      # completed levels between interstitial ads

# =============================================================================
# VIEWPORT
# =============================================================================
SCREEN_WIDTH = 480
SCREEN_HEIGHT = 800
FPS = 60
