# Default board geometry; callers override through BoardSystem kwargs.
GRID_WIDTH = 8
GRID_HEIGHT = 8
TILE_TYPE_COUNT = 6

# Sentinel tile value for an empty (cleared or out-of-range) cell.
EMPTY = -1

MIN_MATCH_LENGTH = 3

# Draws per cell before the initial fill accepts a value that forms a run.
INITIAL_FILL_MAX_ATTEMPTS = 10

# Power given to freshly created special tiles. Bomb radius is 1 + power.
SPECIAL_TILE_POWER = 1

# Upper bound on cascade passes for one resolve. Only a degenerate spawner
# (e.g. one that always returns the same value) can get near it.
MAX_CASCADE_PASSES = 1000

# Shuffle attempts before falling back to cascading the remaining matches away.
SHUFFLE_MAX_ATTEMPTS = 50

# ============================================================================
# SCORING
# ============================================================================
SCORE_PER_TILE = 10
BONUS_PER_CHAIN = 5
