"""World configuration constants: grid dimensions, food and pH."""

# Grid dimensions in cells
GRID_UNITS_WIDE = 280
GRID_UNITS_HIGH = 200

# =============================================================================
# FOOD
# =============================================================================
# Food is stored per grid cell. Adding clamps at MAX_FOOD_VALUE, removing
# drops the item once what is left falls below MIN_FOOD_VALUE.

INITIAL_FOOD = 5000
CHANCE_TO_ADD_FOOD_ITEM = 0.5  # Per cycle
MAX_FOOD_VALUE = 100.0
MIN_FOOD_VALUE = 2.0

# =============================================================================
# ENVIRONMENT (pH)
# =============================================================================

MIN_PH = 0.0
MAX_PH = 10.0
INITIAL_PH = 5.0
INITIAL_PH_SPREAD = 5.0  # Cells start uniformly within INITIAL_PH +/- spread
PH_DIFFUSE_FACTOR = 0.0  # Share of the neighbour mean blended in per cycle; 0 disables
