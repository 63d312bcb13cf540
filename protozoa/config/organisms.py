"""Organism configuration constants.

Health changes are expressed as a fraction of an organism's size: an
organism of size 10 that moves pays 10 * HEALTH_CHANGE_FROM_MOVING.
"""

# Population
INITIAL_ORGANISMS = 500
MAX_ORGANISMS = 20000
CHANCE_TO_ADD_ORGANISM = 0.05  # Per cycle, while below MAX_ORGANISMS

# Number of threads used for the decide pass (1 = sequential)
DECIDE_WORKERS = 1

# Size and growth
INITIAL_SIZE = 1.0
GROWTH_FACTOR = 0.5
MINIMUM_MAX_SIZE = 10.0
MAXIMUM_MAX_SIZE = 100.0

# Reproduction trait bounds
MAX_CYCLES_BETWEEN_SPAWNS = 100
MIN_SPAWN_HEALTH = 1.0
MAX_SPAWN_HEALTH_PERCENT = 0.5  # Of the organism's max size
MIN_CHANCE_TO_MUTATE_DECISION_TREE = 0.01
MAX_CHANCE_TO_MUTATE_DECISION_TREE = 1.00

# Decision tree evaluation cadence trait bounds: an organism walks its tree
# once every N decide passes and repeats its last action in between
MIN_CYCLES_TO_EVALUATE_DECISION_TREE = 1
MAX_CYCLES_TO_EVALUATE_DECISION_TREE = 100

# Trait mutation when a child inherits from its parent
TRAIT_MUTATION_RATE = 0.1
TRAIT_MUTATION_STRENGTH = 0.05  # Gaussian sigma as a fraction of the trait range

# pH tolerance and influence trait bounds
MIN_PH_TOLERANCE = 0.0
MAX_PH_TOLERANCE = 10.0
MIN_PH_TOLERANCE_RANGE = 1.0
MAX_PH_TOLERANCE_RANGE = 5.0
MIN_CHANGE_TO_PH = -0.05
MAX_CHANGE_TO_PH = 0.05

# =============================================================================
# HEALTH ECONOMY (fractions of size)
# =============================================================================

HEALTH_CHANGE_PER_CYCLE = -0.001
HEALTH_CHANGE_FROM_BEING_IDLE = 0.003
HEALTH_CHANGE_FROM_TURNING = -0.001
HEALTH_CHANGE_FROM_MOVING = -0.03
HEALTH_CHANGE_FROM_EATING_ATTEMPT = -0.01
HEALTH_CHANGE_FROM_ATTACKING = -0.05
HEALTH_CHANGE_INFLICTED_BY_ATTACK = -0.5
HEALTH_CHANGE_FROM_FEEDING = -0.005
HEALTH_CHANGE_FROM_UNHEALTHY_PH = -0.01

# Per node of the organism's decision tree, not scaled by size
HEALTH_CHANGE_PER_DECISION_TREE_NODE = -0.0001

# Lineage report threshold
DESCENDANTS_REPORT_THRESHOLD = 10
