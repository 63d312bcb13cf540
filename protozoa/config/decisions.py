"""Decision tree configuration constants."""

# Hard cap on tree node count; mutations that would grow past it fall back
# to value-only changes.
MAX_DECISION_TREE_SIZE = 31

# Cap on random trees generated for root organisms
MAX_RANDOM_TREE_SIZE = 7

# Probability that a randomly generated (sub)tree is a single action leaf
CHANCE_OF_ACTION_LEAF = 0.5

# Probabilities used by the mutator
CHANCE_TO_GROW_ACTION = 0.5
CHANCE_TO_COLLAPSE_CONDITION = 0.5
