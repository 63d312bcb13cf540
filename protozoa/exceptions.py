"""Protozoa exception hierarchy.

Centralised base classes so callers can tell configuration mistakes apart
from simulation defects. Capacity failures (no room to spawn) and clamped
amounts are reported through return values, never through these classes.
"""


class ProtozoaError(Exception):
    """Root of all Protozoa domain exceptions."""


class ConfigurationError(ProtozoaError):
    """Invalid or missing configuration."""


class SimulationError(ProtozoaError):
    """Errors during simulation execution (manager, organisms, world)."""


class DecisionTreeError(SimulationError):
    """A decision tree was generated, mutated or evaluated into a bad state.

    These are defects in tree generation or mutation. They are never
    recovered from inside a tick.
    """


class MalformedSequenceError(DecisionTreeError):
    """A flat node sequence does not describe a complete binary tree."""


class IncompleteConditionError(DecisionTreeError):
    """A condition node is missing one of its two children."""


class EvaluationStepLimitError(DecisionTreeError):
    """Tree evaluation walked more nodes than the configured cap."""
