"""RNG utilities for deterministic simulation.

Every component that draws random numbers receives an explicit
``random.Random`` instance from the simulation. These helpers fail loudly
if one is missing instead of silently creating an unseeded fallback.
"""

import random
from typing import Optional

from protozoa.exceptions import SimulationError


class MissingRNGError(SimulationError):
    """Raised when an RNG is required but not available.

    This error indicates a bug in the simulation setup - the manager, the
    decision tree builder and the world collaborators should all share the
    simulation's RNG.
    """


def require_rng_param(rng: Optional[random.Random], context: str) -> random.Random:
    """Validate that an RNG parameter was provided, failing loudly if not.

    Args:
        rng: The RNG that should have been provided
        context: Description of where this is called from (for error messages)

    Returns:
        The validated RNG

    Raises:
        MissingRNGError: If rng is None

    Example:
        def __init__(self, rng: Optional[random.Random] = None):
            self.rng = require_rng_param(rng, "FoodManager.__init__")
    """
    if rng is None:
        raise MissingRNGError(f"RNG required: {context}. Pass the simulation RNG explicitly.")
    return rng
