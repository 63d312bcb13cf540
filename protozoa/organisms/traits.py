"""Inherited organism traits.

Traits are fixed for an organism's life. A root organism draws them
uniformly within the configured bounds; a child copies its parent's
traits and then mutates each one with some probability (Gaussian noise for
continuous traits, a -1/0/+1 shift for discrete ones).
"""

from __future__ import annotations

import random
from dataclasses import asdict, dataclass
from typing import Any, Dict, List

from protozoa.config.simulation_config import OrganismConfig


@dataclass(frozen=True)
class TraitSpec:
    """Declarative bounds for one trait.

    Attributes:
        name: Attribute name on ``OrganismTraits``
        min_val: Minimum allowed value
        max_val: Maximum allowed value
        discrete: Whether this is a discrete (int) or continuous (float) trait
    """

    name: str
    min_val: float
    max_val: float
    discrete: bool = False

    def random_value(self, rng: random.Random) -> Any:
        if self.discrete:
            return rng.randint(int(self.min_val), int(self.max_val))
        return rng.uniform(self.min_val, self.max_val)

    def mutate(self, value: Any, rng: random.Random, *, rate: float, strength: float) -> Any:
        """Mutate a value and clamp it back into bounds.

        ``strength`` is the Gaussian sigma as a fraction of the trait range.
        """
        if self.discrete:
            return mutate_discrete_trait(
                int(value), int(self.min_val), int(self.max_val), rate, rng
            )
        sigma = strength * (self.max_val - self.min_val)
        return mutate_continuous_trait(
            float(value), self.min_val, self.max_val, rate, sigma, rng
        )


def mutate_continuous_trait(
    value: float,
    min_val: float,
    max_val: float,
    mutation_rate: float,
    mutation_strength: float,
    rng: random.Random,
) -> float:
    """Mutate a continuous trait value with Gaussian noise.

    Returns:
        Mutated value, clamped to [min_val, max_val]
    """
    if rng.random() < mutation_rate:
        value += rng.gauss(0, mutation_strength)
    return max(min_val, min(max_val, value))


def mutate_discrete_trait(
    value: int,
    min_val: int,
    max_val: int,
    mutation_rate: float,
    rng: random.Random,
) -> int:
    """Mutate a discrete trait value by random shift of -1, 0 or +1."""
    if rng.random() < mutation_rate:
        value += rng.choice([-1, 0, 1])
    return max(min_val, min(max_val, value))


def organism_trait_specs(config: OrganismConfig) -> List[TraitSpec]:
    """Trait bounds for a given configuration.

    ``spawn_health`` and ``min_health_to_spawn`` are further constrained
    relative to ``max_size`` once all traits are drawn.
    """
    spawn_health_cap = config.max_spawn_health_percent * config.maximum_max_size
    return [
        TraitSpec("max_size", config.minimum_max_size, config.maximum_max_size),
        TraitSpec(
            "spawn_health",
            config.min_spawn_health,
            max(config.min_spawn_health, spawn_health_cap),
        ),
        TraitSpec("min_health_to_spawn", config.min_spawn_health, config.maximum_max_size),
        TraitSpec(
            "min_cycles_between_spawns", 0, config.max_cycles_between_spawns, discrete=True
        ),
        TraitSpec(
            "chance_to_mutate_decision_tree",
            config.min_chance_to_mutate_decision_tree,
            config.max_chance_to_mutate_decision_tree,
        ),
        TraitSpec(
            "cycles_to_evaluate_decision_tree",
            config.min_cycles_to_evaluate_decision_tree,
            config.max_cycles_to_evaluate_decision_tree,
            discrete=True,
        ),
        TraitSpec("ph_tolerance_min", config.min_ph_tolerance, config.max_ph_tolerance),
        TraitSpec(
            "ph_tolerance_range", config.min_ph_tolerance_range, config.max_ph_tolerance_range
        ),
        TraitSpec("ph_effect", config.min_change_to_ph, config.max_change_to_ph),
    ]


@dataclass(frozen=True)
class OrganismTraits:
    """Numeric parameters an organism inherits from its parent.

    Attributes:
        max_size: Size the organism can grow to
        spawn_health: Health handed to each child (and lost by the parent)
        min_health_to_spawn: Health required before a Spawn action is attempted
        min_cycles_between_spawns: Cooldown between successful spawns
        chance_to_mutate_decision_tree: Probability a child's tree is mutated
        cycles_to_evaluate_decision_tree: Decide passes between walks of the
            decision tree; the tree upkeep is only paid when it is walked
        ph_tolerance_min: Lowest pH the organism tolerates
        ph_tolerance_range: Width of the tolerated pH band
        ph_effect: pH change the organism applies to its cell each cycle
    """

    max_size: float
    spawn_health: float
    min_health_to_spawn: float
    min_cycles_between_spawns: int
    chance_to_mutate_decision_tree: float
    cycles_to_evaluate_decision_tree: int
    ph_tolerance_min: float
    ph_tolerance_range: float
    ph_effect: float

    @property
    def ph_tolerance_max(self) -> float:
        return self.ph_tolerance_min + self.ph_tolerance_range

    def tolerates_ph(self, ph: float) -> bool:
        return self.ph_tolerance_min <= ph <= self.ph_tolerance_max

    @classmethod
    def random(cls, rng: random.Random, config: OrganismConfig) -> "OrganismTraits":
        """Draw every trait uniformly within its bounds."""
        values = {spec.name: spec.random_value(rng) for spec in organism_trait_specs(config)}
        return cls(**_constrain(values, config))

    def mutated(self, rng: random.Random, config: OrganismConfig) -> "OrganismTraits":
        """Copy these traits for a child, mutating each with some probability."""
        values = {
            spec.name: spec.mutate(
                getattr(self, spec.name),
                rng,
                rate=config.trait_mutation_rate,
                strength=config.trait_mutation_strength,
            )
            for spec in organism_trait_specs(config)
        }
        return OrganismTraits(**_constrain(values, config))

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["ph_tolerance_max"] = self.ph_tolerance_max
        return data


def _constrain(values: Dict[str, Any], config: OrganismConfig) -> Dict[str, Any]:
    max_size = values["max_size"]
    spawn_health = min(values["spawn_health"], config.max_spawn_health_percent * max_size)
    values["spawn_health"] = max(config.min_spawn_health, spawn_health)
    values["min_health_to_spawn"] = max(
        values["spawn_health"], min(values["min_health_to_spawn"], max_size)
    )
    return values
