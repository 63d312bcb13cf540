"""Simulation configuration dataclasses.

The defaults come from the constant modules in this package. A
``SimulationConfig`` is built once and handed to the manager, the decision
tree builder and the world collaborators; nothing reads configuration from
global state.
"""

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, Mapping, Optional

from protozoa.config import decisions as decision_defaults
from protozoa.config import organisms as organism_defaults
from protozoa.config import world as world_defaults
from protozoa.exceptions import ConfigurationError


@dataclass
class GridConfig:
    """Dimensions of the toroidal cell grid."""

    width: int = world_defaults.GRID_UNITS_WIDE
    height: int = world_defaults.GRID_UNITS_HIGH


@dataclass
class FoodConfig:
    """Food item bounds and spawning."""

    initial_food: int = world_defaults.INITIAL_FOOD
    chance_to_add_food_item: float = world_defaults.CHANCE_TO_ADD_FOOD_ITEM
    max_food_value: float = world_defaults.MAX_FOOD_VALUE
    min_food_value: float = world_defaults.MIN_FOOD_VALUE


@dataclass
class PhConfig:
    """Environment pH bounds."""

    min_ph: float = world_defaults.MIN_PH
    max_ph: float = world_defaults.MAX_PH
    initial_ph: float = world_defaults.INITIAL_PH
    initial_ph_spread: float = world_defaults.INITIAL_PH_SPREAD
    diffuse_factor: float = world_defaults.PH_DIFFUSE_FACTOR


@dataclass
class OrganismConfig:
    """Population limits, growth and trait bounds."""

    initial_organisms: int = organism_defaults.INITIAL_ORGANISMS
    max_organisms: int = organism_defaults.MAX_ORGANISMS
    chance_to_add_organism: float = organism_defaults.CHANCE_TO_ADD_ORGANISM
    decide_workers: int = organism_defaults.DECIDE_WORKERS
    initial_size: float = organism_defaults.INITIAL_SIZE
    growth_factor: float = organism_defaults.GROWTH_FACTOR
    minimum_max_size: float = organism_defaults.MINIMUM_MAX_SIZE
    maximum_max_size: float = organism_defaults.MAXIMUM_MAX_SIZE
    max_cycles_between_spawns: int = organism_defaults.MAX_CYCLES_BETWEEN_SPAWNS
    min_spawn_health: float = organism_defaults.MIN_SPAWN_HEALTH
    max_spawn_health_percent: float = organism_defaults.MAX_SPAWN_HEALTH_PERCENT
    min_chance_to_mutate_decision_tree: float = (
        organism_defaults.MIN_CHANCE_TO_MUTATE_DECISION_TREE
    )
    max_chance_to_mutate_decision_tree: float = (
        organism_defaults.MAX_CHANCE_TO_MUTATE_DECISION_TREE
    )
    min_cycles_to_evaluate_decision_tree: int = (
        organism_defaults.MIN_CYCLES_TO_EVALUATE_DECISION_TREE
    )
    max_cycles_to_evaluate_decision_tree: int = (
        organism_defaults.MAX_CYCLES_TO_EVALUATE_DECISION_TREE
    )
    trait_mutation_rate: float = organism_defaults.TRAIT_MUTATION_RATE
    trait_mutation_strength: float = organism_defaults.TRAIT_MUTATION_STRENGTH
    min_ph_tolerance: float = organism_defaults.MIN_PH_TOLERANCE
    max_ph_tolerance: float = organism_defaults.MAX_PH_TOLERANCE
    min_ph_tolerance_range: float = organism_defaults.MIN_PH_TOLERANCE_RANGE
    max_ph_tolerance_range: float = organism_defaults.MAX_PH_TOLERANCE_RANGE
    min_change_to_ph: float = organism_defaults.MIN_CHANGE_TO_PH
    max_change_to_ph: float = organism_defaults.MAX_CHANGE_TO_PH
    descendants_report_threshold: int = organism_defaults.DESCENDANTS_REPORT_THRESHOLD


@dataclass
class HealthConfig:
    """Health deltas, as fractions of organism size unless noted."""

    change_per_cycle: float = organism_defaults.HEALTH_CHANGE_PER_CYCLE
    change_from_being_idle: float = organism_defaults.HEALTH_CHANGE_FROM_BEING_IDLE
    change_from_turning: float = organism_defaults.HEALTH_CHANGE_FROM_TURNING
    change_from_moving: float = organism_defaults.HEALTH_CHANGE_FROM_MOVING
    change_from_eating_attempt: float = organism_defaults.HEALTH_CHANGE_FROM_EATING_ATTEMPT
    change_from_attacking: float = organism_defaults.HEALTH_CHANGE_FROM_ATTACKING
    change_inflicted_by_attack: float = organism_defaults.HEALTH_CHANGE_INFLICTED_BY_ATTACK
    change_from_feeding: float = organism_defaults.HEALTH_CHANGE_FROM_FEEDING
    change_from_unhealthy_ph: float = organism_defaults.HEALTH_CHANGE_FROM_UNHEALTHY_PH
    # Absolute, multiplied by the number of nodes in the decision tree
    change_per_decision_tree_node: float = (
        organism_defaults.HEALTH_CHANGE_PER_DECISION_TREE_NODE
    )


@dataclass
class DecisionTreeConfig:
    """Decision tree size caps and generation/mutation probabilities."""

    max_tree_size: int = decision_defaults.MAX_DECISION_TREE_SIZE
    max_random_tree_size: int = decision_defaults.MAX_RANDOM_TREE_SIZE
    chance_of_action_leaf: float = decision_defaults.CHANCE_OF_ACTION_LEAF
    chance_to_grow_action: float = decision_defaults.CHANCE_TO_GROW_ACTION
    chance_to_collapse_condition: float = decision_defaults.CHANCE_TO_COLLAPSE_CONDITION

    @property
    def max_evaluation_steps(self) -> int:
        """Hard cap on nodes visited during one evaluation."""
        return self.max_tree_size


_PROBABILITY_FIELDS = {
    "food": ("chance_to_add_food_item",),
    "organisms": (
        "chance_to_add_organism",
        "min_chance_to_mutate_decision_tree",
        "max_chance_to_mutate_decision_tree",
        "trait_mutation_rate",
    ),
    "decisions": (
        "chance_of_action_leaf",
        "chance_to_grow_action",
        "chance_to_collapse_condition",
    ),
}


@dataclass
class SimulationConfig:
    """Complete, explicit configuration for one simulation.

    Attributes:
        grid: Grid dimensions
        food: Food bounds and spawning
        ph: Environment pH bounds
        organisms: Population, growth and trait bounds
        health: Health economy
        decisions: Decision tree caps and probabilities
    """

    grid: GridConfig = field(default_factory=GridConfig)
    food: FoodConfig = field(default_factory=FoodConfig)
    ph: PhConfig = field(default_factory=PhConfig)
    organisms: OrganismConfig = field(default_factory=OrganismConfig)
    health: HealthConfig = field(default_factory=HealthConfig)
    decisions: DecisionTreeConfig = field(default_factory=DecisionTreeConfig)

    @classmethod
    def from_dict(cls, overrides: Optional[Mapping[str, Any]] = None) -> "SimulationConfig":
        """Build a config from defaults plus a nested dict of overrides.

        Example:
            SimulationConfig.from_dict({"grid": {"width": 20, "height": 20}})

        Raises:
            ConfigurationError: On unknown sections or keys, or values of the
                wrong type.
        """
        config = cls()
        for section_name, values in (overrides or {}).items():
            if section_name not in {f.name for f in fields(cls)}:
                raise ConfigurationError(f"Unknown config section '{section_name}'")
            section = getattr(config, section_name)
            if not isinstance(values, Mapping):
                raise ConfigurationError(
                    f"Config section '{section_name}' must be a mapping, got {type(values).__name__}"
                )
            _apply_section(section_name, section, values)
        config.validate()
        return config

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        """Serialize into nested primitives."""
        return asdict(self)

    def validate(self) -> None:
        """Reject inconsistent values.

        Raises:
            ConfigurationError: If any bound or probability is invalid.
        """
        if self.grid.width < 1 or self.grid.height < 1:
            raise ConfigurationError(
                f"Grid must be at least 1x1, got {self.grid.width}x{self.grid.height}"
            )
        if self.food.min_food_value > self.food.max_food_value:
            raise ConfigurationError("food.min_food_value exceeds food.max_food_value")
        if self.ph.min_ph > self.ph.max_ph:
            raise ConfigurationError("ph.min_ph exceeds ph.max_ph")
        if not self.ph.min_ph <= self.ph.initial_ph <= self.ph.max_ph:
            raise ConfigurationError("ph.initial_ph must lie within [min_ph, max_ph]")
        if self.ph.initial_ph_spread < 0:
            raise ConfigurationError("ph.initial_ph_spread must not be negative")
        if not 0.0 <= self.ph.diffuse_factor <= 1.0:
            raise ConfigurationError("ph.diffuse_factor must be within [0, 1]")

        organisms = self.organisms
        if organisms.max_organisms < 0 or organisms.initial_organisms < 0:
            raise ConfigurationError("Organism counts must not be negative")
        if organisms.decide_workers < 1:
            raise ConfigurationError("organisms.decide_workers must be at least 1")
        if organisms.initial_size <= 0:
            raise ConfigurationError("organisms.initial_size must be positive")
        for low, high in (
            ("minimum_max_size", "maximum_max_size"),
            ("min_chance_to_mutate_decision_tree", "max_chance_to_mutate_decision_tree"),
            ("min_cycles_to_evaluate_decision_tree", "max_cycles_to_evaluate_decision_tree"),
            ("min_ph_tolerance", "max_ph_tolerance"),
            ("min_ph_tolerance_range", "max_ph_tolerance_range"),
            ("min_change_to_ph", "max_change_to_ph"),
        ):
            if getattr(organisms, low) > getattr(organisms, high):
                raise ConfigurationError(f"organisms.{low} exceeds organisms.{high}")
        if organisms.max_cycles_between_spawns < 0:
            raise ConfigurationError("organisms.max_cycles_between_spawns must not be negative")
        if organisms.min_cycles_to_evaluate_decision_tree < 1:
            raise ConfigurationError(
                "organisms.min_cycles_to_evaluate_decision_tree must be at least 1"
            )

        if self.decisions.max_tree_size < 1:
            raise ConfigurationError("decisions.max_tree_size must be at least 1")
        if self.decisions.max_random_tree_size < 1:
            raise ConfigurationError("decisions.max_random_tree_size must be at least 1")

        for section_name, names in _PROBABILITY_FIELDS.items():
            section = getattr(self, section_name)
            for name in names:
                value = getattr(section, name)
                if not 0.0 <= value <= 1.0:
                    raise ConfigurationError(
                        f"{section_name}.{name} must be within [0, 1], got {value}"
                    )


def _apply_section(section_name: str, section: Any, values: Mapping[str, Any]) -> None:
    known = {f.name: f for f in fields(section)}
    for key, raw in values.items():
        spec = known.get(key)
        if spec is None:
            raise ConfigurationError(f"Unknown config key '{section_name}.{key}'")
        current = getattr(section, key)
        # bool is an int subclass; never accept it for numeric settings
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            raise ConfigurationError(
                f"Config key '{section_name}.{key}' must be numeric, got {type(raw).__name__}"
            )
        if isinstance(current, int) and not isinstance(raw, int):
            if not float(raw).is_integer():
                raise ConfigurationError(
                    f"Config key '{section_name}.{key}' must be an integer, got {raw}"
                )
            raw = int(raw)
        setattr(section, key, type(current)(raw))
