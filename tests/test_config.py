"""Tests for SimulationConfig loading and validation."""

import pytest

from protozoa.config import SimulationConfig
from protozoa.exceptions import ConfigurationError


class TestSimulationConfig:
    def test_defaults_are_valid(self) -> None:
        config = SimulationConfig()
        config.validate()

        assert config.grid.width == 280
        assert config.grid.height == 200
        assert config.organisms.max_organisms == 20000
        assert config.health.change_inflicted_by_attack == pytest.approx(-0.5)
        assert config.decisions.max_evaluation_steps == config.decisions.max_tree_size

    def test_from_dict_applies_overrides(self) -> None:
        config = SimulationConfig.from_dict(
            {"grid": {"width": 20, "height": 15}, "organisms": {"growth_factor": 1}}
        )

        assert (config.grid.width, config.grid.height) == (20, 15)
        assert config.organisms.growth_factor == 1.0
        assert isinstance(config.organisms.growth_factor, float)

    def test_integral_float_accepted_for_int_field(self) -> None:
        config = SimulationConfig.from_dict({"grid": {"width": 30.0}})

        assert config.grid.width == 30
        assert isinstance(config.grid.width, int)

    def test_to_dict_round_trip(self) -> None:
        config = SimulationConfig.from_dict({"decisions": {"max_tree_size": 15}})

        assert SimulationConfig.from_dict(config.to_dict()) == config

    @pytest.mark.parametrize(
        "overrides",
        [
            {"planet": {}},
            {"grid": {"depth": 3}},
            {"grid": 5},
            {"grid": {"width": "wide"}},
            {"grid": {"width": True}},
            {"grid": {"width": 2.5}},
        ],
    )
    def test_bad_overrides_rejected(self, overrides) -> None:
        with pytest.raises(ConfigurationError):
            SimulationConfig.from_dict(overrides)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"grid": {"width": 0}},
            {"food": {"min_food_value": 200.0}},
            {"ph": {"initial_ph": 11.0}},
            {"ph": {"diffuse_factor": 1.5}},
            {"organisms": {"decide_workers": 0}},
            {"organisms": {"minimum_max_size": 500.0}},
            {"organisms": {"chance_to_add_organism": 1.5}},
            {"organisms": {"min_cycles_to_evaluate_decision_tree": 0}},
            {
                "organisms": {
                    "min_cycles_to_evaluate_decision_tree": 7,
                    "max_cycles_to_evaluate_decision_tree": 3,
                }
            },
            {"decisions": {"max_tree_size": 0}},
            {"decisions": {"chance_to_grow_action": -0.1}},
        ],
    )
    def test_inconsistent_values_rejected(self, overrides) -> None:
        with pytest.raises(ConfigurationError):
            SimulationConfig.from_dict(overrides)
