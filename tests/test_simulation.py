"""End-to-end tests for the Simulation engine and the command line."""

import logging

import orjson
import pytest

import main
from protozoa.logging_config import LOG_LEVEL_ENV_VAR, configure_logging
from protozoa.simulation import Simulation


def _comparable(stats):
    return {key: value for key, value in stats.items() if not key.endswith("_ms")}


class TestSimulation:
    def test_setup_places_initial_population(self, simulation) -> None:
        simulation.setup()

        assert 0 < simulation.organism_count() <= 25
        assert 0 < simulation.food_count() <= 60
        assert simulation.cycle == 0

    def test_run_advances_cycles(self, simulation) -> None:
        stats = simulation.run(40)

        assert stats["cycle"] == 40
        assert stats["organisms"] == simulation.organism_count()
        assert stats["total_organisms_created"] >= stats["organisms"]
        simulation.organisms.verify_occupancy()

    def test_same_seed_same_run(self, make_config) -> None:
        config = make_config(
            grid={"width": 15, "height": 15},
            food={"initial_food": 40, "chance_to_add_food_item": 0.5},
            organisms={"initial_organisms": 15, "chance_to_add_organism": 0.2},
        )

        first = Simulation(config=config, seed=7).run(30)
        second = Simulation(config=config, seed=7).run(30)

        assert _comparable(first) == _comparable(second)

    def test_export_stats_json(self, simulation, tmp_path) -> None:
        simulation.run(5)
        path = tmp_path / "stats.json"

        simulation.export_stats_json(str(path))

        data = orjson.loads(path.read_bytes())
        assert data["seed"] == 42
        assert data["stats"]["cycle"] == 5
        assert data["config"]["grid"]["width"] == 20
        assert "best_all_time" in data["population"]


class TestCommandLine:
    def test_headless_run_with_config_and_export(self, tmp_path) -> None:
        config_path = tmp_path / "small.json"
        config_path.write_bytes(
            orjson.dumps(
                {
                    "grid": {"width": 12, "height": 12},
                    "food": {"initial_food": 20},
                    "organisms": {"initial_organisms": 10},
                }
            )
        )
        export_path = tmp_path / "out.json"

        main.main(
            [
                "--cycles",
                "10",
                "--stats-interval",
                "5",
                "--seed",
                "3",
                "--config",
                str(config_path),
                "--export-stats",
                str(export_path),
                "--log-level",
                "WARNING",
            ]
        )

        data = orjson.loads(export_path.read_bytes())
        assert data["stats"]["cycle"] == 10
        assert data["seed"] == 3

    def test_bad_config_exits(self, tmp_path) -> None:
        config_path = tmp_path / "bad.json"
        config_path.write_bytes(orjson.dumps({"grid": {"width": -1}}))

        with pytest.raises(SystemExit) as excinfo:
            main.main(["--cycles", "1", "--config", str(config_path), "--log-level", "WARNING"])
        assert excinfo.value.code == 2


class TestLogging:
    def test_explicit_level(self) -> None:
        logger = configure_logging(level="debug")

        assert logger.name == "protozoa"
        assert logger.level == logging.DEBUG

    def test_level_from_environment(self, monkeypatch) -> None:
        monkeypatch.setenv(LOG_LEVEL_ENV_VAR, "warning")

        assert configure_logging().level == logging.WARNING

    def test_explicit_level_overrides_environment(self, monkeypatch) -> None:
        monkeypatch.setenv(LOG_LEVEL_ENV_VAR, "warning")

        assert configure_logging(level="error").level == logging.ERROR

    def test_defaults_to_info(self, monkeypatch) -> None:
        monkeypatch.delenv(LOG_LEVEL_ENV_VAR, raising=False)

        assert configure_logging().level == logging.INFO
