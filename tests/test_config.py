import json

import pytest

from line_sim.config.core import InvalidConfigError, SimulationConfig
from line_sim.config.loader import load_config, load_simulation_config
from line_sim.product.core import Stage


def test_defaults_are_valid():
    config = SimulationConfig()
    assert config.validate() is config
    assert config.duration == 480.0
    assert config.machines_for(Stage.MOULDING) == 2
    assert config.machines_for(Stage.INSPECTION) == 2
    assert config.machines_for(Stage.PACKAGING) == 1


def test_from_dict_accepts_camel_case():
    config = SimulationConfig.from_dict(
        {
            "duration": 240,
            "mouldingMachines": 3,
            "inspectionStations": 4,
            "packagingMachines": 2,
            "arrivalIntervalMean": 6,
            "degradationCostPerMinute": 1.0,
            "degradationThreshold": 2,
            "replications": 5,
            "seed": 9,
        }
    )
    assert config.moulding_machines == 3
    assert config.inspection_stations == 4
    assert config.packaging_machines == 2
    assert config.arrival_interval_mean == 6
    assert config.degradation_threshold == 2
    assert config.seed == 9


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(InvalidConfigError, match="unknown field 'speed'"):
        SimulationConfig.from_dict({"speed": 3})


def test_with_overrides_rejects_unknown_fields():
    with pytest.raises(InvalidConfigError, match="unknown field 'stations'"):
        SimulationConfig().with_overrides(stations=3)


def test_with_machines_leaves_original_alone():
    base = SimulationConfig()
    changed = base.with_machines(Stage.INSPECTION, 7)
    assert changed.inspection_stations == 7
    assert base.inspection_stations == 2


@pytest.mark.parametrize(
    "overrides",
    [
        {"duration": 0},
        {"moulding_machines": 0},
        {"packaging_machines": 1.5},
        {"inspection_stations": True},
        {"arrival_interval_mean": -1},
        {"degradation_cost_per_minute": -0.5},
        {"degradation_threshold": -1},
        {"replications": 0},
        {"seed": "42"},
        {"duration": float("nan")},
        {"duration": float("inf")},
        {"arrival_interval_mean": float("nan")},
        {"arrival_interval_mean": float("inf")},
        {"degradation_cost_per_minute": float("nan")},
        {"degradation_threshold": float("inf")},
    ],
)
def test_validate_rejects_bad_values(overrides):
    with pytest.raises(InvalidConfigError) as exc_info:
        SimulationConfig(**overrides).validate()
    assert len(exc_info.value.errors) == 1


def test_validate_collects_every_problem():
    with pytest.raises(InvalidConfigError) as exc_info:
        SimulationConfig(duration=-1, arrival_interval_mean=0, replications=0).validate()
    assert len(exc_info.value.errors) == 3
    assert isinstance(exc_info.value, ValueError)


def test_zero_cost_and_threshold_are_allowed():
    SimulationConfig(degradation_cost_per_minute=0, degradation_threshold=0).validate()


def test_default_file_matches_dataclass_defaults():
    assert SimulationConfig.from_dict(load_simulation_config()) == SimulationConfig()


def test_load_config_ignores_none_overrides(tmp_path):
    path = tmp_path / "line.json"
    path.write_text(json.dumps({"inspectionStations": 3, "seed": 5}))

    config = load_config(path, seed=None, packaging_machines=2)
    assert config.inspection_stations == 3
    assert config.seed == 5
    assert config.packaging_machines == 2


def test_load_config_validates(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"duration": 0}))
    with pytest.raises(InvalidConfigError):
        load_config(path)


def test_load_rejects_non_dict(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2, 3]")
    with pytest.raises(TypeError):
        load_simulation_config(path)


def test_load_config_rejects_unknown_override(tmp_path):
    path = tmp_path / "line.json"
    path.write_text(json.dumps({"seed": 5}))
    with pytest.raises(InvalidConfigError) as exc_info:
        load_config(path, seed=7, conveyor_speed=2)
    assert exc_info.value.errors == ["unknown field 'conveyor_speed'"]
