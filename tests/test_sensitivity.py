import pytest

from line_sim.config.core import SimulationConfig
from line_sim.product.core import Stage
from line_sim.simulation.replication import run
from line_sim.simulation.sensitivity import (
    MAX_SWEEP_REPLICATIONS,
    SensitivityPoint,
    SensitivityResult,
    analyze_sensitivity,
    run_sensitivity,
    sweep_configs,
)


@pytest.fixture
def config() -> SimulationConfig:
    return SimulationConfig(seed=7)


def test_sweep_configs_override_only_the_swept_stage(config):
    configs = sweep_configs(config, Stage.PACKAGING)
    assert [c.packaging_machines for c in configs] == list(range(1, 11))
    for c in configs:
        assert c.moulding_machines == config.moulding_machines
        assert c.inspection_stations == config.inspection_stations
        assert c.seed == config.seed
    assert config.packaging_machines == 1


def test_sweep_caps_replications(config):
    configs = sweep_configs(config.with_overrides(replications=12), Stage.MOULDING)
    assert all(c.replications == MAX_SWEEP_REPLICATIONS for c in configs)

    configs = sweep_configs(config.with_overrides(replications=2), Stage.MOULDING)
    assert all(c.replications == 2 for c in configs)


def test_run_sensitivity_shape(config):
    points = run_sensitivity(config, "inspection")
    assert len(points) == 10
    assert [p.x_value for p in points] == list(range(1, 11))
    assert [p.label for p in points] == [str(v) for v in range(1, 11)]
    assert all(p.variable == Stage.INSPECTION for p in points)


def test_points_match_direct_runs(config):
    points = run_sensitivity(config, Stage.MOULDING, values=[1, 3])
    for point in points:
        stats = run(config.with_machines(Stage.MOULDING, point.x_value))
        assert point.cost == stats.avg_degradation_cost_per_part
        assert point.avg_wait == stats.wait_stats[Stage.MOULDING].avg


def test_unknown_variable(config):
    with pytest.raises(ValueError, match="Unknown sweep variable"):
        run_sensitivity(config, "welding")


def test_more_inspection_stations_cost_less():
    """One overloaded station against ten idle ones, over a few replications."""
    config = SimulationConfig(replications=3, seed=42)
    points = run_sensitivity(config, Stage.INSPECTION)
    assert points[0].cost > points[-1].cost
    assert points[0].avg_wait > points[-1].avg_wait


def test_parallel_sweep_matches_sequential(config):
    values = [1, 2, 3]
    assert run_sensitivity(config, Stage.PACKAGING, values, workers=2) == run_sensitivity(
        config, Stage.PACKAGING, values
    )


def test_analyze_sensitivity_includes_baseline(config):
    result = analyze_sensitivity(config, "Packaging", values=[1, 2])
    assert result.variable == Stage.PACKAGING
    assert len(result.points) == 2
    assert result.baseline == run(config)


def test_best_point_prefers_fewer_servers(make_stats):
    points = [
        SensitivityPoint("1", 1, cost=5.0, avg_wait=9.0, variable=Stage.PACKAGING),
        SensitivityPoint("2", 2, cost=0.0, avg_wait=1.0, variable=Stage.PACKAGING),
        SensitivityPoint("3", 3, cost=0.0, avg_wait=0.5, variable=Stage.PACKAGING),
    ]
    baseline = make_stats()
    result = SensitivityResult(variable=Stage.PACKAGING, baseline=baseline, points=points)
    assert result.best_point().x_value == 2
    assert SensitivityResult(variable=Stage.PACKAGING, baseline=baseline).best_point() is None


def test_point_to_dict():
    point = SensitivityPoint("4", 4, cost=1.25, avg_wait=3.0, variable=Stage.MOULDING)
    assert point.to_dict() == {
        "label": "4",
        "x_value": 4,
        "cost": 1.25,
        "avg_wait": 3.0,
        "variable": "moulding",
    }
