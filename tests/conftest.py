from typing import Any

import pytest

from line_sim.product.core import STAGES, Stage
from line_sim.simulation.results import ConfidenceInterval, SimulationStats, WaitStats


def build_stats(**overrides: Any) -> SimulationStats:
    """Synthetic single-run stats; KPI fields can be overridden by name."""
    lead = overrides.pop("avg_lead_time", 20.0)
    cost = overrides.pop("avg_degradation_cost_per_part", 1.0)
    fields: dict[str, Any] = {
        "total_jobs": 10,
        "completed_jobs": 8,
        "throughput": 1.0,
        "avg_wip": 2.0,
        "service_level": 0.5,
        "avg_lead_time": lead,
        "lead_time_ci": ConfidenceInterval.point(lead),
        "total_degradation_cost": cost * 10,
        "avg_degradation_cost_per_part": cost,
        "cost_ci": ConfidenceInterval.point(cost),
        "wait_times": {stage: [] for stage in STAGES},
        "wait_stats": {stage: WaitStats() for stage in STAGES},
        "machine_utilization": {stage: 0.5 for stage in STAGES},
    }
    fields.update(overrides)
    return SimulationStats(**fields)


@pytest.fixture
def make_stats():
    return build_stats


@pytest.fixture
def sample_stats() -> SimulationStats:
    return build_stats(
        wait_times={
            Stage.MOULDING: [0.0, 5.0, 12.0],
            Stage.INSPECTION: [3.0, 0.0],
            Stage.PACKAGING: [0.0],
        },
        wait_stats={
            Stage.MOULDING: WaitStats(avg=17 / 3, p90=12.0, max=12.0),
            Stage.INSPECTION: WaitStats(avg=1.5, p90=3.0, max=3.0),
            Stage.PACKAGING: WaitStats(),
        },
    )
