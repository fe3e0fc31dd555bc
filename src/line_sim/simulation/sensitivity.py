"""
Sensitivity sweep: vary one stage's server count and watch cost and wait.

Each sweep point is an independent `run` of an explicit config copy; the
caller's config is never modified.
"""

import concurrent.futures
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from line_sim.config.core import SimulationConfig
from line_sim.product.core import Stage
from line_sim.simulation.replication import run
from line_sim.simulation.results import SimulationStats

logger = logging.getLogger(__name__)

SWEEP_VALUES = range(1, 11)
# Replications are capped per point to keep a sweep affordable
MAX_SWEEP_REPLICATIONS = 5


@dataclass(frozen=True)
class SensitivityPoint:
    """One row of a sweep: the KPIs at a given server count."""

    label: str
    x_value: int
    cost: float  # Average degradation cost per part
    avg_wait: float  # Average wait in front of the swept stage
    variable: Stage

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "x_value": self.x_value,
            "cost": self.cost,
            "avg_wait": self.avg_wait,
            "variable": self.variable.value,
        }


@dataclass
class SensitivityResult:
    variable: Stage
    baseline: SimulationStats  # Full-replication run of the unmodified config
    points: list[SensitivityPoint] = field(default_factory=list)

    def best_point(self) -> SensitivityPoint | None:
        """Lowest cost point; ties go to the smaller server count."""
        if not self.points:
            return None
        return min(self.points, key=lambda p: (p.cost, p.x_value))


def _as_stage(variable: Stage | str) -> Stage:
    if isinstance(variable, Stage):
        return variable
    try:
        return Stage(str(variable).lower())
    except ValueError:
        raise ValueError(
            f"Unknown sweep variable '{variable}'. "
            f"Expected one of: {', '.join(s.value for s in Stage)}"
        ) from None


def sweep_configs(
    config: SimulationConfig, stage: Stage, values: Sequence[int] = SWEEP_VALUES
) -> list[SimulationConfig]:
    """One config per swept value with only that stage's count overridden."""
    base = config.with_overrides(
        replications=min(config.replications, MAX_SWEEP_REPLICATIONS)
    )
    return [base.with_machines(stage, value) for value in values]


def _point(stage: Stage, value: int, stats: SimulationStats) -> SensitivityPoint:
    return SensitivityPoint(
        label=f"{value}",
        x_value=value,
        cost=stats.avg_degradation_cost_per_part,
        avg_wait=stats.wait_stats[stage].avg,
        variable=stage,
    )


def run_sensitivity(
    config: SimulationConfig,
    variable: Stage | str,
    values: Sequence[int] = SWEEP_VALUES,
    workers: int | None = None,
) -> list[SensitivityPoint]:
    """
    Sweep a stage's server count over `values` (1..10 by default).

    Returns one SensitivityPoint per value, in ascending value order.
    """
    stage = _as_stage(variable)
    config.validate()
    configs = sweep_configs(config, stage, values)

    if workers and workers > 1 and len(configs) > 1:
        with concurrent.futures.ProcessPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(run, configs))
    else:
        results = [run(cfg) for cfg in configs]

    points = []
    for value, stats in zip(values, results):
        point = _point(stage, value, stats)
        logger.debug(
            "Sweep %s=%d: cost/part=%.3f, avg wait=%.3f",
            stage.value,
            value,
            point.cost,
            point.avg_wait,
        )
        points.append(point)
    return sorted(points, key=lambda p: p.x_value)


def analyze_sensitivity(
    config: SimulationConfig,
    variable: Stage | str,
    values: Sequence[int] = SWEEP_VALUES,
    workers: int | None = None,
) -> SensitivityResult:
    """Sweep plus a full-replication baseline run of the unmodified config."""
    stage = _as_stage(variable)
    points = run_sensitivity(config, stage, values, workers=workers)
    baseline = run(config, workers=workers)
    logger.info("Sensitivity sweep over %s finished (%d points)", stage.value, len(points))
    return SensitivityResult(variable=stage, points=points, baseline=baseline)
