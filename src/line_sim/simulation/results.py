from dataclasses import dataclass, field
from typing import Any

from line_sim.product.core import STAGES, Stage


@dataclass(frozen=True)
class WaitStats:
    """Summary of a wait-time sample, in minutes."""

    avg: float = 0.0
    p90: float = 0.0
    max: float = 0.0

    def to_dict(self) -> dict[str, float]:
        return {"avg": self.avg, "p90": self.p90, "max": self.max}


@dataclass(frozen=True)
class ConfidenceInterval:
    """95% interval for a KPI across replications."""

    mean: float
    lower: float
    upper: float

    @classmethod
    def point(cls, value: float) -> "ConfidenceInterval":
        """Degenerate interval for a single run (no cross-run variance)."""
        return cls(mean=value, lower=value, upper=value)

    @property
    def half_width(self) -> float:
        return self.upper - self.mean

    def contains(self, value: float) -> bool:
        return self.lower <= value <= self.upper

    def to_dict(self) -> dict[str, float]:
        return {"mean": self.mean, "lower": self.lower, "upper": self.upper}


def _by_stage(values: dict[Stage, Any]) -> dict[str, Any]:
    return {stage.value: values[stage] for stage in STAGES if stage in values}


@dataclass(frozen=True)
class SimulationStats:
    """
    KPI snapshot of one run or of an aggregate over replications.

    This is the only object handed to consumers (dashboard, writers, CLI).
    """

    total_jobs: int
    completed_jobs: int

    throughput: float  # Completed jobs per hour
    avg_wip: float
    service_level: float  # Share of inspection waits under 5 minutes

    avg_lead_time: float
    lead_time_ci: ConfidenceInterval

    total_degradation_cost: float
    avg_degradation_cost_per_part: float
    cost_ci: ConfidenceInterval

    # Raw samples are concatenated across replications for histograms
    wait_times: dict[Stage, list[float]] = field(default_factory=dict)
    wait_stats: dict[Stage, WaitStats] = field(default_factory=dict)
    machine_utilization: dict[Stage, float] = field(default_factory=dict)

    replications: int = 1

    def to_dict(self, include_samples: bool = True) -> dict[str, Any]:
        data: dict[str, Any] = {
            "total_jobs": self.total_jobs,
            "completed_jobs": self.completed_jobs,
            "throughput": self.throughput,
            "avg_wip": self.avg_wip,
            "service_level": self.service_level,
            "avg_lead_time": self.avg_lead_time,
            "lead_time_ci": self.lead_time_ci.to_dict(),
            "total_degradation_cost": self.total_degradation_cost,
            "avg_degradation_cost_per_part": self.avg_degradation_cost_per_part,
            "cost_ci": self.cost_ci.to_dict(),
            "wait_stats": {
                k: v.to_dict() for k, v in _by_stage(self.wait_stats).items()
            },
            "machine_utilization": _by_stage(self.machine_utilization),
            "replications": self.replications,
        }
        if include_samples:
            data["wait_times"] = {
                k: list(v) for k, v in _by_stage(self.wait_times).items()
            }
        return data
