from dataclasses import dataclass
from datetime import datetime

import pandas as pd

from line_sim.config.core import SimulationConfig
from line_sim.simulation.results import SimulationStats

# (label, config field) pairs reported by describe_config_changes, in order
TRACKED_FIELDS = [
    ("Moulding", "moulding_machines"),
    ("Inspection", "inspection_stations"),
    ("Packaging", "packaging_machines"),
    ("Arrival", "arrival_interval_mean"),
]


@dataclass
class ScenarioResult:
    id: int
    timestamp: datetime
    config: SimulationConfig
    stats: SimulationStats
    is_best: bool = False

    @property
    def machine_mix(self) -> str:
        """Moulding-Inspection-Packaging server counts, e.g. '2-2-1'."""
        c = self.config
        return f"{c.moulding_machines}-{c.inspection_stations}-{c.packaging_machines}"


class ScenarioHistory:
    """
    In-memory log of the scenarios run during one session.

    Every record re-marks the lowest cost-per-part scenario(s) as best.
    Nothing is written to disk here; see ResultsWriter for export.
    """

    def __init__(self) -> None:
        self.entries: list[ScenarioResult] = []
        self._next_id = 1

    def record(self, config: SimulationConfig, stats: SimulationStats) -> ScenarioResult:
        entry = ScenarioResult(
            id=self._next_id,
            timestamp=datetime.now(),
            config=config,
            stats=stats,
        )
        self._next_id += 1
        self.entries.append(entry)
        self._mark_best()
        return entry

    def _mark_best(self) -> None:
        min_cost = min(e.stats.avg_degradation_cost_per_part for e in self.entries)
        for e in self.entries:
            e.is_best = e.stats.avg_degradation_cost_per_part == min_cost

    def best(self) -> ScenarioResult | None:
        return next((e for e in self.entries if e.is_best), None)

    def latest(self) -> ScenarioResult | None:
        return self.entries[-1] if self.entries else None

    def to_frame(self) -> pd.DataFrame:
        columns = [
            "id",
            "timestamp",
            "machine_mix",
            "avg_degradation_cost_per_part",
            "throughput",
            "is_best",
        ]
        rows = [
            {
                "id": e.id,
                "timestamp": e.timestamp,
                "machine_mix": e.machine_mix,
                "avg_degradation_cost_per_part": e.stats.avg_degradation_cost_per_part,
                "throughput": e.stats.throughput,
                "is_best": e.is_best,
            }
            for e in self.entries
        ]
        return pd.DataFrame(rows, columns=columns)

    def __len__(self) -> int:
        return len(self.entries)


def describe_config_changes(
    previous: SimulationConfig, current: SimulationConfig
) -> list[str]:
    """
    List tuning-parameter changes as 'Label: old->new' strings.

    Feeds the external advisory layer; empty when nothing tracked changed.
    """
    changes = []
    for label, name in TRACKED_FIELDS:
        old, new = getattr(previous, name), getattr(current, name)
        if old != new:
            changes.append(f"{label}: {old}->{new}")
    return changes
