"""Exports run statistics, sweep points and scenario history to disk."""

import json
import logging
from pathlib import Path
from typing import Any

import pandas as pd

from line_sim.config.core import SimulationConfig
from line_sim.product.core import STAGES
from line_sim.simulation.history import ScenarioHistory
from line_sim.simulation.results import SimulationStats
from line_sim.simulation.sensitivity import SensitivityPoint
from line_sim.writers.base import BaseWriter

# Parquet support is optional - only import if available
try:
    import pyarrow as pa
    import pyarrow.parquet as pq

    PARQUET_AVAILABLE = True
except ImportError:
    PARQUET_AVAILABLE = False

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("csv", "parquet")


def wait_times_frame(stats: SimulationStats) -> pd.DataFrame:
    """Long-format wait samples: one row per (stage, wait_minutes)."""
    rows = [
        {"stage": stage.value, "wait_minutes": wait}
        for stage in STAGES
        for wait in stats.wait_times.get(stage, [])
    ]
    return pd.DataFrame(rows, columns=["stage", "wait_minutes"])


def sensitivity_frame(points: list[SensitivityPoint]) -> pd.DataFrame:
    return pd.DataFrame(
        [p.to_dict() for p in points],
        columns=["label", "x_value", "cost", "avg_wait", "variable"],
    )


class ResultsWriter(BaseWriter):
    """
    Writes simulation outputs into one directory.

    summary.json holds KPIs (without raw samples) and the config; tables
    go to CSV by default or Parquet when requested.
    """

    def __init__(self, output_dir: str | Path, output_format: str = "csv") -> None:
        if output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Unknown output format '{output_format}'. "
                f"Expected one of: {', '.join(OUTPUT_FORMATS)}"
            )
        if output_format == "parquet" and not PARQUET_AVAILABLE:
            raise ImportError(
                "pyarrow is required for Parquet support. "
                "Install with: pip install pyarrow"
            )
        super().__init__(output_dir)
        self.output_format = output_format

    def write(self, data: Any, destination: str) -> None:
        """Write a DataFrame or JSON-serialisable object to `destination`."""
        path = self.path_for(destination)
        if isinstance(data, pd.DataFrame):
            if path.suffix == ".parquet":
                pq.write_table(pa.Table.from_pandas(data, preserve_index=False), path)
            else:
                data.to_csv(path, index=False)
        else:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, default=str)
        self._track(path)

    def _table_name(self, stem: str) -> str:
        return f"{stem}.{self.output_format}"

    def write_summary(
        self, stats: SimulationStats, config: SimulationConfig | None = None
    ) -> None:
        summary: dict[str, Any] = {"stats": stats.to_dict(include_samples=False)}
        if config is not None:
            summary["config"] = config.to_dict()
        self.write(summary, "summary.json")

    def write_wait_times(self, stats: SimulationStats) -> None:
        self.write(wait_times_frame(stats), self._table_name("wait_times"))

    def write_sensitivity(self, points: list[SensitivityPoint]) -> None:
        if not points:
            logger.debug("No sensitivity points, skipping sensitivity.csv")
            return
        self.write(sensitivity_frame(points), "sensitivity.csv")

    def write_history(self, history: ScenarioHistory) -> None:
        if not len(history):
            return
        self.write(history.to_frame(), "history.csv")

    def write_run(
        self, stats: SimulationStats, config: SimulationConfig | None = None
    ) -> None:
        """Summary plus raw wait samples for one run or aggregate."""
        self.write_summary(stats, config)
        self.write_wait_times(stats)
