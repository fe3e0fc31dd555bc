"""
Replication driver and the public `run(config)` entry point.

Replication k (0-indexed) runs with seed base_seed + k. Per-run stats are
combined into cross-run means and 95% confidence intervals; raw wait
samples are concatenated for histogram rendering downstream.
"""

import concurrent.futures
import logging
from collections.abc import Callable

from line_sim.config.core import SimulationConfig
from line_sim.product.core import STAGES, Stage
from line_sim.simulation.engine import simulate_once
from line_sim.simulation.monitor import confidence_interval, mean, round_half_up
from line_sim.simulation.results import SimulationStats, WaitStats

logger = logging.getLogger(__name__)


def replication_seeds(config: SimulationConfig) -> list[int]:
    """Seeds base, base+1, ..., base+N-1 (deterministic, not random)."""
    return [config.seed + i for i in range(config.replications)]


def aggregate_results(runs: list[SimulationStats]) -> SimulationStats:
    """
    Combine per-replication stats.

    A single run is returned verbatim. Otherwise scalar KPIs are averaged,
    lead time and cost-per-part get 95% intervals, wait avg/p90 are the
    mean of each run's value and wait max is the max of each run's max.
    """
    if not runs:
        raise ValueError("At least one replication is required to aggregate")
    if len(runs) == 1:
        return runs[0]

    def avg(extract: Callable[[SimulationStats], float]) -> float:
        return mean([extract(s) for s in runs])

    def combine_wait_stats(stage: Stage) -> WaitStats:
        return WaitStats(
            avg=avg(lambda s: s.wait_stats[stage].avg),
            p90=avg(lambda s: s.wait_stats[stage].p90),
            max=max(s.wait_stats[stage].max for s in runs),
        )

    wait_times: dict[Stage, list[float]] = {stage: [] for stage in STAGES}
    for s in runs:
        for stage in STAGES:
            wait_times[stage].extend(s.wait_times.get(stage, []))

    return SimulationStats(
        total_jobs=round_half_up(avg(lambda s: s.total_jobs)),
        completed_jobs=round_half_up(avg(lambda s: s.completed_jobs)),
        throughput=avg(lambda s: s.throughput),
        avg_wip=avg(lambda s: s.avg_wip),
        service_level=avg(lambda s: s.service_level),
        avg_lead_time=avg(lambda s: s.avg_lead_time),
        lead_time_ci=confidence_interval([s.avg_lead_time for s in runs]),
        total_degradation_cost=avg(lambda s: s.total_degradation_cost),
        avg_degradation_cost_per_part=avg(lambda s: s.avg_degradation_cost_per_part),
        cost_ci=confidence_interval([s.avg_degradation_cost_per_part for s in runs]),
        wait_times=wait_times,
        wait_stats={stage: combine_wait_stats(stage) for stage in STAGES},
        machine_utilization={
            stage: avg(lambda s: s.machine_utilization[stage])
            for stage in STAGES
        },
        replications=len(runs),
    )


class ReplicationAggregator:
    """
    Runs N independent single-run simulators and merges their stats.

    With workers > 1 replications run in a process pool. executor.map yields
    results in submission order, so the aggregate matches the sequential one.
    """

    def __init__(self, config: SimulationConfig, workers: int | None = None) -> None:
        self.config = config
        self.workers = workers

    def replication_configs(self) -> list[SimulationConfig]:
        return [
            self.config.with_overrides(seed=seed, replications=1)
            for seed in replication_seeds(self.config)
        ]

    def run_replications(self) -> list[SimulationStats]:
        configs = self.replication_configs()
        logger.info(
            "Running %d replication(s) from seed %s", len(configs), self.config.seed
        )

        if self.workers and self.workers > 1 and len(configs) > 1:
            with concurrent.futures.ProcessPoolExecutor(
                max_workers=self.workers
            ) as executor:
                results = list(executor.map(simulate_once, configs))
        else:
            results = []
            for cfg in configs:
                logger.debug("Replication seed=%s", cfg.seed)
                results.append(simulate_once(cfg))
        return results

    def run(self) -> SimulationStats:
        return aggregate_results(self.run_replications())


def run(config: SimulationConfig, workers: int | None = None) -> SimulationStats:
    """
    Simulate the line for `config` and return its KPI snapshot.

    Pure function of the config: the same config (seed included) always
    yields identical stats. Raises InvalidConfigError before any
    replication starts if the config is not runnable.
    """
    config.validate()
    return ReplicationAggregator(config, workers=workers).run()
