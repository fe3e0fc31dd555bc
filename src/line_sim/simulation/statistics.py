from collections.abc import Iterable

from line_sim.config.core import SimulationConfig
from line_sim.line.core import Job
from line_sim.product.core import STAGES, Stage
from line_sim.simulation.monitor import mean, safe_div, summarize_waits
from line_sim.simulation.results import ConfidenceInterval, SimulationStats

# Inspection waits below this many minutes count as good service
SERVICE_LEVEL_THRESHOLD = 5.0
MINUTES_PER_HOUR = 60.0


class RunStatisticsCalculator:
    """
    Turns the jobs and busy times of one finished run into KPIs.

    Degradation cost only accrues on the wait in front of inspection and
    only past the grace threshold. The per-part average divides by every
    job created, finished or not.
    """

    def __init__(self, config: SimulationConfig) -> None:
        self.config = config

    def wait_samples(self, jobs: Iterable[Job]) -> dict[Stage, list[float]]:
        waits: dict[Stage, list[float]] = {stage: [] for stage in STAGES}
        for job in jobs:
            for stage in STAGES:
                wait = job.wait_before(stage)
                if wait is not None:
                    waits[stage].append(wait)
        return waits

    def degradation_cost(self, inspection_waits: Iterable[float]) -> float:
        total = 0.0
        for wait in inspection_waits:
            chargeable = max(0.0, wait - self.config.degradation_threshold)
            total += chargeable * self.config.degradation_cost_per_minute
        return total

    def utilization(self, busy_time: float, server_count: int) -> float:
        return safe_div(busy_time, self.config.duration * server_count)

    def calculate(
        self,
        jobs: list[Job],
        busy_times: dict[Stage, float],
        wip_area: float,
    ) -> SimulationStats:
        duration = self.config.duration
        completed = [j for j in jobs if j.finished]

        waits = self.wait_samples(jobs)
        inspection_waits = waits[Stage.INSPECTION]

        total_cost = self.degradation_cost(inspection_waits)
        avg_cost = safe_div(total_cost, len(jobs))

        lead_times = [j.lead_time for j in completed if j.lead_time is not None]
        avg_lead = mean(lead_times)

        good_service = sum(1 for w in inspection_waits if w < SERVICE_LEVEL_THRESHOLD)

        return SimulationStats(
            total_jobs=len(jobs),
            completed_jobs=len(completed),
            throughput=safe_div(len(completed), duration / MINUTES_PER_HOUR),
            avg_wip=safe_div(wip_area, duration),
            service_level=safe_div(good_service, len(inspection_waits)),
            avg_lead_time=avg_lead,
            lead_time_ci=ConfidenceInterval.point(avg_lead),
            total_degradation_cost=total_cost,
            avg_degradation_cost_per_part=avg_cost,
            cost_ci=ConfidenceInterval.point(avg_cost),
            wait_times=waits,
            wait_stats={stage: summarize_waits(waits[stage]) for stage in STAGES},
            machine_utilization={
                stage: self.utilization(
                    busy_times.get(stage, 0.0), self.config.machines_for(stage)
                )
                for stage in STAGES
            },
            replications=1,
        )
