"""
Single-run event loop for the Moulding -> Inspection -> Packaging line.

One SingleRunSimulator owns its random stream, scheduler, job arena and the
three stage pools; nothing is shared between runs, so replications can be
executed in any order or in separate processes.
"""

import logging

from line_sim.config.core import SimulationConfig
from line_sim.generators.random_stream import RandomStream
from line_sim.line.core import Arrival, SimEvent, StageFinish
from line_sim.product.core import PRODUCT_TYPES, STAGES, Stage
from line_sim.simulation.resources import StagePool
from line_sim.simulation.results import SimulationStats
from line_sim.simulation.scheduler import EventScheduler
from line_sim.simulation.state import JobArena
from line_sim.simulation.statistics import RunStatisticsCalculator

logger = logging.getLogger(__name__)


class SingleRunSimulator:
    """The discrete-event state machine for one replication."""

    def __init__(self, config: SimulationConfig, trace_wip: bool = False) -> None:
        self.config = config
        self.trace_wip = trace_wip
        self._reset()

    def _reset(self) -> None:
        self.rng = RandomStream(self.config.seed)
        self.scheduler = EventScheduler()
        self.arena = JobArena()
        self.pools: dict[Stage, StagePool] = {
            stage: StagePool(
                stage,
                self.config.machines_for(stage),
                self.arena,
                self.scheduler,
                self.rng,
            )
            for stage in STAGES
        }

        self.now = 0.0
        self.current_wip = 0
        self.wip_area = 0.0
        self.events_processed = 0
        self._last_event_time = 0.0
        # (time, wip after the event) pairs, only filled when trace_wip is set
        self.wip_trace: list[tuple[float, int]] = [(0.0, 0)]

    def run(self) -> SimulationStats:
        """Run the event loop to the configured duration and compute KPIs."""
        self._reset()
        duration = self.config.duration
        logger.debug(
            "Starting run: seed=%s, duration=%s min", self.config.seed, duration
        )

        self.scheduler.schedule(
            Arrival(time=self.rng.exponential(self.config.arrival_interval_mean))
        )

        while self.scheduler:
            upcoming = self.scheduler.peek()
            if upcoming is None or upcoming.time >= duration:
                break
            event = self.scheduler.next()
            if event is None:
                break
            self._advance_clock(event.time)
            self._process_event(event)
            self.events_processed += 1
            if self.trace_wip:
                self.wip_trace.append((self.now, self.current_wip))

        # Close the WIP integral at the end of the horizon
        self.wip_area += self.current_wip * (duration - self._last_event_time)
        self._last_event_time = duration

        stats = RunStatisticsCalculator(self.config).calculate(
            self.arena.jobs,
            {stage: pool.busy_time for stage, pool in self.pools.items()},
            self.wip_area,
        )
        logger.debug(
            "Run complete: seed=%s, events=%d, jobs=%d, completed=%d",
            self.config.seed,
            self.events_processed,
            stats.total_jobs,
            stats.completed_jobs,
        )
        return stats

    def _advance_clock(self, event_time: float) -> None:
        # Area uses the WIP level held during the interval just elapsed
        self.wip_area += self.current_wip * (event_time - self._last_event_time)
        self._last_event_time = event_time
        self.now = event_time

    def _process_event(self, event: SimEvent) -> None:
        if isinstance(event, Arrival):
            self._handle_arrival()
        elif isinstance(event, StageFinish):
            self._handle_finish(event.stage, event.job_id)
        else:
            raise TypeError(f"Unknown event {event!r}")

    def _handle_arrival(self) -> None:
        self.current_wip += 1
        product_type = self.rng.choice(PRODUCT_TYPES)
        job_id = self.arena.create(product_type, self.now)

        next_arrival = self.now + self.rng.exponential(self.config.arrival_interval_mean)
        if next_arrival < self.config.duration:
            self.scheduler.schedule(Arrival(time=next_arrival))

        self.pools[Stage.MOULDING].try_start(job_id, self.now)

    def _handle_finish(self, stage: Stage, job_id: int) -> None:
        self.pools[stage].finish(job_id, self.now)

        next_stage = stage.next_stage
        if next_stage is None:
            self.arena.mark_finished(job_id)
            self.current_wip -= 1
        else:
            self.pools[next_stage].try_start(job_id, self.now)


def simulate_once(config: SimulationConfig) -> SimulationStats:
    """Run one replication with config.seed. Module level so it pickles."""
    return SingleRunSimulator(config).run()
