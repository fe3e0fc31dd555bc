import enum
from dataclasses import dataclass, field
from typing import Union

from line_sim.product.core import ProductType, Stage


@dataclass
class Job:
    """
    A single part travelling Moulding -> Inspection -> Packaging.

    Stage timestamps are absent until the job is dispatched into (start) or
    released from (end) a stage. Each is stamped exactly once.
    """

    id: int
    product_type: ProductType
    arrival_time: float

    start_times: dict[Stage, float] = field(default_factory=dict)
    end_times: dict[Stage, float] = field(default_factory=dict)
    finished: bool = False

    def start(self, stage: Stage, now: float) -> None:
        if stage in self.start_times:
            raise ValueError(f"Job {self.id} already started {stage.value}")
        previous = stage.previous_stage
        ready_at = self.arrival_time if previous is None else self.end_times.get(previous)
        if ready_at is None or now < ready_at:
            raise ValueError(
                f"Job {self.id} cannot start {stage.value} at {now} "
                f"(ready at {ready_at})"
            )
        self.start_times[stage] = now

    def end(self, stage: Stage, now: float) -> None:
        started = self.start_times.get(stage)
        if started is None:
            raise ValueError(f"Job {self.id} never started {stage.value}")
        if stage in self.end_times:
            raise ValueError(f"Job {self.id} already finished {stage.value}")
        self.end_times[stage] = now

    def start_time(self, stage: Stage) -> float | None:
        return self.start_times.get(stage)

    def end_time(self, stage: Stage) -> float | None:
        return self.end_times.get(stage)

    def wait_before(self, stage: Stage) -> float | None:
        """Queueing delay in front of a stage, None if the job never reached it."""
        started = self.start_times.get(stage)
        if started is None:
            return None
        previous = stage.previous_stage
        ready_at = self.arrival_time if previous is None else self.end_times.get(previous)
        if ready_at is None:
            return None
        return started - ready_at

    @property
    def lead_time(self) -> float | None:
        """Arrival to packaging completion, None until the job is finished."""
        if not self.finished:
            return None
        return self.end_times[Stage.PACKAGING] - self.arrival_time


class EventType(enum.Enum):
    ARRIVAL = "arrival"
    MOULDING_FINISH = "moulding_finish"
    INSPECTION_FINISH = "inspection_finish"
    PACKAGING_FINISH = "packaging_finish"


FINISH_EVENT_TYPES = {
    Stage.MOULDING: EventType.MOULDING_FINISH,
    Stage.INSPECTION: EventType.INSPECTION_FINISH,
    Stage.PACKAGING: EventType.PACKAGING_FINISH,
}


@dataclass(frozen=True)
class Arrival:
    """A new part enters the line."""

    time: float

    @property
    def type(self) -> EventType:
        return EventType.ARRIVAL


@dataclass(frozen=True)
class StageFinish:
    """A server at `stage` completes the job it holds."""

    time: float
    stage: Stage
    job_id: int

    @property
    def type(self) -> EventType:
        return FINISH_EVENT_TYPES[self.stage]


SimEvent = Union[Arrival, StageFinish]
