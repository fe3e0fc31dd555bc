from collections import deque

from line_sim.generators.random_stream import RandomStream
from line_sim.line.core import StageFinish
from line_sim.product.core import Stage
from line_sim.simulation.scheduler import EventScheduler
from line_sim.simulation.state import JobArena


class StagePool:
    """
    A bank of identical servers for one stage with a FIFO wait queue.

    No priorities and no reneging: a job queues until a server frees up.
    A freed server is handed straight to the head of the queue at the same
    instant, before any new arrival can claim it.
    """

    def __init__(
        self,
        stage: Stage,
        server_count: int,
        arena: JobArena,
        scheduler: EventScheduler,
        rng: RandomStream,
    ) -> None:
        self.stage = stage
        self.server_count = server_count
        self.free_servers = server_count
        self.wait_queue: deque[int] = deque()
        self.busy_time = 0.0

        self.arena = arena
        self.scheduler = scheduler
        self.rng = rng

    def service_time(self, job_id: int) -> float:
        job = self.arena.get(job_id)
        return self.rng.exponential(self.stage.service_mean(job.product_type))

    def try_start(self, job_id: int, now: float) -> bool:
        """Dispatch the job if a server is free, else queue it. True if started."""
        if self.free_servers > 0:
            self.free_servers -= 1
            self.arena.get(job_id).start(self.stage, now)
            self.scheduler.schedule(
                StageFinish(
                    time=now + self.service_time(job_id),
                    stage=self.stage,
                    job_id=job_id,
                )
            )
            return True

        self.wait_queue.append(job_id)
        return False

    def finish(self, job_id: int, now: float) -> None:
        job = self.arena.get(job_id)
        job.end(self.stage, now)
        self.busy_time += now - job.start_times[self.stage]
        self.free_servers += 1

        if self.wait_queue:
            self.try_start(self.wait_queue.popleft(), now)

    @property
    def queue_length(self) -> int:
        return len(self.wait_queue)

    @property
    def busy_servers(self) -> int:
        return self.server_count - self.free_servers
