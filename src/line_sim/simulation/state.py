from collections.abc import Iterator

from line_sim.line.core import Job
from line_sim.product.core import ProductType


class JobArena:
    """
    Owns every job created during one run.

    Jobs are addressed by a stable integer id (1, 2, 3, ... in creation
    order). Stage pools and events hold ids, never job objects, and all
    mutation goes through the arena.
    """

    def __init__(self) -> None:
        self._jobs: list[Job] = []

    def create(self, product_type: ProductType, arrival_time: float) -> int:
        job_id = len(self._jobs) + 1
        self._jobs.append(
            Job(id=job_id, product_type=product_type, arrival_time=arrival_time)
        )
        return job_id

    def get(self, job_id: int) -> Job:
        if not 1 <= job_id <= len(self._jobs):
            raise KeyError(f"Unknown job id {job_id}")
        return self._jobs[job_id - 1]

    def mark_finished(self, job_id: int) -> None:
        self.get(job_id).finished = True

    @property
    def jobs(self) -> list[Job]:
        return list(self._jobs)

    def completed(self) -> list[Job]:
        return [j for j in self._jobs if j.finished]

    def __len__(self) -> int:
        return len(self._jobs)

    def __iter__(self) -> Iterator[Job]:
        return iter(self._jobs)
