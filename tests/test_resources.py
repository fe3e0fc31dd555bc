import pytest

from line_sim.generators import RandomStream
from line_sim.line.core import StageFinish
from line_sim.product.core import ProductType, Stage
from line_sim.simulation.resources import StagePool
from line_sim.simulation.scheduler import EventScheduler
from line_sim.simulation.state import JobArena


@pytest.fixture
def arena() -> JobArena:
    arena = JobArena()
    arena.create(ProductType.TYPE_A, 0.0)
    arena.create(ProductType.TYPE_B, 1.0)
    arena.create(ProductType.TYPE_C, 2.0)
    return arena


def make_pool(arena: JobArena, servers: int) -> tuple[StagePool, EventScheduler]:
    scheduler = EventScheduler()
    pool = StagePool(Stage.MOULDING, servers, arena, scheduler, RandomStream(42))
    return pool, scheduler


def test_arena_ids_are_stable(arena: JobArena):
    assert len(arena) == 3
    assert [j.id for j in arena] == [1, 2, 3]
    assert arena.get(2).product_type == ProductType.TYPE_B
    with pytest.raises(KeyError):
        arena.get(4)
    with pytest.raises(KeyError):
        arena.get(0)


def test_try_start_dispatches_when_free(arena: JobArena):
    pool, scheduler = make_pool(arena, servers=1)

    assert pool.try_start(1, 0.0) is True
    assert pool.free_servers == 0
    assert arena.get(1).start_time(Stage.MOULDING) == 0.0

    event = scheduler.next()
    assert isinstance(event, StageFinish)
    assert event.stage == Stage.MOULDING
    assert event.job_id == 1
    assert event.time >= 0.0


def test_busy_pool_queues_fifo(arena: JobArena):
    pool, _ = make_pool(arena, servers=1)
    pool.try_start(1, 2.0)

    assert pool.try_start(2, 2.0) is False
    assert pool.try_start(3, 2.0) is False
    assert list(pool.wait_queue) == [2, 3]
    assert arena.get(2).start_time(Stage.MOULDING) is None


def test_finish_hands_server_to_queue_head(arena: JobArena):
    pool, scheduler = make_pool(arena, servers=1)
    pool.try_start(1, 2.0)
    pool.try_start(2, 2.0)
    pool.try_start(3, 2.0)
    scheduler.next()

    pool.finish(1, 9.0)

    assert arena.get(1).end_time(Stage.MOULDING) == 9.0
    assert pool.busy_time == pytest.approx(7.0)
    # Server went straight to job 2, no idle gap
    assert arena.get(2).start_time(Stage.MOULDING) == 9.0
    assert pool.free_servers == 0
    assert list(pool.wait_queue) == [3]

    follow_up = scheduler.next()
    assert isinstance(follow_up, StageFinish)
    assert follow_up.job_id == 2


def test_finish_with_empty_queue_frees_server(arena: JobArena):
    pool, _ = make_pool(arena, servers=2)
    pool.try_start(1, 0.0)
    pool.try_start(2, 1.0)
    assert pool.busy_servers == 2

    pool.finish(2, 4.0)
    assert pool.free_servers == 1
    assert pool.busy_time == pytest.approx(3.0)


def test_pool_without_servers_never_dispatches(arena: JobArena):
    pool, scheduler = make_pool(arena, servers=0)
    for job_id in (1, 2, 3):
        assert pool.try_start(job_id, 5.0) is False
    assert pool.queue_length == 3
    assert len(scheduler) == 0
