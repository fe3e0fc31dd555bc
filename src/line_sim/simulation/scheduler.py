import heapq
import itertools

from line_sim.line.core import SimEvent


class EventScheduler:
    """
    Pending-event list backed by a binary min-heap.

    Events are ordered by timestamp. Events sharing a timestamp come out in
    the order they were scheduled; the heap key carries a monotonically
    increasing sequence number for that purpose.
    """

    def __init__(self) -> None:
        self._heap: list[tuple[float, int, SimEvent]] = []
        self._sequence = itertools.count()

    def schedule(self, event: SimEvent) -> None:
        heapq.heappush(self._heap, (event.time, next(self._sequence), event))

    def next(self) -> SimEvent | None:
        """Remove and return the earliest event, or None when empty."""
        if not self._heap:
            return None
        _, _, event = heapq.heappop(self._heap)
        return event

    def peek(self) -> SimEvent | None:
        if not self._heap:
            return None
        return self._heap[0][2]

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)
