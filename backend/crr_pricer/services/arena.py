from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

import numpy as np

from crr_pricer.services.errors import InvalidArgument, ResourceExhausted

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArenaWindows:
    """Three disjoint views of length steps + 1 into one arena buffer."""

    underlying: np.ndarray
    option: np.ndarray
    schedule: np.ndarray


def required_capacity(steps: int) -> int:
    return 3 * (steps + 1)


class Arena:
    """Reusable float64 working memory for lattice pricing.

    Policy is chosen per instance:
      - growable (default): `acquire` grows the buffer before handing out
        views. Views from earlier calls are invalidated by growth.
      - fixed: `acquire` raises ResourceExhausted when the buffer is too small.

    An arena is not safe for concurrent use. Every call overwrites the part
    of the windows it reads, so nothing leaks from one call into the next.
    """

    def __init__(self, capacity: int = 0, *, growable: bool = True) -> None:
        if capacity < 0:
            raise InvalidArgument("arena capacity must be >= 0")
        self.growable = growable
        self._buffer = np.empty(int(capacity), dtype=float)

    @property
    def capacity(self) -> int:
        return int(self._buffer.shape[0])

    def resize(self, capacity: int) -> None:
        """Reallocate to exactly `capacity` slots, invalidating earlier views."""
        if capacity < 0:
            raise InvalidArgument("arena capacity must be >= 0")
        if capacity != self.capacity:
            logger.info("Resizing arena from %d to %d slots", self.capacity, capacity)
            self._buffer = np.empty(int(capacity), dtype=float)

    def reset(self) -> None:
        """Release the buffer (e.g. between benchmark sweeps)."""
        self.resize(0)

    def acquire(self, steps: int) -> ArenaWindows:
        if steps < 1:
            raise InvalidArgument("steps must be >= 1")

        needed = required_capacity(steps)
        if needed > self.capacity:
            if not self.growable:
                raise ResourceExhausted(required=needed, available=self.capacity)
            # Grow before any view exists for this call.
            self.resize(max(needed, 2 * self.capacity))

        width = steps + 1
        buf = self._buffer
        return ArenaWindows(
            underlying=buf[0:width],
            option=buf[width : 2 * width],
            schedule=buf[2 * width : 3 * width],
        )


class ThreadArenas:
    """One arena per calling thread, owned by whoever creates this object.

    A web app creates one of these at startup and injects `get()` into
    request handlers, so worker threads never share windows.
    """

    def __init__(self, capacity: int = 0, *, growable: bool = True) -> None:
        self._capacity = capacity
        self._growable = growable
        self._local = threading.local()

    def get(self) -> Arena:
        arena = getattr(self._local, "arena", None)
        if arena is None:
            arena = Arena(self._capacity, growable=self._growable)
            self._local.arena = arena
            logger.debug("Created arena for thread %s", threading.current_thread().name)
        return arena
