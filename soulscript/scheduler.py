"""Callback scheduler

Time-ordered queue behind the ``scheduleCallback`` built-in. Time is
simulation time, advanced by the interpreter once per tick, so scheduled
callbacks are deterministic and replayable. Callbacks due at the same time
fire in the order they were scheduled.
"""

import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


logger = logging.getLogger(__name__)


@dataclass
class ScheduledCallback:
    """A method call waiting for its due time"""
    callback_id: int
    scheduled_time: float
    sequence: int
    component_name: str
    method_name: str
    args: List[Any] = field(default_factory=list)
    cancelled: bool = False

    def __lt__(self, other):
        """Used by the priority queue"""
        if self.scheduled_time != other.scheduled_time:
            return self.scheduled_time < other.scheduled_time
        return self.sequence < other.sequence


@dataclass
class SchedulerStats:
    total_scheduled: int = 0
    fired: int = 0
    cancelled: int = 0
    pending: int = 0
    simulation_time: float = 0.0


class CallbackScheduler:
    """Simulation-time scheduler for component method callbacks"""

    def __init__(self, max_callbacks_per_tick: int = 100):
        self.current_time: float = 0.0
        self.max_callbacks_per_tick = max_callbacks_per_tick

        self.queue: List[ScheduledCallback] = []
        self.active: Dict[int, ScheduledCallback] = {}
        self._ids = itertools.count(1)
        self._sequence = itertools.count()

        self.stats = SchedulerStats()

    def schedule(self, delay: float, component_name: str, method_name: str,
                 args: Optional[List[Any]] = None) -> int:
        """Queue ``method_name`` on ``component_name`` to run ``delay`` seconds from now

        Negative delays are treated as zero. Returns the callback id.
        """
        callback_id = next(self._ids)
        callback = ScheduledCallback(
            callback_id=callback_id,
            scheduled_time=self.current_time + max(0.0, delay),
            sequence=next(self._sequence),
            component_name=component_name,
            method_name=method_name,
            args=list(args or []),
        )
        heapq.heappush(self.queue, callback)
        self.active[callback_id] = callback
        self.stats.total_scheduled += 1
        self.stats.pending += 1
        logger.debug("Scheduled %s.%s at t=%.3f", component_name, method_name, callback.scheduled_time)
        return callback_id

    def cancel(self, callback_id: int) -> bool:
        # lazy removal; pop_due skips cancelled entries
        callback = self.active.pop(callback_id, None)
        if callback is None:
            return False
        callback.cancelled = True
        self.stats.cancelled += 1
        self.stats.pending -= 1
        return True

    def advance_time(self, delta_time: float):
        self.current_time += delta_time
        self.stats.simulation_time = self.current_time

    def pop_due(self, limit: Optional[int] = None) -> List[ScheduledCallback]:
        """Remove and return callbacks due at the current time

        At most ``limit`` (default ``max_callbacks_per_tick``) are returned;
        the rest stay queued for the next tick.
        """
        if limit is None:
            limit = self.max_callbacks_per_tick

        due = []
        while self.queue and self.queue[0].scheduled_time <= self.current_time and len(due) < limit:
            callback = heapq.heappop(self.queue)
            if callback.cancelled:
                continue
            self.active.pop(callback.callback_id, None)
            self.stats.fired += 1
            self.stats.pending -= 1
            due.append(callback)
        return due

    def pending(self) -> List[ScheduledCallback]:
        return sorted(cb for cb in self.queue if not cb.cancelled)

    def reset(self):
        self.current_time = 0.0
        self.queue.clear()
        self.active.clear()
        self._ids = itertools.count(1)
        self._sequence = itertools.count()
        self.stats = SchedulerStats()

    def __len__(self) -> int:
        return len(self.active)
