from __future__ import annotations

import logging
import threading
import time
from collections import deque
from typing import Callable, Deque, List, Tuple

logger = logging.getLogger(__name__)

Task = Callable[[], None]


class Scheduler:
    """Runs a task once, possibly after a delay. Scheduled tasks are never cancelled."""

    def schedule(self, task: Task, delay: float = 0.0) -> None:
        raise NotImplementedError


class ImmediateScheduler(Scheduler):
    """Runs every task straight away, ignoring the delay."""

    def schedule(self, task: Task, delay: float = 0.0) -> None:
        task()


class ManualScheduler(Scheduler):
    """Queues tasks until the owner calls run_pending()."""

    def __init__(self) -> None:
        self._queue: Deque[Tuple[Task, float]] = deque()

    @property
    def pending(self) -> int:
        return len(self._queue)

    def schedule(self, task: Task, delay: float = 0.0) -> None:
        self._queue.append((task, delay))

    def run_pending(self, limit: int = 1) -> int:
        """Runs up to ``limit`` queued tasks (tasks they enqueue wait for the next call)."""
        ran = 0
        batch: List[Task] = []
        while self._queue and len(batch) < limit:
            batch.append(self._queue.popleft()[0])
        for task in batch:
            task()
            ran += 1
        return ran

    def run_all(self, max_tasks: int = 128) -> int:
        ran = 0
        while self._queue and ran < max_tasks:
            ran += self.run_pending(1)
        return ran


class TimerScheduler(Scheduler):
    """Runs each task on a daemon threading.Timer; a lock keeps tasks from overlapping."""

    def __init__(self, scale: float = 1.0) -> None:
        self.scale = scale
        self._lock = threading.Lock()
        self._timers: List[threading.Timer] = []

    def schedule(self, task: Task, delay: float = 0.0) -> None:
        def _run() -> None:
            with self._lock:
                task()

        wait = max(0.0, delay * self.scale)
        logger.debug("scheduling task in %.2fs", wait)
        timer = threading.Timer(wait, _run)
        timer.daemon = True
        self._timers = [t for t in self._timers if t.is_alive()]
        self._timers.append(timer)
        timer.start()

    def join(self, timeout: float = 5.0) -> bool:
        """Waits for every timer started so far, including ones started by running tasks.

        Returns False if timers were still alive when ``timeout`` ran out.
        """
        deadline = time.monotonic() + timeout
        while True:
            alive = [t for t in self._timers if t.is_alive()]
            if not alive:
                return True
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            alive[0].join(remaining)
