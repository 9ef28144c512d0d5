"""Single-threaded background scheduler.

All network work (polling and mutations) runs on one worker thread, one
task at a time, in submission order. Repeating tasks are re-queued a fixed
delay after each run finishes. Cancelling a repeating task stops future
runs but never interrupts a run that is already in progress.
"""

import heapq
import itertools
import logging
import threading
import time
from collections.abc import Callable
from typing import Protocol

logger = logging.getLogger(__name__)

Task = Callable[[], None]


class Cancellable(Protocol):
    """Handle to a scheduled repeating task."""

    def cancel(self) -> None: ...


class Executor(Protocol):
    """What the sync core needs from a background scheduler."""

    def execute(self, fn: Task) -> None: ...

    def schedule_with_fixed_delay(
        self, fn: Task, initial_delay: float, delay: float
    ) -> Cancellable: ...

    def shutdown(self) -> None: ...


class ScheduledTask:
    """Handle to a repeating task on a TaskScheduler."""

    def __init__(self, fn: Task, delay: float) -> None:
        self._fn = fn
        self._delay = delay
        self._cancelled = threading.Event()

    @property
    def delay(self) -> float:
        """Return the delay between runs in seconds."""
        return self._delay

    @property
    def cancelled(self) -> bool:
        """Return True if the task was cancelled."""
        return self._cancelled.is_set()

    def cancel(self) -> None:
        """Prevent any further runs of this task."""
        self._cancelled.set()

    def run(self) -> None:
        """Run the task body once."""
        self._fn()


class TaskScheduler:
    """Background worker thread with a delay-ordered task queue.

    The worker thread is started on first submission and is a daemon, so a
    forgotten scheduler does not keep the process alive.

    Example:
        scheduler = TaskScheduler()
        handle = scheduler.schedule_with_fixed_delay(poll, 0, 10)
        scheduler.execute(lambda: print("runs after the first poll"))
        handle.cancel()
        scheduler.shutdown()
    """

    def __init__(self, name: str = "groupfinder-scheduler") -> None:
        """Initialize the scheduler.

        Args:
            name: Worker thread name (shows up in logs and debuggers).
        """
        self._name = name
        self._queue: list[tuple[float, int, Task | ScheduledTask]] = []
        self._counter = itertools.count()
        self._cond = threading.Condition()
        self._thread: threading.Thread | None = None
        self._shutdown = False

    @property
    def is_running(self) -> bool:
        """Return True if the worker thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    @property
    def is_shutdown(self) -> bool:
        """Return True once shutdown() has been called."""
        return self._shutdown

    def execute(self, fn: Task) -> None:
        """Run a task once, as soon as the tasks queued before it are done.

        Args:
            fn: Callable taking no arguments.

        Raises:
            RuntimeError: If the scheduler has been shut down.
        """
        self._push(time.monotonic(), fn)

    def schedule_with_fixed_delay(
        self, fn: Task, initial_delay: float, delay: float
    ) -> ScheduledTask:
        """Run a task repeatedly with a fixed delay between runs.

        Args:
            fn: Callable taking no arguments.
            initial_delay: Seconds before the first run.
            delay: Seconds between the end of one run and the start of the next.

        Returns:
            Handle whose cancel() stops future runs.

        Raises:
            ValueError: If delay is not positive.
            RuntimeError: If the scheduler has been shut down.
        """
        if delay <= 0:
            raise ValueError(f"delay must be positive, got {delay}")
        task = ScheduledTask(fn, delay)
        self._push(time.monotonic() + max(0.0, initial_delay), task)
        return task

    def shutdown(self, wait: bool = True, timeout: float = 3.0) -> None:
        """Stop the worker thread.

        Queued tasks are dropped. A task already running is allowed to finish.

        Args:
            wait: Block until the worker thread exits (up to timeout).
            timeout: Seconds to wait for the worker thread.
        """
        with self._cond:
            self._shutdown = True
            self._queue.clear()
            self._cond.notify_all()
        thread = self._thread
        if wait and thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)

    def _push(self, due: float, item: Task | ScheduledTask) -> None:
        with self._cond:
            if self._shutdown:
                raise RuntimeError("Scheduler has been shut down")
            heapq.heappush(self._queue, (due, next(self._counter), item))
            if self._thread is None:
                self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
                self._thread.start()
            self._cond.notify()

    def _next_item(self) -> Task | ScheduledTask | None:
        """Block until a task is due, or return None on shutdown."""
        with self._cond:
            while not self._shutdown:
                if self._queue:
                    wait = self._queue[0][0] - time.monotonic()
                    if wait <= 0:
                        return heapq.heappop(self._queue)[2]
                    self._cond.wait(wait)
                else:
                    self._cond.wait()
            return None

    def _run(self) -> None:
        """Worker thread: run due tasks one at a time."""
        logger.debug("Scheduler thread %s started", self._name)
        while True:
            item = self._next_item()
            if item is None:
                break
            if isinstance(item, ScheduledTask):
                if item.cancelled:
                    continue
                self._run_safely(item.run)
                with self._cond:
                    if not item.cancelled and not self._shutdown:
                        heapq.heappush(
                            self._queue,
                            (time.monotonic() + item.delay, next(self._counter), item),
                        )
            else:
                self._run_safely(item)
        logger.debug("Scheduler thread %s stopped", self._name)

    @staticmethod
    def _run_safely(fn: Task) -> None:
        try:
            fn()
        except Exception:
            logger.exception("Unhandled error in background task")
