"""Delayed action scheduling.

Delayed actions are kept in a min-heap ordered by fire time. They can be
listed and cancelled until they fire; nothing is persisted.
"""

import asyncio
import heapq
import itertools
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from automator.core.logging import get_logger
from automator.engine.clock import Clock, SystemClock
from automator.observability.metrics import DELAYED_ACTIONS_PENDING

logger = get_logger(__name__)

Job = Callable[[], Awaitable[Any]]


@dataclass(order=True)
class ScheduledAction:
    """A unit of deferred work with a fire time."""

    fire_at: float
    sequence: int
    action_id: str = field(compare=False)
    label: str = field(compare=False, default="")
    job: Job = field(compare=False, repr=False, default=None)
    cancelled: bool = field(compare=False, default=False)


class DelayedActionScheduler:
    """Scheduler for actions that run after a delay."""

    def __init__(self, clock: Clock | None = None):
        """Initialize scheduler.

        Args:
            clock: Time source, system monotonic clock by default
        """
        self._clock = clock or SystemClock()
        self._heap: list[ScheduledAction] = []
        self._pending: dict[str, ScheduledAction] = {}
        self._sequence = itertools.count()
        self._wakeup = asyncio.Event()
        self._runner: asyncio.Task | None = None
        self._in_flight: set[asyncio.Task] = set()

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def running(self) -> bool:
        return self._runner is not None and not self._runner.done()

    def schedule(self, delay_seconds: float, job: Job, label: str = "") -> ScheduledAction:
        """Schedule a job to run after a delay.

        Args:
            delay_seconds: Seconds to wait (non-negative)
            job: Coroutine function to run
            label: Description used in logs

        Returns:
            The scheduled action

        Raises:
            ValueError: If delay_seconds is negative
        """
        if delay_seconds < 0:
            raise ValueError(f"Delay must be non-negative, got {delay_seconds}")

        action = ScheduledAction(
            fire_at=self._clock.now() + delay_seconds,
            sequence=next(self._sequence),
            action_id=f"delayed_{uuid.uuid4().hex[:12]}",
            label=label,
            job=job,
        )
        heapq.heappush(self._heap, action)
        self._pending[action.action_id] = action
        DELAYED_ACTIONS_PENDING.set(len(self._pending))
        self._wakeup.set()

        logger.debug(
            "Delayed action scheduled",
            action_id=action.action_id,
            label=label,
            delay_seconds=delay_seconds,
        )
        return action

    def cancel(self, action_id: str) -> bool:
        """Cancel a pending action.

        Returns:
            True if the action was pending
        """
        action = self._pending.pop(action_id, None)
        if action is None:
            return False

        # Heap entry is dropped lazily when it reaches the top
        action.cancelled = True
        DELAYED_ACTIONS_PENDING.set(len(self._pending))
        self._wakeup.set()
        logger.info("Delayed action cancelled", action_id=action_id, label=action.label)
        return True

    def cancel_all(self) -> int:
        """Cancel every pending action.

        Returns:
            Number of actions cancelled
        """
        count = len(self._pending)
        for action in self._pending.values():
            action.cancelled = True
        self._pending.clear()
        self._heap.clear()
        DELAYED_ACTIONS_PENDING.set(0)
        self._wakeup.set()
        if count:
            logger.info("Pending delayed actions cancelled", count=count)
        return count

    def pending(self) -> list[ScheduledAction]:
        """Pending actions ordered by fire time."""
        return sorted(self._pending.values())

    def get(self, action_id: str) -> ScheduledAction | None:
        return self._pending.get(action_id)

    def next_fire_at(self) -> float | None:
        """Fire time of the earliest pending action."""
        while self._heap and self._heap[0].cancelled:
            heapq.heappop(self._heap)
        return self._heap[0].fire_at if self._heap else None

    def _pop_due(self) -> list[ScheduledAction]:
        now = self._clock.now()
        due: list[ScheduledAction] = []
        while self._heap and (self._heap[0].cancelled or self._heap[0].fire_at <= now):
            action = heapq.heappop(self._heap)
            if action.cancelled:
                continue
            self._pending.pop(action.action_id, None)
            due.append(action)
        if due:
            DELAYED_ACTIONS_PENDING.set(len(self._pending))
        return due

    async def _execute(self, action: ScheduledAction) -> None:
        logger.debug("Running delayed action", action_id=action.action_id, label=action.label)
        try:
            await action.job()
        except Exception as e:
            logger.error(
                "Delayed action error",
                action_id=action.action_id,
                label=action.label,
                error=str(e),
                exc_info=True,
            )

    async def run_due(self) -> int:
        """Run every action whose fire time has passed.

        Due actions run concurrently; this returns once all have finished.

        Returns:
            Number of actions run
        """
        due = self._pop_due()
        if due:
            await asyncio.gather(*(self._execute(action) for action in due))
        return len(due)

    def start(self) -> None:
        """Start the background loop on the running event loop."""
        if self.running:
            return
        self._runner = asyncio.create_task(self._run_loop())
        logger.info("Delayed action scheduler started")

    async def stop(self, cancel_pending: bool = True) -> None:
        """Stop the background loop.

        Args:
            cancel_pending: Cancel actions that have not fired yet
        """
        if cancel_pending:
            self.cancel_all()

        if self._runner is not None:
            self._runner.cancel()
            await asyncio.gather(self._runner, return_exceptions=True)
            self._runner = None

        if self._in_flight:
            await asyncio.gather(*self._in_flight, return_exceptions=True)

        logger.info("Delayed action scheduler stopped")

    def _spawn(self, action: ScheduledAction) -> None:
        task = asyncio.create_task(self._execute(action))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def _run_loop(self) -> None:
        while True:
            self._wakeup.clear()
            for action in self._pop_due():
                self._spawn(action)

            next_at = self.next_fire_at()
            timeout = None if next_at is None else max(0.0, next_at - self._clock.now())
            try:
                await asyncio.wait_for(self._wakeup.wait(), timeout=timeout)
            except asyncio.TimeoutError:
                pass
