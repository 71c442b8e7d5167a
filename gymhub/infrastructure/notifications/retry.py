"""Background retry queue for notification deliveries that failed to persist."""

from __future__ import annotations

import heapq
import itertools
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from gymhub.config import get_settings
from gymhub.domain.errors import DispatchFailed

logger = logging.getLogger(__name__)


@dataclass(order=True)
class _RetryItem:
    due_at: float
    sequence: int
    task: Callable[[], object] = field(compare=False)
    description: str = field(compare=False)
    attempts: int = field(compare=False, default=1)


class NotificationRetryQueue:
    """Re-run failed delivery callables with exponential backoff.

    ``attempts`` counts the tries already made; an item scheduled after its
    ``n``-th failure waits ``base_delay * 2 ** (n - 1)`` seconds. Items that
    reach ``max_attempts`` are logged and dropped.
    """

    def __init__(
        self,
        *,
        max_attempts: int,
        base_delay: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self._clock = clock
        self._heap: list[_RetryItem] = []
        self._counter = itertools.count()
        self._condition = threading.Condition()
        self._worker: threading.Thread | None = None
        self._stopping = False

    def __len__(self) -> int:
        with self._condition:
            return len(self._heap)

    def enqueue(
        self, task: Callable[[], object], *, description: str, attempts: int = 1
    ) -> bool:
        """Schedule ``task`` for another try; ``False`` when attempts ran out."""

        if attempts >= self.max_attempts:
            logger.error(
                "Giving up on %s after %s attempts", description, attempts
            )
            return False
        delay = self.base_delay * (2 ** (attempts - 1))
        item = _RetryItem(
            due_at=self._clock() + delay,
            sequence=next(self._counter),
            task=task,
            description=description,
            attempts=attempts,
        )
        with self._condition:
            heapq.heappush(self._heap, item)
            self._condition.notify()
        logger.warning(
            "Scheduled retry %s/%s for %s in %.1fs",
            attempts + 1,
            self.max_attempts,
            description,
            delay,
        )
        return True

    def drain(self, *, force: bool = False) -> int:
        """Run every due item once and return how many succeeded.

        ``force`` ignores the backoff and runs everything currently queued.
        """

        with self._condition:
            now = self._clock()
            due: list[_RetryItem] = []
            while self._heap and (force or self._heap[0].due_at <= now):
                due.append(heapq.heappop(self._heap))

        succeeded = 0
        for item in due:
            try:
                item.task()
            except DispatchFailed as exc:
                logger.warning("Retry of %s failed: %s", item.description, exc)
                self.enqueue(
                    item.task, description=item.description, attempts=item.attempts + 1
                )
            else:
                succeeded += 1
                logger.info(
                    "Delivered %s on attempt %s", item.description, item.attempts + 1
                )
        return succeeded

    def start(self) -> None:
        with self._condition:
            if self._worker is not None and self._worker.is_alive():
                return
            self._stopping = False
            self._worker = threading.Thread(
                target=self._run, name="notification-retry", daemon=True
            )
            self._worker.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        with self._condition:
            self._stopping = True
            self._condition.notify_all()
            worker = self._worker
        if worker is not None:
            worker.join(timeout)
        self._worker = None

    def _run(self) -> None:
        while True:
            with self._condition:
                if self._stopping:
                    return
                if self._heap:
                    timeout = max(self._heap[0].due_at - self._clock(), 0.0)
                else:
                    timeout = None
                if timeout is None or timeout > 0:
                    self._condition.wait(timeout)
                if self._stopping:
                    return
            try:
                self.drain()
            except Exception:  # pragma: no cover - keep the worker alive
                logger.exception("Notification retry worker iteration failed")


def build_retry_queue() -> NotificationRetryQueue:
    settings = get_settings()
    return NotificationRetryQueue(
        max_attempts=settings.notification_retry_max_attempts,
        base_delay=settings.notification_retry_base_delay_seconds,
    )


notification_retry_queue = build_retry_queue()


__all__ = [
    "NotificationRetryQueue",
    "build_retry_queue",
    "notification_retry_queue",
]
