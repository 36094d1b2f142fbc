"""Serial notification queue drained by a single worker."""

import asyncio
import logging
from typing import Awaitable, Callable

from procrelay.models.event import NotificationRequest

logger = logging.getLogger(__name__)

Handler = Callable[[NotificationRequest], Awaitable[object]]


class SerialQueue:
    """FIFO of notification requests with exactly one active worker.

    ``push`` never blocks and never refuses an item: admission control is
    up to the caller, which compares ``pending_count()`` against its limit
    before pushing. The worker awaits the handler for one item before
    taking the next, so requests are handled in push order and at most one
    is in flight.
    """

    def __init__(self, handler: Handler):
        self._handler = handler
        self._queue: asyncio.Queue[NotificationRequest] = asyncio.Queue()
        self._worker_task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._worker_task is not None and not self._worker_task.done()

    def pending_count(self) -> int:
        """Number of queued requests not yet taken by the worker."""
        return self._queue.qsize()

    def push(self, request: NotificationRequest) -> None:
        self._queue.put_nowait(request)

    async def start(self) -> None:
        if self.running:
            return
        self._worker_task = asyncio.create_task(self._worker_loop(), name="procrelay-queue-worker")
        logger.info("Queue worker started")

    async def stop(self) -> None:
        """Stop the worker. Requests still pending are discarded."""
        if self._worker_task is None:
            return
        self._worker_task.cancel()
        await asyncio.gather(self._worker_task, return_exceptions=True)
        self._worker_task = None

        pending = self.pending_count()
        if pending:
            logger.warning(f"Queue worker stopped with {pending} pending message(s) discarded")
        else:
            logger.info("Queue worker stopped")

    async def join(self) -> None:
        """Wait until every pushed request has been handled."""
        await self._queue.join()

    async def _worker_loop(self) -> None:
        while True:
            request = await self._queue.get()
            try:
                await self._handler(request)
            except Exception:
                logger.exception(f"Unhandled error while delivering message from {request.source_name}")
            finally:
                self._queue.task_done()
