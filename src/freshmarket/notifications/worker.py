"""Background loop that delivers vendor notifications off the request path."""

from __future__ import annotations

import asyncio
import logging
import threading
from concurrent.futures import Future, wait
from typing import Optional, Set

from freshmarket.models.orders import Order

from .dispatcher import NotificationReport, VendorNotifier

logger = logging.getLogger(__name__)


class NotificationWorker:
    """Run :class:`VendorNotifier` jobs on a dedicated event loop thread.

    Request handlers call :meth:`submit` once the order transaction has
    committed; the call returns immediately with a future for the report.
    """

    def __init__(self, notifier: VendorNotifier, *, shutdown_timeout: float = 5.0) -> None:
        self._notifier = notifier
        self._shutdown_timeout = shutdown_timeout
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._pending: Set[Future] = set()
        self._lock = threading.Lock()
        self._pending_lock = threading.Lock()

    @property
    def running(self) -> bool:
        return bool(self._thread and self._thread.is_alive())

    def start(self) -> None:
        """Spawn the event loop in a daemon thread."""

        with self._lock:
            if self.running:
                logger.debug("Notification worker already running")
                return
            logger.info("Starting notification worker")
            self._loop = asyncio.new_event_loop()
            self._thread = threading.Thread(
                target=self._run_loop,
                args=(self._loop,),
                name="vendor-notification-worker",
                daemon=True,
            )
            self._thread.start()

    def stop(self) -> None:
        """Let in-flight jobs finish (bounded), close the gateway and stop the loop."""

        with self._lock:
            loop, thread = self._loop, self._thread
            if loop is None or thread is None:
                return
            with self._pending_lock:
                pending = list(self._pending)
            logger.info("Stopping notification worker pending=%s", len(pending))
            if pending:
                _, not_done = wait(pending, timeout=self._shutdown_timeout)
                for future in not_done:
                    future.cancel()
            try:
                asyncio.run_coroutine_threadsafe(self._notifier.aclose(), loop).result(
                    timeout=self._shutdown_timeout
                )
            except Exception:
                logger.exception("Unable to close notification gateway cleanly")
            loop.call_soon_threadsafe(loop.stop)
            thread.join(timeout=self._shutdown_timeout)
            loop.close()
            self._loop = None
            self._thread = None

    def submit(self, order: Order) -> Future:
        """Queue notifications for ``order`` and return without waiting."""

        if not self.running:
            self.start()
        assert self._loop is not None
        future = asyncio.run_coroutine_threadsafe(self._notifier.notify_order(order), self._loop)
        with self._pending_lock:
            self._pending.add(future)
        future.add_done_callback(lambda done: self._finished(order, done))
        logger.debug("Queued vendor notifications for order %s", order.short_id)
        return future

    def _finished(self, order: Order, future: Future) -> None:
        with self._pending_lock:
            self._pending.discard(future)
        if future.cancelled():
            logger.warning(
                "Vendor notifications for order %s cancelled at shutdown",
                order.short_id,
                extra={"order_id": order.id},
            )
            return
        exc = future.exception()
        if exc is not None:
            logger.error(
                "Vendor notification job failed for order %s",
                order.short_id,
                exc_info=exc,
                extra={"order_id": order.id},
            )
            return
        report: NotificationReport = future.result()
        logger.debug("Notification job finished for order %s: %s", order.short_id, report)

    @staticmethod
    def _run_loop(loop: asyncio.AbstractEventLoop) -> None:
        asyncio.set_event_loop(loop)
        loop.run_forever()


__all__ = ["NotificationWorker"]
