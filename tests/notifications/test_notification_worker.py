"""Tests for the background notification event loop."""

from __future__ import annotations

import asyncio
import threading
from datetime import datetime

import pytest

from freshmarket.models.orders import Order
from freshmarket.notifications.dispatcher import NotificationReport
from freshmarket.notifications.worker import NotificationWorker


class DummyNotifier:
    def __init__(self, *, fail=False, delay=0.0) -> None:
        self.fail = fail
        self.delay = delay
        self.notified: list[str] = []
        self.closed = False

    async def notify_order(self, order):
        await asyncio.sleep(self.delay)
        if self.fail:
            raise RuntimeError("boom")
        self.notified.append(order.id)
        return NotificationReport(sent=1)

    async def aclose(self):
        self.closed = True


def _order(order_id="order-1"):
    return Order(
        id=order_id,
        shopping_list_id="list-1",
        buyer_id="buyer-1",
        subtotal=0,
        platform_commission=0,
        grand_total=0,
        created_at=datetime(2025, 5, 1),
    )


def test_submit_runs_job_off_the_calling_thread():
    notifier = DummyNotifier()
    worker = NotificationWorker(notifier, shutdown_timeout=1)

    future = worker.submit(_order())

    assert worker.running
    assert future.result(timeout=5) == NotificationReport(sent=1)
    worker.stop()
    assert not worker.running
    assert notifier.notified == ["order-1"]
    assert notifier.closed


def test_failed_job_does_not_stop_worker():
    notifier = DummyNotifier(fail=True)
    worker = NotificationWorker(notifier, shutdown_timeout=1)
    try:
        first = worker.submit(_order("order-1"))
        with pytest.raises(RuntimeError):
            first.result(timeout=5)

        notifier.fail = False
        assert worker.submit(_order("order-2")).result(timeout=5).sent == 1
        assert worker.running
    finally:
        worker.stop()


def test_stop_cancels_jobs_that_outlive_shutdown_timeout():
    worker = NotificationWorker(DummyNotifier(delay=10), shutdown_timeout=0.1)

    future = worker.submit(_order())
    worker.stop()

    assert future.cancelled()


def test_concurrent_submits_are_all_awaited_on_stop():
    notifier = DummyNotifier(delay=0.01)
    worker = NotificationWorker(notifier, shutdown_timeout=5)
    worker.start()
    futures = []
    futures_lock = threading.Lock()

    def submit_batch(batch):
        for index in range(25):
            future = worker.submit(_order(f"order-{batch}-{index}"))
            with futures_lock:
                futures.append(future)

    threads = [threading.Thread(target=submit_batch, args=(batch,)) for batch in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    worker.stop()

    assert len(futures) == 100
    assert all(future.done() and not future.cancelled() for future in futures)
    assert len(notifier.notified) == 100
