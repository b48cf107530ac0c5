# core/notifications.py
import requests
from collections import defaultdict
from concurrent.futures import Future, ThreadPoolExecutor, wait
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Callable, Dict, List, Optional, Set

from pydantic import BaseModel, Field

from core.config import settings
from core.logging_config import logger
from models.enums import WorkOrderEventType


class WorkOrderEvent(BaseModel):
    """A change that subscribers of a work order are told about."""

    type: WorkOrderEventType
    work_order_id: str
    actor_id: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


Handler = Callable[[WorkOrderEvent], None]


# -----------------------------------------------------
# In-process subscriber registry
# -----------------------------------------------------
class SubscriberRegistry:
    """
    work_order_id -> handlers.
    Thread-safe for concurrent subscribe / notify.
    """

    def __init__(self):
        self._handlers: Dict[str, List[Handler]] = defaultdict(list)
        self._lock = Lock()

    def subscribe(self, work_order_id: str, handler: Handler) -> Callable[[], None]:
        with self._lock:
            self._handlers[work_order_id].append(handler)

        def unsubscribe():
            with self._lock:
                handlers = self._handlers.get(work_order_id, [])
                if handler in handlers:
                    handlers.remove(handler)
                if not handlers:
                    self._handlers.pop(work_order_id, None)

        return unsubscribe

    def handlers_for(self, work_order_id: str) -> List[Handler]:
        with self._lock:
            return list(self._handlers.get(work_order_id, []))

    def clear(self):
        with self._lock:
            self._handlers.clear()


_registry = SubscriberRegistry()


def subscribe(work_order_id: str, handler: Handler) -> Callable[[], None]:
    """Register `handler` for events on `work_order_id`. Returns an unsubscribe callable."""
    return _registry.subscribe(work_order_id, handler)


def clear_subscribers():
    _registry.clear()


# -----------------------------------------------------
# 📨 Send webhook (realtime bridge)
# -----------------------------------------------------
def send_webhook_event(event: WorkOrderEvent):
    webhook_url = settings.HUB_WEBHOOK_URL
    if not webhook_url:
        logger.debug("Webhook URL not configured, skipping.")
        return

    try:
        response = requests.post(
            webhook_url,
            data=event.model_dump_json(),
            headers={"Content-Type": "application/json"},
            timeout=settings.HUB_WEBHOOK_TIMEOUT_SECONDS,
        )
        logger.info(f"Webhook sent for {event.type} on {event.work_order_id} (status {response.status_code})")
    except requests.RequestException as e:
        logger.warning(f"Webhook failed: {e}")


# -----------------------------------------------------
# Background delivery
# -----------------------------------------------------
_executor: Optional[ThreadPoolExecutor] = None
_executor_lock = Lock()
_pending: Set[Future] = set()


def _get_executor() -> ThreadPoolExecutor:
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(
                max_workers=settings.NOTIFY_WORKERS,
                thread_name_prefix="wo-notify",
            )
        return _executor


def _forget(future: Future):
    with _executor_lock:
        _pending.discard(future)


def drain(timeout: Optional[float] = None) -> bool:
    """Wait for queued deliveries. True when none are left running."""
    with _executor_lock:
        pending = list(_pending)
    _, not_done = wait(pending, timeout=timeout)
    return not not_done


def shutdown_notifications(timeout: Optional[float] = None):
    """Let queued deliveries finish, then stop the workers. Called on app shutdown."""
    global _executor
    drain(timeout)
    with _executor_lock:
        executor, _executor = _executor, None
    if executor is not None:
        executor.shutdown(wait=False)


def _deliver(work_order_id: str, event: WorkOrderEvent) -> int:
    delivered = 0
    for handler in _registry.handlers_for(work_order_id):
        try:
            handler(event)
            delivered += 1
        except Exception as e:
            logger.warning(f"Subscriber failed for work order {work_order_id}: {e}")

    send_webhook_event(event)
    return delivered


# -----------------------------------------------------
# Fan-out: fire-and-forget, at most once, never raises
# -----------------------------------------------------
def notify(work_order_id: str, event: WorkOrderEvent) -> Future:
    """
    Queue `event` for every subscriber of `work_order_id` and the webhook,
    and return at once. Failed deliveries are logged and dropped; the
    mutation that caused the event stands. The future resolves to the
    number of handlers that succeeded.
    """
    future = _get_executor().submit(_deliver, work_order_id, event)
    with _executor_lock:
        _pending.add(future)
    future.add_done_callback(_forget)
    return future
