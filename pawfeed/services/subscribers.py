"""
Subscriber registry for notification list updates.

Supports:
- Independent registrations (the same callback may subscribe twice)
- Idempotent unsubscribe handles
- Ordered synchronous delivery of the full filtered list
- Coroutine callbacks, scheduled as tasks so they never hold up the caller
"""

import asyncio
import inspect
import itertools
import logging
from typing import Awaitable, Callable, Dict, List, Set, Union

from pawfeed.schemas.notification import Notification

logger = logging.getLogger(__name__)

Listener = Callable[[List[Notification]], Union[None, Awaitable[None]]]
Unsubscribe = Callable[[], None]


class SubscriberRegistry:
    """
    Tracks UI listeners in registration order.

    Each listener receives its own copy of the list so one subscriber
    mutating it cannot affect the next.
    """

    def __init__(self):
        # Insertion-ordered: registration id -> listener
        self._listeners: Dict[int, Listener] = {}
        self._ids = itertools.count(1)
        # Keeps scheduled coroutine deliveries alive until they finish
        self._pending: Set[asyncio.Task] = set()

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """
        Register a listener.

        Returns:
            A callable that removes exactly this registration
        """
        registration = next(self._ids)
        self._listeners[registration] = listener
        logger.debug(f"Subscriber {registration} added, total={self.count}")

        def unsubscribe() -> None:
            if self._listeners.pop(registration, None) is not None:
                logger.debug(f"Subscriber {registration} removed, total={self.count}")

        return unsubscribe

    @property
    def count(self) -> int:
        return len(self._listeners)

    def broadcast(self, notifications: List[Notification]) -> int:
        """
        Deliver ``notifications`` to every listener.

        Returns:
            Number of listeners the list was delivered to
        """
        delivered = 0

        for registration, listener in list(self._listeners.items()):
            try:
                result = listener(list(notifications))
                if inspect.isawaitable(result):
                    self._schedule(registration, result)
                delivered += 1
            except Exception as e:
                logger.warning(f"Subscriber {registration} failed: {e}")

        logger.debug(f"Broadcast {len(notifications)} notifications to {delivered} subscribers")
        return delivered

    def _schedule(self, registration: int, awaitable: Awaitable[None]) -> None:
        task = asyncio.ensure_future(awaitable)
        self._pending.add(task)

        def _done(t: asyncio.Task) -> None:
            self._pending.discard(t)
            if not t.cancelled() and t.exception() is not None:
                logger.warning(f"Subscriber {registration} failed: {t.exception()}")

        task.add_done_callback(_done)

    async def drain(self) -> None:
        """Wait for scheduled coroutine deliveries to finish."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    def clear(self) -> None:
        self._listeners.clear()
        for task in self._pending:
            task.cancel()
        self._pending.clear()
