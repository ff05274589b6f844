"""
Helmsman subscriptions: an explicitly owned, lock-guarded set of keys.

Handlers that keep shared state across invocations (e.g., the external channels a
notifier polls) own a Subscriptions instance and pass it to the tasks that need
it. Every operation takes the same anyio lock, so concurrent invocations never
observe a half-applied sync().
"""
import logging

import anyio

logger = logging.getLogger(__name__)


class Subscriptions:
    """
    Lock-guarded set of subscription keys.

    Parameters
    - keys: Iterable[Hashable]
      initial subscriptions.
    """

    def __init__(self, keys=()):
        self._lock = anyio.Lock()
        self._keys = set(keys)

    async def subscribe(self, key):
        """
        Add a key. Returns True when it was not subscribed yet.
        """
        async with self._lock:
            if key in self._keys:
                return False
            self._keys.add(key)
        logger.debug("subscribed %r", key)
        return True

    async def unsubscribe(self, key):
        """
        Remove a key. Returns True when it was subscribed.
        """
        async with self._lock:
            if key not in self._keys:
                return False
            self._keys.discard(key)
        logger.debug("unsubscribed %r", key)
        return True

    async def sync(self, keys):
        """
        Replace every subscription with the given keys (e.g., after reloading storage).
        """
        async with self._lock:
            self._keys = set(keys)
            count = len(self._keys)
        logger.debug("synced %d subscription(s)", count)

    async def snapshot(self):
        async with self._lock:
            return frozenset(self._keys)

    async def has(self, key):
        async with self._lock:
            return key in self._keys

    def __repr__(self):
        return f"subscriptions(keys={len(self._keys)})"


__all__ = (
    "Subscriptions",
)
