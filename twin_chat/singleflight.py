"""Deduplicating cache where concurrent lookups of one key share a computation."""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Callable, Generic, Hashable, Optional, TypeVar, Union

logger = logging.getLogger(__name__)

V = TypeVar("V")


@dataclass
class Pending(Generic[V]):
    future: "Future[V]"


@dataclass
class Resolved(Generic[V]):
    value: V


class SingleFlightCache(Generic[V]):
    """Cache whose entries are either :class:`Pending` or :class:`Resolved`.

    The first caller for a key runs ``loader`` in its own thread; callers
    arriving while it runs wait on the same future.  A failing loader hands
    its exception to every waiter and leaves no entry behind, so the next
    lookup tries again.  With ``max_entries`` set, the least recently used
    resolved entries are evicted once that many are held; pending entries
    are never evicted.
    """

    def __init__(self, max_entries: Optional[int] = None) -> None:
        if max_entries is not None and max_entries <= 0:
            raise ValueError("max_entries must be a positive integer")
        self.max_entries = max_entries
        self._entries: "OrderedDict[Hashable, Union[Pending[V], Resolved[V]]]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return sum(1 for entry in self._entries.values() if isinstance(entry, Resolved))

    def get(self, key: Hashable, loader: Callable[[], V]) -> V:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                future: "Future[V]" = Future()
                self._entries[key] = Pending(future)
                owner = True
            else:
                owner = False
                if isinstance(entry, Resolved):
                    self._entries.move_to_end(key)

        if not owner:
            if isinstance(entry, Resolved):
                return entry.value
            logger.debug("Joining in-flight computation for %r", key)
            return entry.future.result()

        try:
            value = loader()
        except BaseException as exc:
            with self._lock:
                self._entries.pop(key, None)
            future.set_exception(exc)
            raise

        with self._lock:
            if isinstance(self._entries.get(key), Pending):
                self._entries[key] = Resolved(value)
                self._entries.move_to_end(key)
                self._evict_overflow()
        future.set_result(value)
        return value

    def invalidate(self, key: Hashable) -> None:
        with self._lock:
            entry = self._entries.get(key)
            if isinstance(entry, Resolved):
                del self._entries[key]

    def clear(self) -> None:
        with self._lock:
            self._entries = OrderedDict(
                (key, entry) for key, entry in self._entries.items() if isinstance(entry, Pending)
            )

    def _evict_overflow(self) -> None:
        if self.max_entries is None:
            return
        resolved = [key for key, entry in self._entries.items() if isinstance(entry, Resolved)]
        for key in resolved[: max(0, len(resolved) - self.max_entries)]:
            logger.debug("Evicting cached entry for %r", key)
            del self._entries[key]
