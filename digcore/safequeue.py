"""Thread-safe double-ended queues."""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Iterable
from typing import Generic, TypeVar

T = TypeVar("T")


class SafeQueue(Generic[T]):
    """A lock-protected queue: items go in at the front and leave from the back."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: deque[T] = deque()

    def push_front(self, value: T) -> None:
        with self._lock:
            self._items.appendleft(value)

    def push_front_n(self, values: Iterable[T]) -> None:
        """Push each of ``values`` to the front, in order."""
        with self._lock:
            self._items.extendleft(values)

    def pop_back(self) -> T | None:
        """Remove and return the oldest item, or None when empty."""
        with self._lock:
            return self._items.pop() if self._items else None

    def pop_back_n(self, n: int) -> list[T]:
        """Remove and return up to ``n`` of the oldest items, oldest first."""
        with self._lock:
            count = max(0, min(n, len(self._items)))
            return [self._items.pop() for _ in range(count)]

    def pop_back_all(self) -> list[T]:
        """Remove and return every item, oldest first."""
        with self._lock:
            items = list(reversed(self._items))
            self._items.clear()
            return items

    def remove_all(self) -> None:
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class LimitedQueue(Generic[T]):
    """A SafeQueue that refuses new items once it holds ``max_size`` of them."""

    def __init__(self, max_size: int) -> None:
        self.max_size = max_size
        self._queue: SafeQueue[T] = SafeQueue()

    def push_front(self, value: T) -> bool:
        """Push ``value``; return False without pushing when the queue is full."""
        if len(self._queue) >= self.max_size:
            return False
        self._queue.push_front(value)
        return True

    def push_front_n(self, values: Iterable[T]) -> bool:
        """Push all ``values`` unless the queue is already full.

        Only the size before the push is checked, so a batch may take the
        queue past its limit.
        """
        if len(self._queue) >= self.max_size:
            return False
        self._queue.push_front_n(values)
        return True

    def pop_back(self) -> T | None:
        return self._queue.pop_back()

    def pop_back_n(self, n: int) -> list[T]:
        return self._queue.pop_back_n(n)

    def pop_back_all(self) -> list[T]:
        return self._queue.pop_back_all()

    def remove_all(self) -> None:
        self._queue.remove_all()

    def __len__(self) -> int:
        return len(self._queue)