"""
Cancellable deferred tasks on a single logical clock.

Nothing runs in the background: the host advances the clock and due callbacks
run synchronously, in due order, on the caller's thread.
"""

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable


@dataclass(order=True)
class _Entry:
    due: float
    seq: int
    key: str = field(compare=False)
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)


class TaskScheduler:
    """
    Heap of (due, seq) entries plus a key index for cancellation.

    Scheduling a key that is already pending replaces the old task.
    """

    def __init__(self, now: float = 0.0):
        self.now = now
        self._heap: list[_Entry] = []
        self._by_key: dict[str, _Entry] = {}
        self._seq = itertools.count()

    def schedule(self, key: str, delay: float, callback: Callable[[], None]) -> float:
        """Run `callback` once `delay` weeks have passed. Returns the due time."""
        self.cancel(key)
        entry = _Entry(due=self.now + max(0.0, delay), seq=next(self._seq), key=key, callback=callback)
        heapq.heappush(self._heap, entry)
        self._by_key[key] = entry
        return entry.due

    def cancel(self, key: str) -> bool:
        entry = self._by_key.pop(key, None)
        if entry is None:
            return False
        # Lazy deletion: the heap entry is skipped when popped
        entry.cancelled = True
        return True

    def cancel_prefix(self, prefix: str) -> list[str]:
        keys = [k for k in self._by_key if k.startswith(prefix)]
        for key in keys:
            self.cancel(key)
        return keys

    def cancel_all(self) -> None:
        for entry in self._by_key.values():
            entry.cancelled = True
        self._by_key.clear()
        self._heap.clear()

    def is_pending(self, key: str) -> bool:
        return key in self._by_key

    def due_at(self, key: str) -> float | None:
        entry = self._by_key.get(key)
        return entry.due if entry else None

    def pending_keys(self) -> list[str]:
        return sorted(self._by_key, key=lambda k: (self._by_key[k].due, self._by_key[k].seq))

    def advance(self, weeks: float) -> list[str]:
        """
        Move the clock forward, running every task that falls due on the way.

        Callbacks may schedule new tasks; those run too if they fall inside the window.
        Returns the keys of executed tasks in execution order.
        """
        target = self.now + max(0.0, weeks)
        executed: list[str] = []
        while self._heap and self._heap[0].due <= target:
            entry = heapq.heappop(self._heap)
            if entry.cancelled:
                continue
            self._by_key.pop(entry.key, None)
            self.now = max(self.now, entry.due)
            entry.callback()
            executed.append(entry.key)
        self.now = target
        return executed
