"""A list of fixed capacity with constant-time removal by node."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any


@dataclass(eq=False)
class FixedListNode:
    """A slot of a :class:`FixedList`; ``idx`` is its current position."""

    idx: int
    udata: Any = None


class FixedList:
    """Holds at most ``size`` items; removal moves the last item into the gap."""

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError("size must not be negative")
        self.size = size
        self._nodes = [FixedListNode(i) for i in range(size)]
        self._num = 0

    def push(self, udata: Any) -> FixedListNode:
        """Store ``udata`` in the next free slot and return that slot."""
        if self._num == self.size:
            raise IndexError("fixed list is full")
        node = self._nodes[self._num]
        node.udata = udata
        node.idx = self._num
        self._num += 1
        return node

    def pop(self, node: FixedListNode) -> None:
        """Remove ``node``; the last node takes over its position."""
        idx = node.idx
        if not (0 <= idx < self._num and self._nodes[idx] is node):
            raise ValueError("node is not in this list")
        last_idx = self._num - 1
        last = self._nodes[last_idx]
        self._nodes[idx], self._nodes[last_idx] = last, node
        last.idx = idx
        node.idx = last_idx
        self._num -= 1

    def __len__(self) -> int:
        return self._num

    def __iter__(self) -> Iterator[FixedListNode]:
        return iter(self._nodes[: self._num])