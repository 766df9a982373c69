"""An intrusive doubly linked list: new nodes go in at the head."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any


@dataclass(eq=False)
class ListNode:
    """A node that carries ``data``; ``pre`` points at the head side, ``nex`` at the tail side."""

    data: Any = None
    pre: ListNode | None = None
    nex: ListNode | None = None


class DoublyLinkedList:
    """Nodes linked from ``head`` to ``tail``."""

    def __init__(self) -> None:
        self.head: ListNode | None = None
        self.tail: ListNode | None = None
        self._num = 0

    def add(self, node: ListNode) -> None:
        """Put ``node`` at the head of the list."""
        node.pre = None
        if self._num == 0:
            node.nex = None
            self.head = node
            self.tail = node
        else:
            node.nex = self.head
            self.head.pre = node
            self.head = node
        self._num += 1

    def _clear(self) -> None:
        self.head = None
        self.tail = None
        self._num = 0

    def pop_head(self) -> ListNode | None:
        """Remove and return the head node, or ``None`` when the list is empty."""
        if self._num == 0:
            return None
        node = self.head
        if self._num == 1:
            self._clear()
        else:
            self.head = node.nex
            self.head.pre = None
            self._num -= 1
        node.pre = node.nex = None
        return node

    def pop_tail(self) -> ListNode | None:
        """Remove and return the tail node, or ``None`` when the list is empty."""
        if self._num == 0:
            return None
        node = self.tail
        if self._num == 1:
            self._clear()
        else:
            self.tail = node.pre
            self.tail.nex = None
            self._num -= 1
        node.pre = node.nex = None
        return node

    def move_head(self, node: ListNode) -> None:
        """Move ``node`` to the head.

        Lists of one or two nodes are left as they are.
        """
        if self._num in (1, 2):
            return
        pre_node, nex_node = node.pre, node.nex
        if pre_node is None:
            return
        if nex_node is not None:
            nex_node.pre = pre_node
        else:
            self.tail = pre_node
        pre_node.nex = nex_node
        node.nex = self.head
        self.head.pre = node
        self.head = node
        node.pre = None

    def pop(self, node: ListNode) -> None:
        """Unlink ``node``; raise ``ValueError`` if it is not where the list expects it."""
        if self._num == 0:
            return
        pre_node, nex_node = node.pre, node.nex

        if pre_node is None and nex_node is None:
            if self.head is not node or self.tail is not node or self._num != 1:
                raise ValueError("node is not the only node of this list")
            self._clear()
            return

        if pre_node is None:
            if self.head is not node or self._num == 1:
                raise ValueError("node is not the head of this list")
            nex_node.pre = None
            self.head = nex_node
        elif nex_node is None:
            if self.tail is not node or self._num == 1:
                raise ValueError("node is not the tail of this list")
            pre_node.nex = None
            self.tail = pre_node
        else:
            pre_node.nex = nex_node
            nex_node.pre = pre_node

        node.pre = node.nex = None
        self._num -= 1

    def __len__(self) -> int:
        return self._num

    def __iter__(self) -> Iterator[ListNode]:
        node = self.head
        while node is not None:
            yield node
            node = node.nex