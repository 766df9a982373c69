"""A bounded heap that hands out byte blocks and tracks how much it holds."""

from __future__ import annotations

from dataclasses import dataclass

FRAGMENT_HEADER_SIZE = 8
MAX_ALLOC_SIZE = 1024 * 1024 * 1024 - 1


class HeapFullError(MemoryError):
    """Raised when the heap already holds its maximum number of fragments."""


@dataclass(eq=False)
class _Fragment:
    block: bytearray
    idx: int


class Heap:
    """Holds up to ``max_fragment`` blocks at once."""

    def __init__(self, max_fragment: int) -> None:
        if max_fragment < 0:
            raise ValueError("max_fragment must not be negative")
        self.max_fragment = max_fragment
        self.alloc_byte = 0
        self.ralloc_byte = 0
        self._fragments: list[_Fragment] = []
        self._by_id: dict[int, _Fragment] = {}

    def alloc(self, size: int) -> bytearray:
        """Return a new zeroed block of ``size`` bytes."""
        if size == 0:
            raise ValueError("cannot allocate an empty block")
        if len(self._fragments) == self.max_fragment:
            raise HeapFullError("gnb heap is full")
        if size < 0 or size > MAX_ALLOC_SIZE:
            raise ValueError(f"block size {size} out of range")

        fragment = _Fragment(bytearray(size), len(self._fragments))
        self._fragments.append(fragment)
        self._by_id[id(fragment.block)] = fragment
        self.alloc_byte += size
        self.ralloc_byte += FRAGMENT_HEADER_SIZE + size
        return fragment.block

    def free(self, block: bytearray | None) -> None:
        """Give ``block`` back to the heap; ``None`` is ignored."""
        if not self._fragments or block is None:
            return
        fragment = self._by_id.get(id(block))
        if fragment is None or fragment.block is not block:
            raise ValueError("block was not allocated by this heap")

        last = self._fragments[-1]
        if last is not fragment:
            last.idx = fragment.idx
            self._fragments[last.idx] = last
        self._fragments.pop()
        del self._by_id[id(block)]

        size = len(block)
        self.alloc_byte -= size
        self.ralloc_byte -= FRAGMENT_HEADER_SIZE + size

    def clean(self) -> None:
        """Drop every block the heap holds."""
        self._fragments.clear()
        self._by_id.clear()
        self.alloc_byte = 0
        self.ralloc_byte = 0

    def __len__(self) -> int:
        return len(self._fragments)