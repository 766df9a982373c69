"""A pool of equally sized byte blocks handed out and returned in stack order."""

from __future__ import annotations


class FixedPool:
    """Holds ``array_len`` zeroed blocks of ``bsize`` bytes each."""

    def __init__(self, array_len: int, bsize: int) -> None:
        if array_len < 0 or bsize < 0:
            raise ValueError("pool dimensions must not be negative")
        self.array_len = array_len
        self.bsize = bsize
        self._free: list[bytearray] = [bytearray(bsize) for _ in range(array_len)]

    def pop(self) -> bytearray | None:
        """Take a block from the pool, or return ``None`` when it is empty."""
        if not self._free:
            return None
        return self._free.pop()

    def push(self, block: bytearray) -> int:
        """Return ``block`` to the pool and give the number of blocks held."""
        if len(self._free) == self.array_len:
            raise ValueError("fixed pool is full")
        self._free.append(block)
        return len(self._free)

    def __len__(self) -> int:
        return len(self._free)