"""A byte buffer with read and write cursors."""

from __future__ import annotations


class ZBuf:
    """A ``size``-byte block with ``pos`` and ``las`` cursors between ``start`` and ``end``."""

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError("size must not be negative")
        self.block = bytearray(size)
        self.start = 0
        self.end = size
        self.pos = self.start
        self.las = self.start

    def reset(self) -> None:
        """Move both cursors back to the start."""
        self.pos = self.start
        self.las = self.start