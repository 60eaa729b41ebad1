"""WorkingBuffer — fixed-capacity raw/redacted byte pair carried between chunks.

``raw`` holds input exactly as read.  ``redacted`` starts as a copy of each
appended chunk and is only ever changed by overwriting digit bytes with the
mask byte, so both halves always have the same length and layout.
"""

from __future__ import annotations

from .types import CapacityExceeded


class WorkingBuffer:
    """Two equal-length byte arrays plus a valid-length counter."""

    __slots__ = ("_raw", "_redacted", "_length", "_capacity")

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._raw = bytearray(capacity)
        self._redacted = bytearray(capacity)
        self._length = 0

    def __len__(self) -> int:
        return self._length

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def remaining(self) -> int:
        return self._capacity - self._length

    @property
    def is_full(self) -> bool:
        return self._length == self._capacity

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def append(self, data: bytes) -> None:
        """Copy ``data`` onto the end of both halves."""
        size = len(data)
        if size > self.remaining:
            raise CapacityExceeded(self._capacity)
        start, end = self._length, self._length + size
        self._raw[start:end] = data
        self._redacted[start:end] = data
        self._length = end

    def compact(self, start: int) -> None:
        """Drop ``[0, start)`` and shift the unflushed tail down to index 0."""
        if not 0 <= start <= self._length:
            raise IndexError(f"compact start {start} outside [0, {self._length}]")
        if start == 0:
            return
        tail = self._length - start
        self._raw[:tail] = self._raw[start:self._length]
        self._redacted[:tail] = self._redacted[start:self._length]
        self._length = tail

    def clear(self) -> None:
        self._length = 0

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def snapshot_for_scan(self) -> tuple[memoryview, memoryview]:
        """Return ``(raw, redacted)`` views over the valid region.

        ``raw`` is read-only; ``redacted`` is writable so the scanner can mask
        in place.  Release both before the next append or compact.
        """
        raw = memoryview(self._raw)[:self._length].toreadonly()
        redacted = memoryview(self._redacted)[:self._length]
        return raw, redacted

    def redacted_bytes(self, start: int = 0, end: int | None = None) -> bytes:
        end = self._length if end is None else min(end, self._length)
        return bytes(self._redacted[start:end])

    def raw_bytes(self, start: int = 0, end: int | None = None) -> bytes:
        end = self._length if end is None else min(end, self._length)
        return bytes(self._raw[start:end])
