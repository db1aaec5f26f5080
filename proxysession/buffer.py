"""A bounded buffer that keeps a copy of body bytes."""

from __future__ import annotations


class StorageBuffer:
    """Collects bytes up to ``capacity``; once overfilled it stops and stays truncated."""

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        self._buffer = bytearray()
        self._truncated = False

    def write(self, data: bytes) -> None:
        if not self._truncated and len(self._buffer) + len(data) <= self.capacity:
            self._buffer += data
        else:
            self._truncated = True

    def clear(self) -> None:
        self._truncated = False
        self._buffer.clear()

    def is_empty(self) -> bool:
        return not self._buffer

    def is_truncated(self) -> bool:
        return self._truncated

    def getvalue(self) -> bytes | None:
        """Return the stored bytes, or None when nothing is stored."""
        return bytes(self._buffer) if self._buffer else None

    def __len__(self) -> int:
        return len(self._buffer)