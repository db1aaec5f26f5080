"""Offsets into raw byte buffers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Offset:
    """A half-open ``[start, end)`` range into a byte buffer."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid offset range {self.start}..{self.end}")

    @classmethod
    def from_length(cls, start: int, length: int) -> Offset:
        """Build an offset from a start position and a length."""
        return cls(start, start + length)

    def get(self, buf):
        """Return the part of ``buf`` this offset covers."""
        if self.end > len(buf):
            raise IndexError(
                f"offset {self.start}..{self.end} out of range for buffer of {len(buf)}"
            )
        return buf[self.start:self.end]

    def __len__(self) -> int:
        return self.end - self.start

    def is_empty(self) -> bool:
        return self.end == self.start


@dataclass(frozen=True)
class KVOffset:
    """Offsets of a header name and its value inside one buffer."""

    key: Offset
    value: Offset

    @classmethod
    def from_lengths(
        cls, key_start: int, key_len: int, value_start: int, value_len: int
    ) -> KVOffset:
        return cls(
            Offset.from_length(key_start, key_len),
            Offset.from_length(value_start, value_len),
        )

    def get_key(self, buf):
        return self.key.get(buf)

    def get_value(self, buf):
        return self.value.get(buf)