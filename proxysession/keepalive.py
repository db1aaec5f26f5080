"""Connection keepalive state and Connection header flags."""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace


class KeepaliveMode(enum.Enum):
    TIMEOUT = "timeout"
    INFINITE = "infinite"
    OFF = "off"


@dataclass(frozen=True)
class KeepaliveStatus:
    """Keepalive mode with the timeout in seconds when the mode is TIMEOUT."""

    mode: KeepaliveMode = KeepaliveMode.OFF
    timeout: float | None = None

    @classmethod
    def from_seconds(cls, seconds: float | None) -> KeepaliveStatus:
        """None turns keepalive off, 0 keeps it on forever, more sets a timeout."""
        if seconds is None:
            return cls(KeepaliveMode.OFF)
        if seconds < 0:
            raise ValueError("keepalive timeout cannot be negative")
        if seconds > 0:
            return cls(KeepaliveMode.TIMEOUT, seconds)
        return cls(KeepaliveMode.INFINITE)

    def is_active(self) -> bool:
        return self.mode is not KeepaliveMode.OFF


@dataclass(frozen=True)
class ConnectionValue:
    """Flags found in a Connection header."""

    keep_alive: bool = False
    upgrade: bool = False
    close: bool = False

    def with_close(self) -> ConnectionValue:
        return replace(self, close=True)

    def with_upgrade(self) -> ConnectionValue:
        return replace(self, upgrade=True)

    def with_keep_alive(self) -> ConnectionValue:
        return replace(self, keep_alive=True)