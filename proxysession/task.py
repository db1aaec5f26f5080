"""Units of work passed between the upstream and downstream sides of a session."""

from __future__ import annotations

from dataclasses import dataclass

from .headers import HeaderMap
from .response import ResponseHeader


class Task:
    """Base of every task; a task that carries no flag ends the stream."""

    def is_end(self) -> bool:
        return True


@dataclass
class HeaderTask(Task):
    """A response head, with whether the stream ends after it."""

    header: ResponseHeader
    end: bool = False

    def is_end(self) -> bool:
        return self.end


@dataclass
class BodyTask(Task):
    """A piece of body, possibly none, with whether the stream ends after it."""

    body: bytes | None = None
    end: bool = False

    def is_end(self) -> bool:
        return self.end


@dataclass
class TrailerTask(Task):
    """Trailing headers; always the end of the stream."""

    trailers: HeaderMap | None = None


@dataclass
class DoneTask(Task):
    """Nothing more to send."""


@dataclass
class FailedTask(Task):
    """The other side failed with ``error``."""

    error: Exception