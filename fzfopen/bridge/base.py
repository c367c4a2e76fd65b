"""Selection channel capability shared by the FIFO and named-pipe transports."""

from __future__ import annotations

import enum
import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Callable

logger = logging.getLogger(__name__)

CHANNEL_PREFIX = "fzf-pipe"

RecordCallback = Callable[[str], None]


class ChannelError(OSError):
    """Raised when a channel is used outside its open lifetime."""


class ChannelState(enum.Enum):
    IDLE = "idle"
    OPEN = "open"
    DRAINING = "draining"
    CLOSED = "closed"


def channel_name(pid: int | None = None, attempt: int = 0, prefix: str = CHANNEL_PREFIX) -> str:
    """``fzf-pipe-<pid>`` for the first attempt, ``fzf-pipe-<pid>-<n>`` after."""
    name = f"{prefix}-{os.getpid() if pid is None else pid}"
    if attempt > 0:
        name += f"-{attempt}"
    return name


class LineBuffer:
    """Accumulate raw bytes and hand back complete lines.

    One buffer belongs to one writer session, so partial lines from
    different writers never mix.
    """

    def __init__(self) -> None:
        self._pending = bytearray()

    def feed(self, data: bytes) -> list[bytes]:
        self._pending.extend(data)
        if b"\n" not in data:
            return []
        *lines, rest = bytes(self._pending).split(b"\n")
        self._pending = bytearray(rest)
        return lines

    def flush(self) -> list[bytes]:
        if not self._pending:
            return []
        rest = bytes(self._pending)
        self._pending.clear()
        return [rest]


class SelectionChannel(ABC):
    """One-way delivery path from the forwarding script to this process.

    Callers use only ``open``/``on_record``/``close`` and ``address``; which
    OS resource sits underneath is the subclass's business.
    """

    def __init__(self) -> None:
        self.address: str | None = None
        self.state = ChannelState.IDLE
        self.error: BaseException | None = None
        self._callbacks: list[RecordCallback] = []

    def on_record(self, callback: RecordCallback) -> None:
        """Register ``callback`` to receive each record line as text."""
        self._callbacks.append(callback)

    @abstractmethod
    async def open(self) -> str | None:
        """Create the OS resource and start listening; return its address."""

    @abstractmethod
    async def close(self) -> None:
        """Stop listening and release the OS resource."""

    def _deliver(self, lines: list[bytes]) -> None:
        for raw in lines:
            text = raw.decode("utf-8", errors="replace")
            if not text.strip():
                continue
            for callback in list(self._callbacks):
                try:
                    callback(text)
                except Exception:
                    logger.exception("Selection handler failed for record %r", text)
