"""Selection-return channel package.

``create_channel`` picks the transport for the current platform; everything
else talks to the returned ``SelectionChannel``.
"""

from __future__ import annotations

import os
from pathlib import Path

from .base import ChannelError, ChannelState, LineBuffer, SelectionChannel, channel_name
from .fifo import FIFO_SETUP_ATTEMPTS, FifoChannel
from .namedpipe import NamedPipeChannel, pipe_address


def create_channel(transport: str = "auto", directory: Path | None = None, pid: int | None = None) -> SelectionChannel:
    """Build an unopened channel.

    ``auto`` means a FIFO on POSIX and a named pipe on Windows; ``socket``
    forces the named-socket transport, which is a Unix socket on POSIX.
    """
    if transport == "socket" or (transport == "auto" and os.name == "nt"):
        return NamedPipeChannel(pid=pid, directory=directory)
    if transport not in ("auto", "fifo"):
        raise ValueError(f"unknown transport: {transport!r}")
    if not hasattr(os, "mkfifo"):
        raise ValueError("fifo transport is not available on this platform")
    return FifoChannel(directory=directory, pid=pid)


__all__ = [
    "ChannelError",
    "ChannelState",
    "FIFO_SETUP_ATTEMPTS",
    "FifoChannel",
    "LineBuffer",
    "NamedPipeChannel",
    "SelectionChannel",
    "channel_name",
    "create_channel",
    "pipe_address",
]
