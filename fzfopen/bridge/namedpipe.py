"""Named local socket transport.

On Windows this is a named pipe under ``\\\\.\\pipe\\``; elsewhere the same
channel runs over a Unix domain socket in the temp directory. Each writer
connection gets its own protocol instance feeding the shared delivery path,
and the listener lives for the whole session.
"""

from __future__ import annotations

import asyncio
import errno
import logging
import os
import sys
import tempfile
from collections.abc import Awaitable, Callable
from pathlib import Path

from .base import ChannelError, ChannelState, LineBuffer, SelectionChannel, channel_name

logger = logging.getLogger(__name__)

WINDOWS_PIPE_NAMESPACE = "\\\\.\\pipe\\"
SOCKET_PREFIX = "fzf-sock"

Closer = Callable[[], Awaitable[None]]
Listener = Callable[[str, Callable[[], asyncio.Protocol]], Awaitable[Closer]]


def _address_in_use(address: str) -> OSError:
    return OSError(errno.EADDRINUSE, os.strerror(errno.EADDRINUSE), address)


def pipe_address(pid: int | None = None, attempt: int = 0, directory: Path | None = None) -> str:
    """Channel address for ``attempt`` on the current platform."""
    if sys.platform == "win32":
        return WINDOWS_PIPE_NAMESPACE + channel_name(pid, attempt)
    base = Path(directory) if directory is not None else Path(tempfile.gettempdir())
    return str(base / channel_name(pid, attempt, prefix=SOCKET_PREFIX))


async def listen_windows_pipe(address: str, protocol_factory: Callable[[], asyncio.Protocol]) -> Closer:
    name = address[len(WINDOWS_PIPE_NAMESPACE):]
    if name in os.listdir(WINDOWS_PIPE_NAMESPACE):
        raise _address_in_use(address)
    loop = asyncio.get_running_loop()
    servers = await loop.start_serving_pipe(protocol_factory, address)

    async def close() -> None:
        for server in servers:
            server.close()

    return close


async def listen_unix_socket(address: str, protocol_factory: Callable[[], asyncio.Protocol]) -> Closer:
    if os.path.exists(address):
        raise _address_in_use(address)
    loop = asyncio.get_running_loop()
    server = await loop.create_unix_server(protocol_factory, path=address)
    os.chmod(address, 0o600)

    async def close() -> None:
        server.close()
        await server.wait_closed()
        try:
            os.unlink(address)
        except OSError:
            pass

    return close


def default_listener() -> Listener:
    return listen_windows_pipe if sys.platform == "win32" else listen_unix_socket


class _RecordProtocol(asyncio.Protocol):
    """Buffers one writer connection and delivers complete lines."""

    def __init__(self, channel: NamedPipeChannel) -> None:
        self._channel = channel
        self._buffer = LineBuffer()

    def data_received(self, data: bytes) -> None:
        self._channel.state = ChannelState.DRAINING
        self._channel._deliver(self._buffer.feed(data))

    def eof_received(self) -> bool:
        self._channel._deliver(self._buffer.flush())
        return False

    def connection_lost(self, exc: Exception | None) -> None:
        self._channel._deliver(self._buffer.flush())
        if self._channel.state is ChannelState.DRAINING:
            self._channel.state = ChannelState.OPEN


class NamedPipeChannel(SelectionChannel):
    def __init__(
        self,
        pid: int | None = None,
        directory: Path | None = None,
        listener: Listener | None = None,
    ) -> None:
        super().__init__()
        self.pid = pid
        self.directory = directory
        self._listener = listener or default_listener()
        self._closer: Closer | None = None

    async def open(self) -> str | None:
        """Bind the first free address, retrying for as long as names collide.

        Only "address in use" triggers a retry; any other ``OSError`` is
        raised to the caller.
        """
        if self.state is not ChannelState.IDLE or self.address is not None:
            raise ChannelError(f"pipe channel already {self.state.value}")
        attempt = 0
        while True:
            address = pipe_address(self.pid, attempt, self.directory)
            try:
                self._closer = await self._listener(address, lambda: _RecordProtocol(self))
            except OSError as exc:
                if exc.errno != errno.EADDRINUSE:
                    raise
                logger.debug("pipe %s in use, trying next name", address)
                attempt += 1
                continue
            self.address = address
            self.state = ChannelState.OPEN
            logger.info("Listening for selections on %s", address)
            return address

    async def close(self) -> None:
        self.state = ChannelState.CLOSED
        closer, self._closer = self._closer, None
        if closer is None:
            return
        try:
            await closer()
        except OSError as exc:
            logger.debug("Ignoring pipe teardown error: %s", exc)
