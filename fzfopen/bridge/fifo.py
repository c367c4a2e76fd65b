"""POSIX FIFO transport.

The forwarding script opens the FIFO, writes one record, and closes it. Each
close shows up here as end-of-stream, after which the read end no longer
waits for new writers, so the channel reopens the same path and keeps going:

    IDLE --open()--> OPEN --data--> DRAINING --EOF--> OPEN --...
                          \\                      \\
                           `------ close() / reopen failure ------> CLOSED
"""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from pathlib import Path

from .base import ChannelError, ChannelState, LineBuffer, SelectionChannel, channel_name

logger = logging.getLogger(__name__)

FIFO_SETUP_ATTEMPTS = 10
READ_CHUNK_BYTES = 64 * 1024


class FifoChannel(SelectionChannel):
    def __init__(
        self,
        directory: Path | None = None,
        pid: int | None = None,
        attempts: int = FIFO_SETUP_ATTEMPTS,
    ) -> None:
        super().__init__()
        self.directory = Path(directory) if directory is not None else Path(tempfile.gettempdir())
        self.pid = pid
        self.attempts = attempts
        self._fd: int | None = None
        self._buffer = LineBuffer()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._removed = False

    async def open(self) -> str | None:
        if self.state is not ChannelState.IDLE or self.address is not None:
            raise ChannelError(f"fifo channel already {self.state.value}")
        self._loop = asyncio.get_running_loop()
        for attempt in range(self.attempts):
            path = self.directory / channel_name(self.pid, attempt)
            try:
                os.mkfifo(path, 0o600)
            except OSError as exc:
                logger.debug("fifo %s unavailable: %s", path, exc)
                continue
            try:
                self._fd = self._open_read_end(path)
            except OSError as exc:
                logger.debug("fifo %s could not be opened: %s", path, exc)
                self._unlink(path)
                continue
            self.address = str(path)
            self._register(self._fd)
            self.state = ChannelState.OPEN
            logger.info("Listening for selections on fifo %s", path)
            return self.address

        logger.warning("Could not create a selection fifo after %d attempts; selections will not be delivered", self.attempts)
        return None

    async def close(self) -> None:
        self.state = ChannelState.CLOSED
        if self._fd is not None:
            self._release(self._fd)
            self._fd = None
        if self.address is not None and not self._removed:
            self._removed = True
            self._unlink(Path(self.address))
            logger.info("Removed selection fifo %s", self.address)

    @staticmethod
    def _open_read_end(path: Path) -> int:
        return os.open(path, os.O_RDONLY | os.O_NONBLOCK)

    @staticmethod
    def _unlink(path: Path) -> None:
        try:
            path.unlink()
        except OSError:
            pass

    def _register(self, fd: int) -> None:
        assert self._loop is not None
        self._loop.add_reader(fd, self._on_readable, fd)

    def _release(self, fd: int) -> None:
        assert self._loop is not None
        self._loop.remove_reader(fd)
        try:
            os.close(fd)
        except OSError:
            pass

    def _on_readable(self, fd: int) -> None:
        if fd != self._fd or self.state is ChannelState.CLOSED:
            return
        try:
            data = os.read(fd, READ_CHUNK_BYTES)
        except BlockingIOError:
            return
        except OSError as exc:
            self._fail(exc)
            return

        if data:
            self.state = ChannelState.DRAINING
            self._deliver(self._buffer.feed(data))
            return

        self._deliver(self._buffer.flush())
        self._reopen(fd)

    def _reopen(self, old_fd: int) -> None:
        """Swap in a fresh read end for the next writer.

        The new descriptor is opened before the old one is closed so a writer
        that connects in between never finds the FIFO without a reader.
        """
        assert self.address is not None
        try:
            new_fd = self._open_read_end(Path(self.address))
        except OSError as exc:
            self._release(old_fd)
            self._fd = None
            self._fail(exc)
            return
        self._fd = new_fd
        self._register(new_fd)
        self._release(old_fd)
        self.state = ChannelState.OPEN
        logger.debug("Reopened selection fifo %s", self.address)

    def _fail(self, exc: OSError) -> None:
        self.error = exc
        self.state = ChannelState.CLOSED
        if self._fd is not None:
            self._release(self._fd)
            self._fd = None
        logger.error("Selection fifo %s stopped: %s", self.address, exc)
