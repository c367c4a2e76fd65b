"""Forwarding script: last stage of every fzfopen pipeline.

Usage: ``<selector> | fzfopen-topipe TAG ADDRESS``. Each selected line is
sent as ``TAG$$<cwd>$$<line>`` to the selection channel at ADDRESS, opening
and closing the channel once per line.
"""

from __future__ import annotations

import argparse
import errno
import os
import socket
import stat
import sys
from collections.abc import Iterable

from .records import RECORD_TAGS, format_record


def _is_socket(address: str) -> bool:
    try:
        return stat.S_ISSOCK(os.stat(address).st_mode)
    except OSError:
        return False


def write_record(address: str, payload: bytes) -> None:
    """Write one record to a FIFO, Windows named pipe, or Unix socket.

    A POSIX FIFO is opened non-blocking so a channel nobody reads from fails
    with ``ENXIO`` instead of hanging the pipeline.
    """
    if hasattr(socket, "AF_UNIX") and _is_socket(address):
        with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as sock:
            sock.connect(address)
            sock.sendall(payload)
        return
    if os.name == "nt":
        with open(address, "wb", buffering=0) as channel:
            channel.write(payload)
        return
    fd = os.open(address, os.O_WRONLY | os.O_NONBLOCK)
    try:
        os.set_blocking(fd, True)
        os.write(fd, payload)
    finally:
        os.close(fd)


def forward(tag: str, address: str, lines: Iterable[str], cwd: str | None = None) -> int:
    """Forward every non-empty line; return how many records were written."""
    cwd = os.getcwd() if cwd is None else cwd
    count = 0
    for line in lines:
        selection = line.rstrip("\r\n")
        if not selection.strip():
            continue
        write_record(address, format_record(tag, cwd, selection).encode("utf-8"))
        count += 1
    return count


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="fzfopen-topipe",
        description="Forward selector output to a running fzfopen session.",
    )
    parser.add_argument("tag", choices=RECORD_TAGS, help="Action for the selection.")
    parser.add_argument("address", nargs="?", default="", help="Selection channel address.")
    args = parser.parse_args(argv)

    if not args.address:
        print("fzfopen-topipe: no selection channel address given", file=sys.stderr)
        return 2
    try:
        forward(args.tag, args.address, sys.stdin)
    except OSError as exc:
        if exc.errno == errno.ENXIO:
            print(f"fzfopen-topipe: no fzfopen session is listening on {args.address}", file=sys.stderr)
        else:
            print(f"fzfopen-topipe: cannot write to {args.address}: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
