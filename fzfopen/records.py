"""Selection record wire format.

A record is one text line ``<tag>$$<cwd>$$<argument>`` written by the
forwarding script. Parsing is lenient about whitespace and strict about
shape: anything without a tag, a cwd and a non-empty argument is treated as
a cancelled selection and yields ``None``.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path

RECORD_SEPARATOR = "$$"

TAG_OPEN = "open"
TAG_ADD = "add"
TAG_SEARCH = "rg"
RECORD_TAGS = (TAG_OPEN, TAG_ADD, TAG_SEARCH)

# ``path:line:column`` with an optional trailing ``:text`` from ``rg --vimgrep``.
# The lazy path group keeps Windows drive letters (``C:\x``) in the path.
_LOCATION_RE = re.compile(r"^(?P<path>.+?):(?P<line>\d+):(?P<column>\d+)(?::.*)?$", re.DOTALL)


@dataclass(frozen=True)
class SelectionRecord:
    command: str
    cwd: str
    argument: str


@dataclass(frozen=True)
class SearchLocation:
    """A ``rg --vimgrep`` hit as the user picked it (1-based line/column)."""

    path: str
    line: int
    column: int


def format_record(tag: str, cwd: str, selection: str) -> str:
    """Serialize one selection as a newline-terminated record line."""
    return f"{tag}{RECORD_SEPARATOR}{cwd}{RECORD_SEPARATOR}{selection}\n"


def parse_record(payload: str | bytes) -> SelectionRecord | None:
    """Parse one record, returning ``None`` for cancelled or malformed input.

    ``payload`` may be raw channel bytes; they are decoded as UTF-8 with
    replacement. Only the first two separators split fields, so a ``$$`` in
    the selection (a search hit's matched text, say) stays in ``argument``.
    """
    if isinstance(payload, bytes):
        payload = payload.decode("utf-8", errors="replace")
    parts = payload.strip().split(RECORD_SEPARATOR, 2)
    if len(parts) != 3:
        return None
    command, cwd, argument = (part.strip() for part in parts)
    if not argument:
        return None
    return SelectionRecord(command=command, cwd=cwd, argument=argument)


def parse_location(argument: str) -> SearchLocation | None:
    """Split ``path:line:column[:text]`` into its parts, or ``None``."""
    match = _LOCATION_RE.match(argument.strip())
    if match is None:
        return None
    return SearchLocation(
        path=match.group("path"),
        line=int(match.group("line")),
        column=int(match.group("column")),
    )


def resolve_path(argument: str, cwd: str) -> Path | None:
    """Resolve ``argument`` against ``cwd`` and return it only if it exists."""
    candidate = argument if os.path.isabs(argument) else os.path.join(cwd, argument)
    path = Path(candidate)
    if not path.exists():
        return None
    return path
