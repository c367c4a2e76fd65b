"""Narrow editor-host surface consumed by sessions and the dispatcher.

Anything that owns terminals and documents can drive fzfopen by implementing
these two protocols; ``fzfopen.standalone`` is the terminal-only version.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


@dataclass(frozen=True)
class Position:
    """Zero-based caret position."""

    line: int
    column: int


class Terminal(Protocol):
    name: str

    def show(self) -> None: ...

    def hide(self) -> None: ...

    def send_text(self, text: str) -> None:
        """Send ``text`` followed by a newline for execution."""
        ...


class EditorHost(Protocol):
    def terminals(self) -> list[Terminal]: ...

    def create_terminal(self, name: str, cwd: str) -> Terminal: ...

    def active_terminal(self) -> Terminal | None: ...

    def open_document(self, path: Path, position: Position | None = None) -> None:
        """Open ``path``; with ``position``, place the caret there and reveal it."""
        ...

    def workspace_roots(self) -> list[Path]: ...

    def add_workspace_root(self, path: Path) -> None:
        """Append ``path`` after the existing workspace roots."""
        ...

    def focus_explorer(self) -> None: ...

    def active_document_path(self) -> Path | None: ...

    def word_at_cursor(self) -> str | None:
        """Selected text, or the word under the caret when nothing is selected."""
        ...

    def prompt(self, message: str, value: str | None = None) -> str | None:
        """Ask for a line of text; ``None`` means the prompt was dismissed."""
        ...
