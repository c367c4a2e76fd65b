"""Tracking for the two terminals fzfopen runs its pipelines in."""

from __future__ import annotations

from .host import EditorHost, Terminal

TERMINAL_NAME = "fzf terminal"
TERMINAL_NAME_PWD = "fzf pwd terminal"
MANAGED_TERMINAL_NAMES = (TERMINAL_NAME, TERMINAL_NAME_PWD)


class ManagedTerminals:
    """Handles for the workspace terminal and the current-file-directory one.

    Each name owns its own slot; forgetting one never touches the other.
    """

    def __init__(self) -> None:
        self._handles: dict[str, Terminal | None] = {name: None for name in MANAGED_TERMINAL_NAMES}

    def get(self, name: str) -> Terminal | None:
        return self._handles.get(name)

    def show(self, host: EditorHost, name: str, cwd: str) -> Terminal:
        """Reuse, adopt, or create the terminal called ``name`` and show it."""
        terminal = self._handles.get(name)
        if terminal is None:
            terminal = next((term for term in host.terminals() if term.name == name), None)
        if terminal is None:
            terminal = host.create_terminal(name, cwd)
        self._handles[name] = terminal
        terminal.show()
        return terminal

    def forget(self, terminal: Terminal) -> None:
        """Drop the handle matching a terminal the host reported closed."""
        if terminal.name in self._handles:
            self._handles[terminal.name] = None

    def hide_active(self, host: EditorHost) -> None:
        active = host.active_terminal()
        if active is None:
            return
        tracked = self._handles.get(active.name)
        if tracked is not None:
            tracked.hide()
