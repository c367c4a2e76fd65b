"""Terminal-only editor host used by the ``fzfopen`` command line.

Terminals are batches of shell lines run in the foreground of the current
tty, so the fuzzy selector gets the keyboard. Opened documents are queued and
handed to ``$EDITOR`` once the selector has released the terminal.
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import TextIO

from .config import Settings, save_workspace_roots
from .editor import launch_editor
from .host import Position

logger = logging.getLogger(__name__)

# Time for a record written just before the shell exited to reach the channel.
SETTLE_SECONDS = 0.1


class ShellTerminal:
    def __init__(self, name: str, cwd: str = "", shell: str = "") -> None:
        self.name = name
        self.cwd = cwd
        self.shell = shell
        self.visible = False
        self.returncode: int | None = None
        self._lines: list[str] = []

    def show(self) -> None:
        self.visible = True

    def hide(self) -> None:
        self.visible = False

    def send_text(self, text: str) -> None:
        self._lines.append(text)

    @property
    def pending(self) -> list[str]:
        return list(self._lines)

    def script(self) -> str:
        separator = " & " if os.name == "nt" else "\n"
        return separator.join(self._lines)

    async def run(self) -> int:
        """Run everything sent so far in one foreground shell."""
        script = self.script()
        self._lines.clear()
        if not script:
            return 0
        kwargs: dict[str, object] = {}
        if self.shell and os.name != "nt":
            kwargs["executable"] = self.shell
        logger.debug("Running in %s: %s", self.name, script)
        process = await asyncio.create_subprocess_shell(script, cwd=self.cwd or None, **kwargs)
        self.returncode = await process.wait()
        return self.returncode


class TerminalHost:
    """``EditorHost`` backed by the current terminal and ``$EDITOR``."""

    def __init__(
        self,
        settings: Settings,
        active_document: Path | None = None,
        search_text: str | None = None,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        self.settings = settings
        self.active_document = active_document
        self.search_text = search_text
        self.opened: list[tuple[Path, Position | None]] = []
        self._roots = [Path(root) for root in settings.workspace_roots]
        self._terminals: list[ShellTerminal] = []
        self._active: ShellTerminal | None = None
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout

    def terminals(self) -> list[ShellTerminal]:
        return list(self._terminals)

    def create_terminal(self, name: str, cwd: str) -> ShellTerminal:
        terminal = ShellTerminal(name, cwd, self.settings.shell)
        self._terminals.append(terminal)
        self._active = terminal
        return terminal

    def active_terminal(self) -> ShellTerminal | None:
        return self._active

    def open_document(self, path: Path, position: Position | None = None) -> None:
        self.opened.append((path, position))

    def workspace_roots(self) -> list[Path]:
        return list(self._roots)

    def add_workspace_root(self, path: Path) -> None:
        self._roots.append(path)
        save_workspace_roots([str(root) for root in self._roots])

    def focus_explorer(self) -> None:
        for root in self._roots:
            self._stdout.write(f"{root}\n")
        self._stdout.flush()

    def active_document_path(self) -> Path | None:
        return self.active_document

    def word_at_cursor(self) -> str | None:
        return self.search_text

    def prompt(self, message: str, value: str | None = None) -> str | None:
        label = f"{message} [{value}]: " if value else f"{message}: "
        self._stdout.write(label)
        self._stdout.flush()
        line = self._stdin.readline()
        if not line:
            return None
        answer = line.rstrip("\r\n")
        return answer or value or None

    async def run_terminals(self) -> None:
        for terminal in self._terminals:
            if terminal.pending:
                self._active = terminal
                await terminal.run()
        await asyncio.sleep(SETTLE_SECONDS)

    def launch_opened(self) -> list[str]:
        """Open queued documents in the editor; return error messages."""
        errors: list[str] = []
        opened, self.opened = self.opened, []
        for path, position in opened:
            error = launch_editor(path, position, self.settings.editor)
            if error:
                errors.append(error)
        return errors


class EchoHost(TerminalHost):
    """Prints each resolved action as a line instead of acting on it."""

    def open_document(self, path: Path, position: Position | None = None) -> None:
        if position is None:
            self._stdout.write(f"open {path}\n")
        else:
            self._stdout.write(f"open {path}:{position.line + 1}:{position.column + 1}\n")
        self._stdout.flush()

    def add_workspace_root(self, path: Path) -> None:
        self._roots.append(path)
        self._stdout.write(f"add {path}\n")
        self._stdout.flush()

    def focus_explorer(self) -> None:
        pass
