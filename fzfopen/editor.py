"""Editor launch helper for opening a selection outside an IDE.

Runs the configured editor (or ``$VISUAL``/``$EDITOR``) on the chosen file,
adding a line/column jump in the syntax the editor understands.
Returns an error message string instead of raising for CLI-friendly handling.
"""

from __future__ import annotations

import os
import shlex
import subprocess
from pathlib import Path

from .host import Position

# Editors that take ``--goto path:line:col``.
GOTO_EDITORS = frozenset({"code", "code-insiders", "codium", "cursor"})
# Editors that take ``path:line:col`` directly.
SUFFIX_EDITORS = frozenset({"subl", "zed", "hx"})


def resolve_editor(configured: str = "") -> list[str]:
    for value in (configured, os.environ.get("VISUAL", ""), os.environ.get("EDITOR", "")):
        if value.strip():
            return shlex.split(value.strip())
    return []


def editor_command(editor: list[str], target: Path, position: Position | None = None) -> list[str]:
    """Build the argv that opens ``target`` at ``position`` in ``editor``."""
    if position is None:
        return [*editor, str(target)]
    line = position.line + 1
    column = position.column + 1
    program = Path(editor[0]).stem.lower()
    if program in GOTO_EDITORS:
        return [*editor, "--goto", f"{target}:{line}:{column}"]
    if program in SUFFIX_EDITORS:
        return [*editor, f"{target}:{line}:{column}"]
    return [*editor, f"+{line}", str(target)]


def launch_editor(target: Path, position: Position | None = None, configured: str = "") -> str | None:
    cmd = resolve_editor(configured)
    if not cmd:
        return "Cannot edit: $EDITOR is not set."
    try:
        subprocess.run(editor_command(cmd, target, position), check=False)
    except Exception as exc:
        return f"Failed to launch editor: {exc}"
    return None
