"""``fzf --preview`` helper.

Renders the candidate under the selector cursor: a directory listing, or a
window of a file centered on the search hit with syntax highlighting.
Terminal control bytes are neutralized so previews cannot move the cursor.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.util import ClassNotFound

from .records import parse_location, resolve_path

DEFAULT_PREVIEW_LINES = 40
DEFAULT_STYLE = "monokai"
BINARY_SNIFF_BYTES = 8192

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")

DIR_COLOR = "\033[1;34m"
MARK_COLOR = "\033[1;33m"
GUTTER_COLOR = "\033[2;38;5;245m"
RESET = "\033[0m"


def read_text(path: Path) -> str:
    """Read text using tolerant encoding fallback order."""
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("utf-8", errors="replace")


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source
    return _CONTROL_RE.sub(lambda match: f"\\x{ord(match.group()):02x}", source)


def is_binary(path: Path) -> bool:
    try:
        with path.open("rb") as handle:
            return b"\0" in handle.read(BINARY_SNIFF_BYTES)
    except OSError:
        return False


def preview_height(env: dict[str, str] | None = None) -> int:
    env = os.environ if env is None else env
    try:
        return max(1, int(env.get("FZF_PREVIEW_LINES", "")))
    except ValueError:
        return DEFAULT_PREVIEW_LINES


def colorize(source: str, path: Path, style: str = DEFAULT_STYLE) -> str:
    try:
        lexer = get_lexer_for_filename(path.name, source, stripnl=False)
    except ClassNotFound:
        lexer = TextLexer(stripnl=False)
    try:
        formatter = TerminalFormatter(style=style)
    except ClassNotFound:
        formatter = TerminalFormatter()
    return highlight(source, lexer, formatter)


def resolve_target(target: str, cwd: str) -> tuple[Path, int | None] | None:
    """Find the file behind a candidate line: ``path`` or ``path:line:col[:text]``."""
    location = parse_location(target)
    if location is not None:
        path = resolve_path(location.path, cwd)
        if path is not None:
            return path, location.line
    path = resolve_path(target.strip(), cwd)
    if path is None:
        return None
    return path, None


def render_directory(path: Path, height: int, no_color: bool = False) -> str:
    try:
        entries = sorted(os.scandir(path), key=lambda entry: (not entry.is_dir(), entry.name.lower()))
    except OSError as exc:
        return f"<error: {exc}>\n"
    rows: list[str] = []
    for entry in entries[:height]:
        if entry.is_dir():
            rows.append(entry.name + "/" if no_color else f"{DIR_COLOR}{entry.name}/{RESET}")
        else:
            rows.append(entry.name)
    if len(entries) > height:
        rows.append(f"... {len(entries) - height} more")
    return "\n".join(rows) + "\n"


def render_file(path: Path, line: int | None, height: int, style: str = DEFAULT_STYLE, no_color: bool = False) -> str:
    if is_binary(path):
        return f"Binary file: {path}\n"
    lines = sanitize_terminal_text(read_text(path)).splitlines()
    target = max(1, line) if line is not None else 1
    start = max(0, target - 1 - height // 3) if line is not None else 0
    window = lines[start : start + height]
    if not window:
        return ""
    text = "\n".join(window) + "\n"
    rendered = text if no_color else colorize(text, path, style)
    rows = rendered.splitlines()
    width = len(str(start + len(rows)))
    out: list[str] = []
    for offset, row in enumerate(rows):
        number = start + offset + 1
        marker = ">" if line is not None and number == target else " "
        if no_color:
            out.append(f"{marker}{number:>{width}} {row}")
        else:
            color = MARK_COLOR if marker == ">" else GUTTER_COLOR
            out.append(f"{color}{marker}{number:>{width}}{RESET} {row}")
    return "\n".join(out) + "\n"


def render_preview(
    target: str,
    cwd: str | None = None,
    height: int | None = None,
    style: str = DEFAULT_STYLE,
    no_color: bool = False,
) -> str:
    cwd = os.getcwd() if cwd is None else cwd
    height = preview_height() if height is None else max(1, height)
    resolved = resolve_target(target, cwd)
    if resolved is None:
        return f"No such file: {target.strip()}\n"
    path, line = resolved
    if path.is_dir():
        return render_directory(path, height, no_color)
    return render_file(path, line, height, style, no_color)
