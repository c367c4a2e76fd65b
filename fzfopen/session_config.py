"""Derived, immutable configuration snapshot used by the command composer.

``build_session_config`` folds user settings, the host's workspace roots, and
the detected shell into one frozen ``SessionConfig``. Sessions replace the
whole snapshot on every configuration change.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from .config import (
    SEARCH_STYLE_CASE_SENSITIVE,
    SEARCH_STYLE_IGNORE_CASE,
    SEARCH_STYLE_SMART_CASE,
    Settings,
)

SEARCH_STYLE_FLAGS = {
    SEARCH_STYLE_CASE_SENSITIVE: "--case-sensitive",
    SEARCH_STYLE_IGNORE_CASE: "--ignore-case",
    SEARCH_STYLE_SMART_CASE: "--smart-case",
}

IGNORE_FILE_FLAG = "--ignore-file .ignore"


@dataclass(frozen=True)
class SessionConfig:
    fuzzy_cmd: str = "fzf"
    enumerator_cmd: str | None = None
    find_directories_cmd: str = "find . -type d"
    rg_flags: str = "--case-sensitive"
    quote: str = "'"
    escape_paths: bool = False
    workspace_roots_arg: str | None = None
    use_workspace_folders_rg: bool = False
    force_ignore_file: bool = False
    close_after_search: bool = False
    initial_cwd: str = ""
    forward_cmd: str = "fzfopen-topipe"
    fuzzy_preview: bool = False


def is_windows(platform: str | None = None) -> bool:
    return (platform or sys.platform) == "win32"


def detect_shell(settings: Settings, platform: str | None = None, env: Mapping[str, str] | None = None) -> str:
    """Return the shell the terminal will run, as precisely as we can tell."""
    if settings.shell.strip():
        return settings.shell.strip()
    env = os.environ if env is None else env
    if is_windows(platform):
        return env.get("COMSPEC", "")
    return env.get("SHELL", "")


def is_cmd_shell(shell: str) -> bool:
    return shell.strip().lower().endswith("cmd.exe")


def search_flags(settings: Settings) -> str:
    """Case-sensitivity flag followed by the user's extra ``rg`` options."""
    style_flag = SEARCH_STYLE_FLAGS.get(settings.ripgrep_search_style, "--case-sensitive")
    options = settings.ripgrep_options.strip()
    return f"{style_flag} {options}" if options else style_flag


def quote_text(text: str, quote: str) -> str:
    """Wrap ``text`` in ``quote``, escaping embedded quote characters."""
    if quote == "'":
        return "'" + text.replace("'", "'\\''") + "'"
    return quote + text.replace(quote, "\\" + quote) + quote


def build_session_config(
    settings: Settings,
    workspace_roots: Sequence[str] = (),
    *,
    platform: str | None = None,
    env: Mapping[str, str] | None = None,
) -> SessionConfig:
    """Compute a complete snapshot from settings and host state.

    On Windows ``cmd.exe`` has no single-quote strings, so it gets double
    quotes and no backslash doubling; every other Windows shell keeps single
    quotes and needs backslashes doubled. Other platforms never escape.
    """
    quote = "'"
    escape_paths = False
    if is_windows(platform):
        windows_cmd = is_cmd_shell(detect_shell(settings, platform, env))
        quote = '"' if windows_cmd else "'"
        escape_paths = not windows_cmd

    roots_arg: str | None = None
    enumerator_cmd: str | None = None
    if (settings.use_workspace_folders_fzf or settings.use_workspace_folders_rg) and workspace_roots:
        roots_arg = " ".join(quote_text(str(root), quote) for root in workspace_roots)
        if settings.use_workspace_folders_fzf:
            ignore = f" {IGNORE_FILE_FLAG}" if settings.force_ignore_file else ""
            enumerator_cmd = f"fd . {roots_arg} --type f{ignore}"

    return SessionConfig(
        fuzzy_cmd=settings.fuzzy_cmd,
        enumerator_cmd=enumerator_cmd,
        find_directories_cmd=settings.find_directories_cmd,
        rg_flags=search_flags(settings),
        quote=quote,
        escape_paths=escape_paths,
        workspace_roots_arg=roots_arg,
        use_workspace_folders_rg=settings.use_workspace_folders_rg,
        force_ignore_file=settings.force_ignore_file,
        close_after_search=settings.close_terminal_after_search,
        initial_cwd=settings.initial_working_directory,
        forward_cmd=settings.forward_cmd,
        fuzzy_preview=settings.fuzzy_preview,
    )
