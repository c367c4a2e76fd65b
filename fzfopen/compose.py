"""Shell pipeline builders.

Every function here is pure over a ``SessionConfig`` snapshot and the
channel address: nothing is executed, and the same inputs always produce the
same string. Quoting and path escaping are decided only by the snapshot.
"""

from __future__ import annotations

from .records import TAG_ADD, TAG_OPEN, TAG_SEARCH
from .session_config import IGNORE_FILE_FLAG, SessionConfig, quote_text

PREVIEW_CMD = "fzfopen preview {}"
SEARCH_OUTPUT_FLAGS = "--vimgrep --color ansi"


def _join(*parts: str | None) -> str:
    return " ".join(part for part in parts if part)


def quote_argument(config: SessionConfig, text: str) -> str:
    """Wrap ``text`` in the configured quote character."""
    return quote_text(text, config.quote)


def escape_path(config: SessionConfig, path: str | None) -> str:
    """Double backslashes when the target shell would eat them."""
    if not path:
        return ""
    if config.escape_paths:
        return path.replace("\\", "\\\\")
    return path


def selector_cmd(config: SessionConfig, use_enumerator: bool = True, *extra_flags: str) -> str:
    """Fuzzy selector invocation, optionally fed by the workspace enumerator."""
    preview = f"--preview {quote_argument(config, PREVIEW_CMD)}" if config.fuzzy_preview else None
    selector = _join(config.fuzzy_cmd, *extra_flags, preview)
    if use_enumerator and config.enumerator_cmd:
        return f"{config.enumerator_cmd} | {selector}"
    return selector


def forward_cmd(config: SessionConfig, tag: str, address: str | None, quote_address: bool = False) -> str:
    target = escape_path(config, address)
    if quote_address:
        target = f'"{target}"'
    return _join(escape_path(config, config.forward_cmd), tag, target)


def build_file_open_pipeline(config: SessionConfig, address: str | None) -> str:
    return f"{selector_cmd(config)} | {forward_cmd(config, TAG_OPEN, address)}"


def build_folder_add_pipeline(config: SessionConfig, address: str | None) -> str:
    return _join(
        config.find_directories_cmd,
        "|",
        selector_cmd(config, use_enumerator=False),
        "|",
        forward_cmd(config, TAG_ADD, address),
    )


def build_search_pipeline(config: SessionConfig, address: str | None, pattern: str) -> str:
    """Return the ``rg | fzf | forward`` pipeline for ``pattern``.

    The address is always double-quoted here so escaped backslashes survive
    shells that process them inside double quotes.
    """
    search_roots = config.workspace_roots_arg if config.use_workspace_folders_rg else None
    ignore = IGNORE_FILE_FLAG if config.force_ignore_file else None
    rg = _join(
        "rg",
        quote_argument(config, pattern),
        search_roots,
        config.rg_flags,
        SEARCH_OUTPUT_FLAGS,
        ignore,
    )
    selector = selector_cmd(config, False, "--ansi")
    return f"{rg} | {selector} | {forward_cmd(config, TAG_SEARCH, address, quote_address=True)}"


def build_cd_command(config: SessionConfig, directory: str) -> str:
    return f"cd {quote_argument(config, directory)}"
