"""Persistent JSON settings.

Stores selector/search options and standalone workspace roots.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "fzfopen"
CONFIG_FILENAME = "config.json"
CONFIG_ENV_VAR = "FZFOPEN_CONFIG"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

SEARCH_STYLE_CASE_SENSITIVE = "case-sensitive"
SEARCH_STYLE_IGNORE_CASE = "ignore-case"
SEARCH_STYLE_SMART_CASE = "smart-case"

# Human-readable labels are what the editor settings UI stores.
_SEARCH_STYLE_ALIASES = {
    "case sensitive": SEARCH_STYLE_CASE_SENSITIVE,
    "ignore case": SEARCH_STYLE_IGNORE_CASE,
    "smart case": SEARCH_STYLE_SMART_CASE,
    SEARCH_STYLE_CASE_SENSITIVE: SEARCH_STYLE_CASE_SENSITIVE,
    SEARCH_STYLE_IGNORE_CASE: SEARCH_STYLE_IGNORE_CASE,
    SEARCH_STYLE_SMART_CASE: SEARCH_STYLE_SMART_CASE,
}

TRANSPORTS = ("auto", "fifo", "socket")


@dataclass(frozen=True)
class Settings:
    """User-facing options, already type-checked."""

    fuzzy_cmd: str = "fzf"
    find_directories_cmd: str = "find . -type d"
    use_workspace_folders_fzf: bool = False
    use_workspace_folders_rg: bool = False
    force_ignore_file: bool = False
    close_terminal_after_search: bool = False
    initial_working_directory: str = ""
    ripgrep_search_style: str = SEARCH_STYLE_CASE_SENSITIVE
    ripgrep_options: str = ""
    shell: str = ""
    transport: str = "auto"
    forward_cmd: str = "fzfopen-topipe"
    fuzzy_preview: bool = False
    editor: str = ""
    workspace_roots: tuple[str, ...] = ()


def config_path() -> Path:
    """Return the settings path, honoring ``$FZFOPEN_CONFIG``."""
    override = os.environ.get(CONFIG_ENV_VAR, "").strip()
    if override:
        return Path(override).expanduser()
    return CONFIG_PATH


def load_config() -> dict[str, object]:
    """Read the fzfopen settings file as a JSON object.

    The file is ``$FZFOPEN_CONFIG`` when set, else ``config.json`` in the
    platform config directory. Anything that is not a readable top-level
    object counts as no settings, so every option keeps its default.
    """
    try:
        data = json.loads(config_path().read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Write ``data`` to the settings file (``$FZFOPEN_CONFIG`` honored).

    Parent directories are created as needed. A failed write is dropped;
    the selection already happened and only persisted workspace roots
    are lost.
    """
    path = config_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass


def _str_value(data: dict[str, object], key: str, default: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else default


def _bool_value(data: dict[str, object], key: str, default: bool) -> bool:
    value = data.get(key)
    return value if isinstance(value, bool) else default


def normalize_search_style(value: object) -> str:
    """Map a style key or settings label to a canonical style key.

    Unknown values fall back to case-sensitive search.
    """
    if not isinstance(value, str):
        return SEARCH_STYLE_CASE_SENSITIVE
    return _SEARCH_STYLE_ALIASES.get(value.strip().lower(), SEARCH_STYLE_CASE_SENSITIVE)


def _coerce_roots(value: object) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(item for item in value if isinstance(item, str) and item.strip())


def settings_from_dict(data: dict[str, object]) -> Settings:
    """Build ``Settings`` from decoded JSON, falling back per key."""
    defaults = Settings()
    transport = _str_value(data, "transport", defaults.transport).strip().lower()
    if transport not in TRANSPORTS:
        transport = defaults.transport
    fuzzy_cmd = _str_value(data, "fuzzy_cmd", defaults.fuzzy_cmd).strip() or defaults.fuzzy_cmd
    forward_cmd = _str_value(data, "forward_cmd", defaults.forward_cmd).strip() or defaults.forward_cmd
    return Settings(
        fuzzy_cmd=fuzzy_cmd,
        find_directories_cmd=_str_value(data, "find_directories_cmd", defaults.find_directories_cmd),
        use_workspace_folders_fzf=_bool_value(data, "use_workspace_folders_fzf", defaults.use_workspace_folders_fzf),
        use_workspace_folders_rg=_bool_value(data, "use_workspace_folders_rg", defaults.use_workspace_folders_rg),
        force_ignore_file=_bool_value(data, "force_ignore_file", defaults.force_ignore_file),
        close_terminal_after_search=_bool_value(
            data, "close_terminal_after_search", defaults.close_terminal_after_search
        ),
        initial_working_directory=_str_value(data, "initial_working_directory", defaults.initial_working_directory),
        ripgrep_search_style=normalize_search_style(data.get("ripgrep_search_style", defaults.ripgrep_search_style)),
        ripgrep_options=_str_value(data, "ripgrep_options", defaults.ripgrep_options),
        shell=_str_value(data, "shell", defaults.shell),
        transport=transport,
        forward_cmd=forward_cmd,
        fuzzy_preview=_bool_value(data, "fuzzy_preview", defaults.fuzzy_preview),
        editor=_str_value(data, "editor", defaults.editor),
        workspace_roots=_coerce_roots(data.get("workspace_roots")),
    )


def load_settings() -> Settings:
    """Load settings from the config file."""
    return settings_from_dict(load_config())


def save_workspace_roots(roots: list[str]) -> None:
    """Persist workspace roots, dropping duplicates while keeping order."""
    unique: list[str] = []
    for root in roots:
        if root not in unique:
            unique.append(root)
    config = load_config()
    config["workspace_roots"] = unique
    save_config(config)
