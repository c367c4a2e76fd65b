"""Session context: configuration snapshot, terminals, and the channel.

A ``Session`` is created at startup, mutated only by configuration-change and
terminal-close events, and torn down with ``shutdown``. Commands compose their
pipeline from the snapshot current at invocation time.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping

from .bridge import SelectionChannel, create_channel
from .compose import build_cd_command, build_file_open_pipeline, build_folder_add_pipeline, build_search_pipeline
from .config import Settings, load_settings
from .dispatch import ActionDispatcher
from .host import EditorHost, Terminal
from .session_config import SessionConfig, build_session_config
from .terminals import TERMINAL_NAME, TERMINAL_NAME_PWD, ManagedTerminals

logger = logging.getLogger(__name__)

SEARCH_PROMPT = "Search pattern"


class Session:
    COMMANDS = {
        "runFzfFile": ("run_file_open", False),
        "runFzfFilePwd": ("run_file_open", True),
        "runFzfAddWorkspaceFolder": ("run_folder_add", False),
        "runFzfAddWorkspaceFolderPwd": ("run_folder_add", True),
        "runFzfSearch": ("run_search_prompt", False),
        "runFzfSearchPwd": ("run_search_prompt", True),
    }

    def __init__(
        self,
        host: EditorHost,
        channel: SelectionChannel | None = None,
        settings_loader: Callable[[], Settings] = load_settings,
        platform: str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self.host = host
        self.channel = channel
        self.settings = Settings()
        self.config = SessionConfig()
        self.terminals = ManagedTerminals()
        self.dispatcher = ActionDispatcher(host, lambda: self.config, self.terminals)
        self._settings_loader = settings_loader
        self._platform = platform
        self._env = env

    @property
    def address(self) -> str | None:
        return self.channel.address if self.channel is not None else None

    async def start(self) -> str | None:
        """Load configuration and open the selection channel.

        Returns the channel address, or ``None`` when no channel could be
        created (pipelines still compose, selections just go nowhere).
        """
        self.apply_config()
        if self.channel is None:
            self.channel = create_channel(self.settings.transport)
        self.channel.on_record(self.dispatcher.handle)
        return await self.channel.open()

    async def shutdown(self) -> None:
        if self.channel is not None:
            await self.channel.close()

    def apply_config(self) -> SessionConfig:
        """Recompute the whole snapshot and swap it in."""
        settings = self._settings_loader()
        roots = [str(root) for root in self.host.workspace_roots()]
        config = build_session_config(settings, roots, platform=self._platform, env=self._env)
        self.settings, self.config = settings, config
        logger.debug("Applied configuration: %s", config)
        return config

    def on_configuration_changed(self) -> None:
        self.apply_config()

    def on_terminal_closed(self, terminal: Terminal) -> None:
        self.terminals.forget(terminal)

    def run_command(self, name: str) -> None:
        try:
            method_name, pwd = self.COMMANDS[name]
        except KeyError:
            raise ValueError(f"unknown command: {name}") from None
        getattr(self, method_name)(pwd=pwd)

    def run_file_open(self, pwd: bool = False) -> Terminal:
        terminal = self._terminal(pwd)
        terminal.send_text(build_file_open_pipeline(self.config, self.address))
        return terminal

    def run_folder_add(self, pwd: bool = False) -> Terminal:
        terminal = self._terminal(pwd)
        terminal.send_text(build_folder_add_pipeline(self.config, self.address))
        return terminal

    def run_search(self, pattern: str, pwd: bool = False) -> Terminal:
        terminal = self._terminal(pwd)
        terminal.send_text(build_search_pipeline(self.config, self.address, pattern))
        return terminal

    def run_search_prompt(self, pwd: bool = False) -> Terminal | None:
        """Prompt for a pattern (seeded with the word at the cursor) and search."""
        pattern = self.host.prompt(SEARCH_PROMPT, self.host.word_at_cursor())
        if pattern is None:
            return None
        return self.run_search(pattern, pwd=pwd)

    def _initial_cwd(self) -> str:
        if self.config.initial_cwd:
            return self.config.initial_cwd
        document = self.host.active_document_path()
        if document is not None:
            return str(document.parent)
        return ""

    def _terminal(self, pwd: bool) -> Terminal:
        name = TERMINAL_NAME_PWD if pwd else TERMINAL_NAME
        terminal = self.terminals.show(self.host, name, self._initial_cwd())
        if pwd:
            document = self.host.active_document_path()
            if document is not None:
                terminal.send_text(build_cd_command(self.config, str(document.parent)))
        return terminal