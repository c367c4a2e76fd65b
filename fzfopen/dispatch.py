"""Turns selection records into editor actions.

Every path is one step: parse, resolve, call the host. Anything that does
not resolve is dropped quietly because a dismissed selector looks exactly
like a malformed record from here.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from .host import EditorHost, Position
from .records import TAG_ADD, TAG_OPEN, TAG_SEARCH, SelectionRecord, parse_location, parse_record, resolve_path
from .session_config import SessionConfig
from .terminals import ManagedTerminals

logger = logging.getLogger(__name__)


class ActionDispatcher:
    def __init__(
        self,
        host: EditorHost,
        config: Callable[[], SessionConfig],
        terminals: ManagedTerminals,
    ) -> None:
        self.host = host
        self._config = config
        self.terminals = terminals

    def handle(self, text: str) -> None:
        """Apply the close-after-search policy, then dispatch ``text``."""
        if self._config().close_after_search:
            self.terminals.hide_active(self.host)

        record = parse_record(text)
        if record is None:
            logger.debug("Dropping empty or malformed record %r", text)
            return
        self.dispatch(record)

    def dispatch(self, record: SelectionRecord) -> None:
        if record.command == TAG_OPEN:
            self._open(record)
        elif record.command == TAG_ADD:
            self._add(record)
        elif record.command == TAG_SEARCH:
            self._goto(record)
        else:
            logger.debug("Ignoring record with unknown tag %r", record.command)

    def _open(self, record: SelectionRecord) -> None:
        path = resolve_path(record.argument, record.cwd)
        if path is None:
            logger.debug("Selected file does not exist: %s", record.argument)
            return
        self.host.open_document(path)

    def _add(self, record: SelectionRecord) -> None:
        folder = resolve_path(record.argument, record.cwd)
        if folder is None:
            logger.debug("Selected folder does not exist: %s", record.argument)
            return
        self.host.add_workspace_root(folder)
        self.host.focus_explorer()

    def _goto(self, record: SelectionRecord) -> None:
        location = parse_location(record.argument)
        if location is None:
            logger.debug("Search hit is not path:line:column: %s", record.argument)
            return
        path = resolve_path(location.path, record.cwd)
        if path is None:
            logger.debug("Search hit file does not exist: %s", location.path)
            return
        self.host.open_document(path, Position(max(0, location.line - 1), max(0, location.column - 1)))
