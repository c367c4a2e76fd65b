"""Command-line front door for fzfopen.

Parses CLI options, configures logging, and loads settings.
Then runs a pipeline in the current terminal, prints a composed pipeline,
keeps a listening session alive, or renders a selector preview.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Callable
from pathlib import Path

from .compose import build_file_open_pipeline, build_folder_add_pipeline, build_search_pipeline
from .config import config_path, load_settings
from .preview import DEFAULT_STYLE, render_preview
from .session import Session
from .session_config import build_session_config
from .standalone import EchoHost, TerminalHost
from .watch import ConfigWatcher

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_POLL_SECONDS = 1.0


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _positive_float(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be > 0")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fzfopen",
        description="Pick files, folders, and search hits with fzf and open them in your editor.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr.")
    commands = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("files", "Fuzzy-find a file and open it."),
        ("folders", "Fuzzy-find a directory and add it to the workspace roots."),
    ):
        sub = commands.add_parser(name, help=help_text)
        sub.add_argument("--from", dest="from_file", metavar="FILE", help="Start in the directory of FILE.")

    search = commands.add_parser("search", help="Search file contents with rg and jump to a hit.")
    search.add_argument("pattern", nargs="?", default=None, help="Pattern to search for (prompted when omitted).")
    search.add_argument("--from", dest="from_file", metavar="FILE", help="Start in the directory of FILE.")

    compose = commands.add_parser("compose", help="Print a pipeline without running it.")
    compose.add_argument("kind", choices=("files", "folders", "search"))
    compose.add_argument("pattern", nargs="?", default="", help="Search pattern for 'search'.")
    compose.add_argument("--address", default="", help="Selection channel address to embed.")

    listen = commands.add_parser("listen", help="Keep a selection channel open and print each action.")
    listen.add_argument(
        "--poll",
        type=_positive_float,
        default=DEFAULT_POLL_SECONDS,
        help="Seconds between settings-file checks.",
    )

    preview = commands.add_parser("preview", help="Render an fzf preview for a candidate line.")
    preview.add_argument("target", help="Candidate: PATH or PATH:LINE:COL[:TEXT].")
    preview.add_argument("--style", default=DEFAULT_STYLE, help="Pygments style name.")
    preview.add_argument("--no-color", action="store_true", help="Disable color output.")
    preview.add_argument("--lines", type=_positive_int, default=None, help="Preview height (default: $FZF_PREVIEW_LINES).")
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)


async def run_selection(host: TerminalHost, command: Callable[[Session], object]) -> Session:
    """Open a session, run ``command`` in the host's terminals, then tear down."""
    session = Session(host, settings_loader=lambda: host.settings)
    await session.start()
    try:
        command(session)
        await host.run_terminals()
    finally:
        await session.shutdown()
    return session


async def listen(host: EchoHost, poll_seconds: float) -> None:
    session = Session(host)
    address = await session.start()
    if address is None:
        raise SystemExit("Could not create a selection channel.")
    print(address, flush=True)
    watcher = ConfigWatcher(config_path())
    try:
        while True:
            await asyncio.sleep(poll_seconds)
            if watcher.changed():
                logger.info("Settings changed, reapplying")
                session.on_configuration_changed()
                host.settings = session.settings
    finally:
        await session.shutdown()


def _compose(kind: str, pattern: str, address: str) -> str:
    settings = load_settings()
    config = build_session_config(settings, settings.workspace_roots)
    if kind == "files":
        return build_file_open_pipeline(config, address)
    if kind == "folders":
        return build_folder_add_pipeline(config, address)
    return build_search_pipeline(config, address, pattern)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run the requested fzfopen command."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    if args.command == "preview":
        sys.stdout.write(render_preview(args.target, height=args.lines, style=args.style, no_color=args.no_color))
        return

    if args.command == "compose":
        if args.kind == "search" and not args.pattern:
            raise SystemExit("compose search needs a pattern.")
        print(_compose(args.kind, args.pattern, args.address))
        return

    settings = load_settings()
    if args.command == "listen":
        try:
            asyncio.run(listen(EchoHost(settings), args.poll))
        except KeyboardInterrupt:
            pass
        return

    active_document: Path | None = None
    if args.from_file:
        active_document = Path(args.from_file).resolve()
        if not active_document.exists():
            raise SystemExit(f"Path not found: {args.from_file}")
    pwd = active_document is not None
    host = TerminalHost(settings, active_document=active_document)

    if args.command == "files":
        command: Callable[[Session], object] = lambda session: session.run_file_open(pwd=pwd)
    elif args.command == "folders":
        command = lambda session: session.run_folder_add(pwd=pwd)
    elif args.pattern is not None:
        pattern = args.pattern
        command = lambda session: session.run_search(pattern, pwd=pwd)
    else:
        command = lambda session: session.run_search_prompt(pwd=pwd)

    try:
        asyncio.run(run_selection(host, command))
    except OSError as exc:
        raise SystemExit(f"Selection channel failed: {exc}") from exc
    except KeyboardInterrupt:
        return

    errors = host.launch_opened()
    if errors:
        raise SystemExit("\n".join(errors))


if __name__ == "__main__":
    main()
