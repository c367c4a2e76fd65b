"""Pipeline string tests for ``fzfopen.compose``.

Pipelines are pure functions of the configuration snapshot, so these tests
assert exact strings without spawning anything.
"""

from __future__ import annotations

import unittest

from fzfopen import compose
from fzfopen.config import Settings
from fzfopen.session_config import SessionConfig, build_session_config

ADDRESS = "/tmp/fzf-pipe-42"


class FileOpenPipelineTests(unittest.TestCase):
    def test_default_pipeline_feeds_selector_into_forwarder(self) -> None:
        config = build_session_config(Settings(), platform="linux")
        self.assertEqual(
            compose.build_file_open_pipeline(config, ADDRESS),
            "fzf | fzfopen-topipe open /tmp/fzf-pipe-42",
        )

    def test_workspace_enumerator_precedes_selector(self) -> None:
        settings = Settings(use_workspace_folders_fzf=True, force_ignore_file=True)
        config = build_session_config(settings, ["/w/one", "/w/two"], platform="linux")
        self.assertEqual(
            compose.build_file_open_pipeline(config, ADDRESS),
            "fd . '/w/one' '/w/two' --type f --ignore-file .ignore | fzf | fzfopen-topipe open /tmp/fzf-pipe-42",
        )

    def test_missing_channel_still_composes(self) -> None:
        config = build_session_config(Settings(), platform="linux")
        self.assertEqual(compose.build_file_open_pipeline(config, None), "fzf | fzfopen-topipe open")

    def test_preview_flag_adds_quoted_preview_command(self) -> None:
        config = build_session_config(Settings(fuzzy_preview=True), platform="linux")
        self.assertEqual(
            compose.build_file_open_pipeline(config, ADDRESS),
            "fzf --preview 'fzfopen preview {}' | fzfopen-topipe open /tmp/fzf-pipe-42",
        )


class FolderAddPipelineTests(unittest.TestCase):
    def test_folder_pipeline_skips_file_enumerator(self) -> None:
        settings = Settings(use_workspace_folders_fzf=True, find_directories_cmd="fd --type d")
        config = build_session_config(settings, ["/w"], platform="linux")
        self.assertEqual(
            compose.build_folder_add_pipeline(config, ADDRESS),
            "fd --type d | fzf | fzfopen-topipe add /tmp/fzf-pipe-42",
        )


class SearchPipelineTests(unittest.TestCase):
    def test_default_search_pipeline(self) -> None:
        config = build_session_config(Settings(), platform="linux")
        self.assertEqual(
            compose.build_search_pipeline(config, ADDRESS, "needle"),
            "rg 'needle' --case-sensitive --vimgrep --color ansi | fzf --ansi"
            ' | fzfopen-topipe rg "/tmp/fzf-pipe-42"',
        )

    def test_search_roots_flags_and_ignore_file(self) -> None:
        settings = Settings(
            use_workspace_folders_rg=True,
            force_ignore_file=True,
            ripgrep_search_style="smart-case",
            ripgrep_options="--hidden -g '!*.min.js'",
        )
        config = build_session_config(settings, ["/w"], platform="linux")
        self.assertEqual(
            compose.build_search_pipeline(config, ADDRESS, "todo"),
            "rg 'todo' '/w' --smart-case --hidden -g '!*.min.js' --vimgrep --color ansi --ignore-file .ignore"
            ' | fzf --ansi | fzfopen-topipe rg "/tmp/fzf-pipe-42"',
        )

    def test_roots_only_restrict_search_when_enabled(self) -> None:
        config = build_session_config(Settings(use_workspace_folders_fzf=True), ["/w"], platform="linux")
        self.assertNotIn("'/w'", compose.build_search_pipeline(config, ADDRESS, "x").split("|")[0])

    def test_pattern_is_wrapped_in_configured_quote(self) -> None:
        for quote in ("'", '"'):
            config = SessionConfig(quote=quote)
            for pattern in ("foo", "a b", "def main\\(", "x|y"):
                with self.subTest(quote=quote, pattern=pattern):
                    command = compose.build_search_pipeline(config, ADDRESS, pattern)
                    self.assertIn(f"rg {quote}{pattern}{quote} ", command)

    def test_quote_characters_in_roots_are_escaped(self) -> None:
        settings = Settings(use_workspace_folders_rg=True)
        config = build_session_config(settings, ["/w/it's here"], platform="linux")
        command = compose.build_search_pipeline(config, ADDRESS, "x")
        self.assertIn("'/w/it'\\''s here'", command)

    def test_quote_characters_in_pattern_are_escaped(self) -> None:
        config = SessionConfig(quote="'")
        self.assertEqual(compose.quote_argument(config, "don't"), "'don'\\''t'")
        config = SessionConfig(quote='"')
        self.assertEqual(compose.quote_argument(config, 'say "hi"'), '"say \\"hi\\""')


class WindowsEscapingTests(unittest.TestCase):
    def test_cmd_shell_uses_double_quotes_without_escaping(self) -> None:
        settings = Settings(shell="C:\\Windows\\System32\\cmd.exe", forward_cmd="C:\\tools\\topipe.bat")
        config = build_session_config(settings, platform="win32", env={})
        address = "\\\\.\\pipe\\fzf-pipe-7"
        self.assertEqual(
            compose.build_search_pipeline(config, address, "needle"),
            'rg "needle" --case-sensitive --vimgrep --color ansi | fzf --ansi'
            ' | C:\\tools\\topipe.bat rg "\\\\.\\pipe\\fzf-pipe-7"',
        )

    def test_other_windows_shells_double_backslashes(self) -> None:
        settings = Settings(shell="C:\\Program Files\\Git\\bin\\bash.exe", forward_cmd="C:\\tools\\topipe.sh")
        config = build_session_config(settings, platform="win32", env={})
        self.assertEqual(
            compose.build_file_open_pipeline(config, "\\\\.\\pipe\\fzf-pipe-7"),
            "fzf | C:\\\\tools\\\\topipe.sh open \\\\\\\\.\\\\pipe\\\\fzf-pipe-7",
        )

    def test_posix_never_escapes(self) -> None:
        config = build_session_config(Settings(forward_cmd="a\\b"), platform="linux")
        self.assertEqual(compose.escape_path(config, "a\\b"), "a\\b")


class CdCommandTests(unittest.TestCase):
    def test_cd_quotes_directory(self) -> None:
        config = SessionConfig()
        self.assertEqual(compose.build_cd_command(config, "/src/my dir"), "cd '/src/my dir'")


if __name__ == "__main__":
    unittest.main()
