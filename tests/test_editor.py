from __future__ import annotations

import os
import unittest
from pathlib import Path
from unittest import mock

from fzfopen.editor import editor_command, launch_editor, resolve_editor
from fzfopen.host import Position


class ResolveEditorTests(unittest.TestCase):
    def test_configured_editor_wins(self) -> None:
        with mock.patch.dict(os.environ, {"VISUAL": "nvim", "EDITOR": "vi"}):
            self.assertEqual(resolve_editor("code --wait"), ["code", "--wait"])

    def test_visual_before_editor(self) -> None:
        with mock.patch.dict(os.environ, {"VISUAL": "nvim", "EDITOR": "vi"}):
            self.assertEqual(resolve_editor(), ["nvim"])
        with mock.patch.dict(os.environ, {"VISUAL": "", "EDITOR": "vi"}):
            self.assertEqual(resolve_editor(), ["vi"])

    def test_nothing_configured(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(resolve_editor(), [])


class EditorCommandTests(unittest.TestCase):
    def test_without_position_just_opens(self) -> None:
        self.assertEqual(editor_command(["vim"], Path("a.py")), ["vim", "a.py"])

    def test_position_syntax_depends_on_editor(self) -> None:
        position = Position(line=9, column=2)
        target = Path("a.py")
        self.assertEqual(editor_command(["vim"], target, position), ["vim", "+10", "a.py"])
        self.assertEqual(
            editor_command(["/usr/bin/code", "--wait"], target, position),
            ["/usr/bin/code", "--wait", "--goto", "a.py:10:3"],
        )
        self.assertEqual(editor_command(["hx"], target, position), ["hx", "a.py:10:3"])


class LaunchEditorTests(unittest.TestCase):
    def test_missing_editor_returns_message(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(launch_editor(Path("a.py")), "Cannot edit: $EDITOR is not set.")

    def test_runs_editor_command(self) -> None:
        with mock.patch("fzfopen.editor.subprocess.run") as run:
            self.assertIsNone(launch_editor(Path("a.py"), Position(0, 0), configured="nano"))
        run.assert_called_once_with(["nano", "+1", "a.py"], check=False)

    def test_launch_failure_returns_message(self) -> None:
        with mock.patch("fzfopen.editor.subprocess.run", side_effect=FileNotFoundError("nope")):
            error = launch_editor(Path("a.py"), configured="nope-editor")
        self.assertEqual(error, "Failed to launch editor: nope")


if __name__ == "__main__":
    unittest.main()
