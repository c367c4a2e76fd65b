"""Selector preview rendering tests.

Uses ``no_color`` for exact-text assertions, plus one colored smoke check.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from fzfopen.preview import preview_height, render_preview, resolve_target, sanitize_terminal_text


class ResolveTargetTests(unittest.TestCase):
    def test_plain_path_and_search_hit(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "a.py"
            target.write_text("x = 1\n", encoding="utf-8")

            self.assertEqual(resolve_target("a.py", tmp), (target, None))
            self.assertEqual(resolve_target("a.py:1:3:x = 1", tmp), (target, 1))
            self.assertIsNone(resolve_target("missing.py", tmp))


class RenderFileTests(unittest.TestCase):
    def test_window_marks_hit_line(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "notes.txt"
            path.write_text("".join(f"line {n}\n" for n in range(1, 31)), encoding="utf-8")

            out = render_preview("notes.txt:20:1", cwd=tmp, height=6, no_color=True)

            self.assertEqual(
                out.splitlines(),
                [
                    " 18 line 18",
                    " 19 line 19",
                    ">20 line 20",
                    " 21 line 21",
                    " 22 line 22",
                    " 23 line 23",
                ],
            )

    def test_plain_file_starts_at_top_and_keeps_blank_lines(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            (Path(tmp) / "a.txt").write_text("one\n\nthree\n", encoding="utf-8")
            out = render_preview("a.txt", cwd=tmp, height=10, no_color=True)
            self.assertEqual(out.splitlines(), [" 1 one", " 2 ", " 3 three"])

    def test_colored_output_contains_ansi(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            (Path(tmp) / "a.py").write_text("def main():\n    return 1\n", encoding="utf-8")
            out = render_preview("a.py", cwd=tmp, height=10)
            self.assertIn("\033[", out)
            self.assertIn("main", out)

    def test_binary_file_is_not_dumped(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            (Path(tmp) / "blob.bin").write_bytes(b"\x00\x01\x02")
            out = render_preview("blob.bin", cwd=tmp, no_color=True)
            self.assertTrue(out.startswith("Binary file:"))

    def test_missing_target_is_reported(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            self.assertEqual(render_preview("gone.txt", cwd=tmp), "No such file: gone.txt\n")


class RenderDirectoryTests(unittest.TestCase):
    def test_directories_first_and_overflow_count(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "zeta").mkdir()
            for name in ("a.txt", "b.txt", "c.txt"):
                (root / name).write_text("", encoding="utf-8")

            out = render_preview(tmp, cwd=tmp, height=3, no_color=True)

            self.assertEqual(out.splitlines(), ["zeta/", "a.txt", "b.txt", "... 1 more"])


class HelperTests(unittest.TestCase):
    def test_control_bytes_are_escaped(self) -> None:
        self.assertEqual(sanitize_terminal_text("a\x1b[2Jb\tc"), "a\\x1b[2Jb\tc")

    def test_preview_height_reads_fzf_environment(self) -> None:
        self.assertEqual(preview_height({"FZF_PREVIEW_LINES": "12"}), 12)
        self.assertEqual(preview_height({"FZF_PREVIEW_LINES": "junk"}), 40)
        self.assertEqual(preview_height({}), 40)


if __name__ == "__main__":
    unittest.main()
