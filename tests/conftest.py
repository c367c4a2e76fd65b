"""Shared pytest setup.

Puts the repository root on ``sys.path`` so ``import fzfopen`` works from a
bare checkout, and points the settings file at a per-test temp path so no
test reads or writes the user's real configuration.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = str(Path(__file__).resolve().parent.parent)

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    from fzfopen import config

    path = tmp_path / "fzfopen" / "config.json"
    monkeypatch.setattr(config, "CONFIG_PATH", path)
    monkeypatch.delenv(config.CONFIG_ENV_VAR, raising=False)
    return path
