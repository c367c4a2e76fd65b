"""fzfopen: pick files, folders, and search hits with fzf and open them.

The CLI lives in ``fzfopen.cli``; embedders drive ``fzfopen.session.Session``
with their own ``EditorHost``.
"""

from __future__ import annotations

__version__ = "0.1.0"


def main(*args, **kwargs):
    """Run the ``fzfopen`` command line (imported on first use)."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = ["__version__", "main"]
