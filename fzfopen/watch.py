"""Settings-file change detection.

Long-running sessions poll a cheap stat signature of the settings file and
reapply configuration whenever it changes.
"""

from __future__ import annotations

from pathlib import Path


def config_signature(path: Path) -> tuple[str, int, int, int]:
    """Return a stable stat tuple describing ``path`` existence and metadata."""
    try:
        st = path.stat()
    except FileNotFoundError:
        return ("missing", 0, 0, 0)
    except OSError:
        return ("error", 0, 0, 0)
    return ("ok", st.st_mtime_ns, st.st_size, st.st_mode)


class ConfigWatcher:
    def __init__(self, path: Path) -> None:
        self.path = path
        self._signature = config_signature(path)

    def changed(self) -> bool:
        """Return whether the file changed since the previous call."""
        signature = config_signature(self.path)
        if signature == self._signature:
            return False
        self._signature = signature
        return True
