"""Recently opened and currently open file lists, persisted through a SettingsBackend"""

import logging
import os
from pathlib import Path

from mdview.store.backend import SettingsBackend


logger = logging.getLogger(__name__)

RECENT_FILES_KEY = "recentFiles"
OPEN_FILES_KEY = "openFiles"
DEFAULT_MAX_RECENT_FILES = 10


def _normalize(path: str | os.PathLike) -> Path:
    return Path(path).expanduser().absolute()


def _existing(paths: list[str] | None) -> list[Path]:
    """Stored paths that still exist, without duplicates, in stored order."""
    result: list[Path] = []
    for raw in paths or []:
        path = _normalize(raw)
        if path in result:
            continue
        if not path.exists():
            logger.debug("Dropping missing file %s", path)
            continue
        result.append(path)
    return result


class RecentFilesStore:
    """Most-recent-first list of opened files, capped at max_recent_files."""

    def __init__(self, backend: SettingsBackend, max_recent_files: int = DEFAULT_MAX_RECENT_FILES):
        self.backend = backend
        self.max_recent_files = max_recent_files
        self._files = _existing(backend.load(RECENT_FILES_KEY))[:max_recent_files]

    @property
    def recent_files(self) -> list[Path]:
        return list(self._files)

    def add(self, path: str | os.PathLike) -> None:
        path = _normalize(path)
        self._files = [path] + [p for p in self._files if p != path]
        del self._files[self.max_recent_files:]
        self._save()

    def clear(self) -> None:
        self._files = []
        self._save()

    def _save(self) -> None:
        self.backend.save(RECENT_FILES_KEY, [str(p) for p in self._files])


class OpenFilesStore:
    """Files open in the viewer, kept in display order."""

    def __init__(self, backend: SettingsBackend):
        self.backend = backend
        self._files = _existing(backend.load(OPEN_FILES_KEY))

    @property
    def open_files(self) -> list[Path]:
        return list(self._files)

    def set(self, paths: list[str | os.PathLike]) -> None:
        """Replace the stored list; duplicates and missing files are dropped."""
        self._files = _existing([os.fspath(p) for p in paths])
        self.backend.save(OPEN_FILES_KEY, [str(p) for p in self._files])
