"""Byte-exact source file reads and atomic writes"""

import os
import shutil
import tempfile
from pathlib import Path


def read_source(path: Path) -> str:
    """Read path as UTF-8 without newline translation, so byte offsets match the file."""
    return path.read_bytes().decode('utf-8')


def atomic_write_text(path: Path, text: str) -> None:
    """Replace path's content with text via a temp file in the same directory.

    On failure the temp file is removed and path keeps its previous content.
    """
    tmp = tempfile.NamedTemporaryFile(
        mode='wb', dir=path.parent, prefix=f".{path.name}.", suffix='.tmp', delete=False,
    )
    try:
        with tmp:
            tmp.write(text.encode('utf-8'))
            tmp.flush()
            os.fsync(tmp.fileno())
        if path.exists():
            shutil.copymode(path, tmp.name)
        os.replace(tmp.name, path)
    except BaseException:
        Path(tmp.name).unlink(missing_ok=True)
        raise
