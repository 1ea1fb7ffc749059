"""Unit tests for store/backend.py and store/database.py"""

from sqlalchemy import inspect

from mdview.store.backend import MemoryBackend
from mdview.store.database import init_db, make_engine


def test_memory_backend_roundtrip():
    """Saved values load back; unknown keys load as None."""
    backend = MemoryBackend()
    assert backend.load("missing") is None
    backend.save("recentFiles", ["/a.md"])
    assert backend.load("recentFiles") == ["/a.md"]


def test_memory_backend_copies_values():
    """Mutating a loaded or saved value does not change what is stored."""
    backend = MemoryBackend()
    value = ["/a.md"]
    backend.save("k", value)
    value.append("/b.md")
    backend.load("k").append("/c.md")
    assert backend.load("k") == ["/a.md"]


def test_sql_backend_roundtrip(sql_backend):
    """JSON values persist per key and can be overwritten."""
    assert sql_backend.load("openFiles") is None
    sql_backend.save("openFiles", ["/a.md", "/b.md"])
    sql_backend.save("openFiles", ["/b.md"])
    sql_backend.save("other", {"nested": [1, 2]})
    assert sql_backend.load("openFiles") == ["/b.md"]
    assert sql_backend.load("other") == {"nested": [1, 2]}


def test_init_db_creates_settings_table(tmp_path):
    """init_db creates the settings table on a fresh database file."""
    engine = make_engine(f"sqlite:///{tmp_path}/settings.db")
    init_db(engine)
    assert "settings" in inspect(engine).get_table_names()
