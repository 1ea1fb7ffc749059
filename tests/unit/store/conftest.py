"""Shared fixtures for store unit tests"""

import pytest
from sqlalchemy import create_engine
from sqlmodel import SQLModel

from mdview.store.backend import SQLBackend
from mdview.store import tables  # noqa: F401


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="sql_backend")
def sql_backend_fixture(engine):
    return SQLBackend(engine)


@pytest.fixture(name="files")
def files_fixture(tmp_path):
    """Three existing markdown files."""
    paths = []
    for name in ("a.md", "b.md", "c.md"):
        p = tmp_path / name
        p.write_text(f"# {name}\n")
        paths.append(p)
    return paths
