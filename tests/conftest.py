"""Pytest configuration and shared fixtures for unqlitekv tests."""

import pytest

from unqlitekv import Config, Handle, MemoryEngine, OpenMode, reset_config
from unqlitekv.errors import LibraryNotFoundError

ENV_VARS = ("UNQLITEKV_ENGINE", "UNQLITEKV_LIB_PATH", "UNQLITEKV_AUTO_COMMIT")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Run every test without UNQLITEKV_* settings and with a fresh config cache."""
    for name in ENV_VARS:
        # setenv first so the undo removes anything a .env load adds
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def memory_config() -> Config:
    return Config(engine="memory")


@pytest.fixture
def engine() -> MemoryEngine:
    return MemoryEngine()


@pytest.fixture
def hash_engine() -> MemoryEngine:
    return MemoryEngine(ordered=False)


@pytest.fixture
def db(engine, memory_config):
    """An open in-memory handle."""
    handle = Handle(engine, memory_config)
    assert handle.open(":mem:", OpenMode.CREATE)
    yield handle
    if handle.is_open:
        handle.close()


@pytest.fixture
def abc_db(db):
    """Handle holding a=1, b=2, c=3."""
    for key, value in ((b"a", b"1"), (b"b", b"2"), (b"c", b"3")):
        assert db.store(key, value)
    return db


@pytest.fixture
def native_engine():
    """NativeEngine, or skip when libunqlite is not available."""
    from unqlitekv.native import NativeEngine
    try:
        return NativeEngine()
    except LibraryNotFoundError as e:
        pytest.skip(str(e))
