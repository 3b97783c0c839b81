"""Shared fixtures for gamelib tests."""

import itertools
import threading
from datetime import datetime, timedelta, timezone

import pytest

from gamelib import Artifact, GameLibrary


def make_clock(start=datetime(2024, 1, 1, tzinfo=timezone.utc)):
    """Clock that advances one second per call, so every write gets its own timestamp."""
    ticks = itertools.count()
    lock = threading.Lock()

    def now():
        with lock:
            tick = next(ticks)
        return (start + timedelta(seconds=tick)).isoformat(timespec='microseconds')

    return now


def make_artifact(name="foo.vmod", size=1024):
    return Artifact(
        url=f"https://example.org/files/{name}",
        filename=name,
        size=size,
        checksum="d41d8cd98f00b204e9800998ecf8427e",
    )


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / 'library.db'


@pytest.fixture
def lib(db_path):
    """Library on a fresh database, with users alice (owner of Foo) and bob."""
    library = GameLibrary(db_path=db_path, config={}, now=make_clock())
    library.create_user("alice")
    library.create_user("bob")
    library.create_project("Foo", creator="alice")
    return library


@pytest.fixture
def artifact():
    return make_artifact()
