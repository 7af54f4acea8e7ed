from __future__ import annotations

import pytest

from lib_layered_store.domain.layer import LayerEntry, Ownership


class Closable:
    def __init__(self) -> None:
        self.closed = False

    def close(self) -> None:
        self.closed = True


def test_defaults() -> None:
    entry = LayerEntry(source=Closable())
    assert (entry.priority, entry.writeable, entry.ownership) == (0, False, Ownership.SHARED)
    assert entry.label == "Closable"


def test_entries_are_immutable() -> None:
    entry = LayerEntry(source=Closable())
    with pytest.raises(AttributeError):
        entry.priority = 3  # type: ignore[misc]


def test_release_closes_exclusive_source() -> None:
    source = Closable()
    assert LayerEntry(source=source, ownership=Ownership.EXCLUSIVE).release() is True
    assert source.closed is True


def test_release_leaves_shared_source_open() -> None:
    source = Closable()
    assert LayerEntry(source=source).release() is False
    assert source.closed is False


def test_release_ignores_sources_without_close() -> None:
    assert LayerEntry(source=object(), ownership=Ownership.EXCLUSIVE).release() is False
