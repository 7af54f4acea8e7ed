from __future__ import annotations

import pytest

from lib_layered_store.adapters.memory import MappingSource
from lib_layered_store.application import ports
from lib_layered_store.domain.errors import InvalidKey, ReadOnlySource


def test_satisfies_config_source_port() -> None:
    assert isinstance(MappingSource(), ports.ConfigSource)


def test_get_raw_renders_leaves_as_text() -> None:
    source = MappingSource({"feature": {"enabled": True, "ratio": 0.5, "tags": ["a", "b"], "unset": None}})
    assert source.get_raw("feature.enabled") == "true"
    assert source.get_raw("feature.ratio") == "0.5"
    assert source.get_raw("feature.tags") == '["a", "b"]'
    assert source.get_raw("feature.unset") is None
    assert source.get_raw("feature") is None
    assert source.get_raw("feature.enabled.deeper") is None
    assert source.get_raw("") is None


def test_input_mapping_is_copied() -> None:
    data = {"db": {"host": "localhost"}}
    source = MappingSource(data)
    data["db"]["host"] = "changed"
    assert source.get_raw("db.host") == "localhost"


def test_set_raw_creates_branches() -> None:
    source = MappingSource()
    source.set_raw("db.primary.host", "localhost")
    assert source.as_dict() == {"db": {"primary": {"host": "localhost"}}}
    assert source.enumerate("db") == ["primary"]


def test_set_raw_refuses_shape_changes() -> None:
    source = MappingSource({"db": {"host": "localhost"}, "debug": "true"})
    with pytest.raises(InvalidKey):
        source.set_raw("debug.level", "1")
    with pytest.raises(InvalidKey):
        source.set_raw("db", "flat")
    with pytest.raises(InvalidKey):
        source.set_raw("db..host", "x")


def test_read_only_source_rejects_writes() -> None:
    source = MappingSource({"a": "1"}, read_only=True)
    with pytest.raises(ReadOnlySource):
        source.set_raw("a", "2")
    assert source.get_raw("a") == "1"


def test_enumerate_lists_direct_children_only() -> None:
    source = MappingSource({"a": {"b": {"c": 1}}, "d": 2})
    assert source.enumerate() == ["a", "d"]
    assert source.enumerate("a") == ["b"]
    assert source.enumerate("a.b.c") == []
    assert source.enumerate("missing") == []


def test_close_releases_data() -> None:
    source = MappingSource({"a": "1"})
    source.close()
    assert source.closed is True
    assert source.enumerate() == []
